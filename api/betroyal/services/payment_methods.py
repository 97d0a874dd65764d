"""Manual payment instructions shown on the deposit page."""
from dataclasses import dataclass, field, asdict

from pydantic.alias_generators import to_camel


@dataclass(frozen=True)
class PaymentMethod:
    name: str
    instructions: list[str]
    account_type: str | None = None
    number: str | None = None
    details: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {to_camel(key): value for key, value in asdict(self).items()}


PAYMENT_METHODS: dict[str, PaymentMethod] = {
    'Nagad': PaymentMethod(
        name='Nagad',
        account_type='Personal',
        number='9856000698038516',
        instructions=[
            'Open your Nagad app',
            "Select 'Send Money'",
            'Enter the number: 9856000698038516',
            'Enter the amount you want to deposit',
            'Add your name in the reference',
            'Complete the payment and note the Transaction ID',
            'Enter the Transaction ID below',
        ],
    ),
    'bKash': PaymentMethod(
        name='bKash',
        account_type='Merchant',
        number='01712345678',
        instructions=[
            'Open your bKash app',
            "Select 'Send Money'",
            'Enter the number: 01712345678',
            'Enter the amount you want to deposit',
            'Add your name in the reference',
            'Complete the payment and note the Transaction ID',
            'Enter the Transaction ID below',
        ],
    ),
    'SSLCommerz': PaymentMethod(
        name='SSLCommerz',
        instructions=[
            'Choose SSLCommerz as your payment method',
            'Enter the amount you want to deposit',
            "Click 'Continue' to be redirected to the SSLCommerz payment gateway",
            'Choose your preferred payment option (credit/debit card, mobile banking, etc.)',
            'Complete the payment process',
            "You'll be redirected back upon completion",
        ],
    ),
    'Bank Transfer': PaymentMethod(
        name='Bank Transfer',
        details={
            'accountName': 'BetRoyal Limited',
            'accountNumber': '2010145632',
            'bankName': 'Bangladesh Bank',
            'branchName': 'Gulshan Branch',
        },
        instructions=[
            'Transfer the amount to the account details provided',
            'Use your username as the reference',
            'After completing the transfer, enter the transaction reference number below',
        ],
    ),
}

# Payment references (bKash TrxID, bank reference...) are at least this long
MIN_REFERENCE_LENGTH = 6


def is_known_method(name: str | None) -> bool:
    return name in PAYMENT_METHODS
