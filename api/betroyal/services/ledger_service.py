"""Balance ledger — every coin movement goes through here.

A request is validated, then the balance is moved with a single conditional
UPDATE and the transaction row is written in the same database transaction.
A rejected request writes nothing.
"""
import logging
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from betroyal.config import settings
from betroyal.errors import (
    InsufficientBalance, InvalidAmount, InvalidTransition, NotFound, Unauthenticated,
    ValidationFailure,
)
from betroyal.models.transaction import Transaction, TransactionType, TransactionStatus
from betroyal.services.account_store import AccountStore
from betroyal.services.payment_methods import MIN_REFERENCE_LENGTH, is_known_method
from betroyal.services.transaction_log import TransactionLog

logger = logging.getLogger(__name__)


def _check_amount(amount) -> int:
    # bool is an int subclass; True is not an amount
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount()
    if amount > settings.max_amount:
        raise InvalidAmount(f'Amount must not exceed {settings.max_amount}')
    return amount


class LedgerService:
    """Validates and applies balance-affecting requests."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.accounts = AccountStore(db)
        self.log = TransactionLog(db)

    async def apply_transaction(
        self,
        user_id: int | None,
        kind: TransactionType,
        amount: int,
        method: str | None = None,
        status: TransactionStatus = TransactionStatus.COMPLETED,
        notes: str | None = None,
    ) -> Transaction:
        """Generic entry point behind POST /api/transactions."""
        if user_id is None:
            raise Unauthenticated()
        amount = _check_amount(amount)

        if status == TransactionStatus.PENDING:
            return await self._submit_pending_deposit(user_id, kind, amount, method, notes)
        if status != TransactionStatus.COMPLETED:
            raise InvalidTransition('New transactions must be pending or completed')

        await self._move(user_id, kind.sign * amount)
        entry = await self.log.append(user_id, amount, kind, method, status, notes)
        logger.info(
            'Applied %s of %s for user %s (tx=%s)', kind.value, amount, user_id, entry.id,
        )
        return entry

    async def apply_deposit(
        self,
        user_id: int | None,
        amount: int,
        method: str | None = None,
        status: TransactionStatus = TransactionStatus.COMPLETED,
        notes: str | None = None,
    ) -> Transaction:
        return await self.apply_transaction(
            user_id, TransactionType.DEPOSIT, amount, method, status, notes,
        )

    async def apply_withdrawal(
        self,
        user_id: int | None,
        amount: int,
        method: str | None = None,
        notes: str | None = None,
    ) -> Transaction:
        return await self.apply_transaction(
            user_id, TransactionType.WITHDRAWAL, amount, method, notes=notes,
        )

    async def apply_game_result(
        self,
        user_id: int | None,
        magnitude: int,
        is_win: bool,
        notes: str | None = None,
    ) -> int:
        """Credit a win or debit a loss. Returns the new balance."""
        if user_id is None:
            raise Unauthenticated()
        magnitude = _check_amount(magnitude)
        kind = TransactionType.WIN if is_win else TransactionType.LOSS

        new_balance = await self._move(user_id, kind.sign * magnitude)
        await self.log.append(user_id, magnitude, kind, method='game', notes=notes)
        logger.info(
            'Game %s of %s for user %s, balance now %s',
            kind.value, magnitude, user_id, new_balance,
        )
        return new_balance

    async def get_balance(self, user_id: int) -> int:
        user = await self.accounts.get_user(user_id)
        if not user:
            raise NotFound('User not found')
        return user.balance

    # ── Pending deposits ──────────────────────────────────────────────────────

    async def _submit_pending_deposit(
        self,
        user_id: int,
        kind: TransactionType,
        amount: int,
        method: str | None,
        notes: str | None,
    ) -> Transaction:
        """Record a manual-payment deposit. The balance moves on completion."""
        if kind != TransactionType.DEPOSIT:
            raise InvalidTransition('Only deposits can be submitted as pending')
        if not settings.min_deposit <= amount <= settings.max_deposit:
            raise InvalidAmount(
                f'Amount must be between {settings.min_deposit} and {settings.max_deposit}'
            )
        if not is_known_method(method):
            raise ValidationFailure(f'Unknown payment method: {method}')
        if not notes or len(notes.strip()) < MIN_REFERENCE_LENGTH:
            raise ValidationFailure(
                f'Payment reference must be at least {MIN_REFERENCE_LENGTH} characters'
            )
        if not await self.accounts.get_user(user_id):
            raise NotFound('User not found')

        entry = await self.log.append(
            user_id, amount, kind, method, TransactionStatus.PENDING, notes,
        )
        logger.info('Pending deposit %s of %s via %s for user %s', entry.id, amount, method, user_id)
        return entry

    async def complete_deposit(self, transaction_id: int) -> Transaction:
        """pending -> completed, crediting the balance."""
        entry = await self._pending_deposit(transaction_id)
        settled = await self.log.transition(
            entry.id, TransactionStatus.PENDING, TransactionStatus.COMPLETED,
        )
        if settled is None:
            raise InvalidTransition('Transaction is no longer pending')
        await self._move(settled.user_id, settled.amount)
        logger.info('Completed deposit %s (+%s for user %s)', settled.id, settled.amount, settled.user_id)
        return settled

    async def fail_deposit(self, transaction_id: int) -> Transaction:
        """pending -> failed. The balance is untouched."""
        entry = await self._pending_deposit(transaction_id)
        failed = await self.log.transition(
            entry.id, TransactionStatus.PENDING, TransactionStatus.FAILED,
        )
        if failed is None:
            raise InvalidTransition('Transaction is no longer pending')
        logger.info('Failed deposit %s for user %s', failed.id, failed.user_id)
        return failed

    async def expire_pending_deposits(self, max_age: timedelta | None = None) -> int:
        """Fail pending deposits older than max_age. Returns how many were expired."""
        if max_age is None:
            max_age = timedelta(hours=settings.pending_deposit_ttl_hours)
        cutoff = datetime.utcnow() - max_age

        expired = 0
        for entry in await self.log.list_pending_deposits(older_than=cutoff):
            if await self.log.transition(
                entry.id, TransactionStatus.PENDING, TransactionStatus.FAILED,
            ):
                expired += 1
        return expired

    async def _pending_deposit(self, transaction_id: int) -> Transaction:
        entry = await self.log.get(transaction_id)
        if not entry:
            raise NotFound('Transaction not found')
        if entry.type != TransactionType.DEPOSIT.value:
            raise InvalidTransition('Only deposits can be settled')
        if entry.status != TransactionStatus.PENDING.value:
            raise InvalidTransition(f'Transaction is already {entry.status}')
        return entry

    # ── Balance movement ──────────────────────────────────────────────────────

    async def _move(self, user_id: int, delta: int) -> int:
        new_balance = await self.accounts.adjust_balance(user_id, delta)
        if new_balance is None:
            user = await self.accounts.get_user(user_id)
            if not user:
                raise NotFound('User not found')
            if delta > 0:
                logger.warning(
                    'Rejected credit of %s for user %s (balance %s)', delta, user_id, user.balance,
                )
                raise InvalidAmount('Balance limit exceeded')
            logger.warning(
                'Rejected debit of %s for user %s (balance %s)', -delta, user_id, user.balance,
            )
            raise InsufficientBalance()
        return new_balance
