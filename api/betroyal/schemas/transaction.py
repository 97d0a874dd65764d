from datetime import datetime
from pydantic import Field

from betroyal.models.transaction import TransactionType, TransactionStatus
from betroyal.schemas.base import CamelModel


class TransactionCreate(CamelModel):
    """Deposit / withdrawal / bet request for the authenticated user.

    The amount is checked by the ledger, not here, so that a non-positive
    amount is reported as an invalid amount rather than a schema error.
    """
    amount: int
    type: TransactionType
    method: str | None = Field(None, max_length=50)
    status: TransactionStatus = TransactionStatus.COMPLETED
    notes: str | None = Field(None, max_length=200)


class TransactionResponse(CamelModel):
    id: int
    user_id: int
    amount: int
    type: str
    method: str | None
    status: str
    notes: str | None
    created_at: datetime


class GameResultCreate(CamelModel):
    """Outcome of a round decided by the client."""
    game_id: int
    amount: int
    is_win: bool


class GameResultResponse(CamelModel):
    success: bool = True
    new_balance: int
