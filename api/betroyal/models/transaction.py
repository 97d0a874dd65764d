from datetime import datetime
from enum import Enum
from sqlalchemy import String, BigInteger, ForeignKey, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from betroyal.db.database import Base


class TransactionType(str, Enum):
    """Kind of balance-affecting event."""
    # Credits
    DEPOSIT = 'deposit'
    WIN = 'win'

    # Debits
    WITHDRAWAL = 'withdrawal'
    LOSS = 'loss'

    @property
    def sign(self) -> int:
        return 1 if self in (TransactionType.DEPOSIT, TransactionType.WIN) else -1


class TransactionStatus(str, Enum):
    """Lifecycle of a transaction. Only completed rows count toward the balance."""
    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'


class Transaction(Base):
    """Transaction log — one row per balance-affecting event."""

    __tablename__ = 'transactions'

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey('users.id', ondelete='CASCADE'), index=True
    )

    # Unsigned magnitude; the type carries the sign
    amount: Mapped[int] = mapped_column(BigInteger)
    type: Mapped[str] = mapped_column(String(20))
    method: Mapped[str | None] = mapped_column(String(50), default=None)
    status: Mapped[str] = mapped_column(
        String(20), default=TransactionStatus.COMPLETED.value
    )
    notes: Mapped[str | None] = mapped_column(String(200), default=None)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped['User'] = relationship('User', back_populates='transactions')

    __table_args__ = (
        Index('ix_transactions_status_created', 'status', 'created_at'),
    )

    @property
    def signed_amount(self) -> int:
        return TransactionType(self.type).sign * self.amount
