from datetime import datetime
from enum import Enum
from sqlalchemy import String, BigInteger, DateTime, CheckConstraint, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from betroyal.db.database import Base


class UserRole(str, Enum):
    """Account role."""
    USER = 'user'
    ADMIN = 'admin'


class User(Base):
    """Player or admin account. Balance is only changed through the ledger."""

    __tablename__ = 'users'

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255))
    full_name: Mapped[str | None] = mapped_column(String(100), default=None)
    mobile_number: Mapped[str | None] = mapped_column(String(30), default=None)

    # Coin balance, set from settings.starting_balance at registration
    balance: Mapped[int] = mapped_column(BigInteger)

    role: Mapped[str] = mapped_column(String(10), default=UserRole.USER.value)
    is_active: Mapped[bool] = mapped_column(default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    transactions: Mapped[list['Transaction']] = relationship(
        'Transaction', back_populates='user', order_by='Transaction.id'
    )

    __table_args__ = (
        CheckConstraint('balance >= 0', name='ck_users_balance_non_negative'),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


# Usernames are unique regardless of case
Index('uq_users_username_lower', func.lower(User.username), unique=True)
