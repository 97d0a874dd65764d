"""Account store — the only code that writes users.balance."""
import logging

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import generate_password_hash

from betroyal.config import settings
from betroyal.errors import DuplicateIdentifier
from betroyal.models.user import User, UserRole
from betroyal.schemas.user import UserCreate

logger = logging.getLogger(__name__)

# Largest value the BigInteger balance column holds
MAX_BALANCE = 2**63 - 1


class AccountStore:
    """Creates and reads user records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_user(
        self,
        registration: UserCreate,
        role: UserRole = UserRole.USER,
    ) -> User:
        """Register a user with the starting balance. Usernames are case-insensitive."""
        if await self.get_user_by_username(registration.username):
            raise DuplicateIdentifier()

        user = User(
            username=registration.username,
            password_hash=generate_password_hash(registration.password),
            email=registration.email,
            full_name=registration.full_name,
            mobile_number=registration.mobile_number,
            balance=settings.starting_balance,
            role=role.value,
            is_active=True,
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            # A concurrent registration took the name after the lookup above
            logger.warning('Username %s taken concurrently', registration.username)
            raise DuplicateIdentifier()
        await self.db.refresh(user)
        logger.info('Created %s %s (id=%s)', role.value, user.username, user.id)
        return user

    async def get_user(self, user_id: int) -> User | None:
        # populate_existing: balance may have moved under an UPDATE statement
        return await self.db.get(User, user_id, populate_existing=True)

    async def get_user_by_username(self, username: str) -> User | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.username) == username.lower())
        )
        return result.scalar_one_or_none()

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def set_balance(self, user_id: int, new_balance: int) -> User | None:
        """Overwrite the balance with no bounds check. Maintenance use only."""
        user = await self.get_user(user_id)
        if not user:
            return None
        user.balance = new_balance
        await self.db.flush()
        return user

    async def adjust_balance(self, user_id: int, delta: int) -> int | None:
        """Add delta to the balance in one conditional UPDATE.

        Returns the new balance, or None when the user does not exist or the
        balance would leave the range 0..MAX_BALANCE. The row is only touched
        when the condition holds, so concurrent callers can never overdraw.
        """
        # Bound computed here so the database never evaluates an overflowing sum
        if delta >= 0:
            in_range = User.balance <= MAX_BALANCE - delta
        else:
            in_range = User.balance >= -delta
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id, in_range)
            .values(balance=User.balance + delta)
            .returning(User.balance)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none()

    async def set_active(self, user_id: int, is_active: bool) -> User | None:
        user = await self.get_user(user_id)
        if not user:
            return None
        user.is_active = is_active
        await self.db.flush()
        logger.info('User %s is_active=%s', user_id, is_active)
        return user
