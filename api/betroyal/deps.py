"""Request dependencies for session auth."""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from betroyal.db.database import get_db
from betroyal.errors import Forbidden, Unauthenticated
from betroyal.models.user import User
from betroyal.services.account_store import AccountStore

SESSION_USER_KEY = 'user_id'


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """The logged-in user, re-read from the database on every request."""
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        raise Unauthenticated()

    user = await AccountStore(db).get_user(user_id)
    if not user:
        request.session.clear()
        raise Unauthenticated()
    if not user.is_active:
        raise Forbidden('Account suspended')
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise Forbidden('Admin access required')
    return user
