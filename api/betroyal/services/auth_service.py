"""Credential checks for username/password login."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash

from betroyal.errors import Forbidden, Unauthenticated
from betroyal.models.user import User
from betroyal.services.account_store import AccountStore

logger = logging.getLogger(__name__)


async def authenticate(db: AsyncSession, username: str, password: str) -> User:
    user = await AccountStore(db).get_user_by_username(username)
    if not user or not check_password_hash(user.password_hash, password):
        logger.warning('Failed login for %s', username)
        raise Unauthenticated('Invalid username or password')
    if not user.is_active:
        raise Forbidden('Account suspended')
    return user
