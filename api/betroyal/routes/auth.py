from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from betroyal.db.database import get_db
from betroyal.deps import SESSION_USER_KEY, get_current_user
from betroyal.models.user import User
from betroyal.schemas.user import UserCreate, LoginRequest, UserResponse
from betroyal.services.account_store import AccountStore
from betroyal.services.auth_service import authenticate

router = APIRouter()


@router.post('/register', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Create an account with the starting balance and log it in."""
    user = await AccountStore(db).create_user(data)
    request.session[SESSION_USER_KEY] = user.id
    return user


@router.post('/login', response_model=UserResponse)
async def login(
    data: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    user = await authenticate(db, data.username, data.password)
    request.session[SESSION_USER_KEY] = user.id
    return user


@router.post('/logout')
async def logout(request: Request):
    request.session.clear()
    return {'status': 'logged_out'}


@router.get('/user', response_model=UserResponse)
async def current_user(user: User = Depends(get_current_user)):
    """Current user, including a fresh balance."""
    return user
