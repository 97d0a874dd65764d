from datetime import datetime
from pydantic import Field

from betroyal.schemas.base import CamelModel


class UserCreate(CamelModel):
    """Registration payload."""
    username: str = Field(..., min_length=3, max_length=50, pattern=r'^[a-zA-Z0-9_.]+$')
    password: str = Field(..., min_length=6, max_length=128)
    email: str = Field(..., max_length=255, pattern=r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
    full_name: str | None = Field(None, max_length=100)
    mobile_number: str | None = Field(None, max_length=30)


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(CamelModel):
    """User as returned to clients. Never includes the password hash."""
    id: int
    username: str
    email: str
    full_name: str | None
    mobile_number: str | None
    balance: int
    role: str
    is_active: bool
    created_at: datetime


class UserStatusUpdate(CamelModel):
    """Admin suspend/activate payload."""
    is_active: bool
