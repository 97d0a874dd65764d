from betroyal.schemas.user import UserCreate, LoginRequest, UserResponse, UserStatusUpdate
from betroyal.schemas.game import GameCreate, GameUpdate, GameResponse
from betroyal.schemas.transaction import (
    TransactionCreate,
    TransactionResponse,
    GameResultCreate,
    GameResultResponse,
)
from betroyal.schemas.admin import AdminStats

__all__ = [
    'UserCreate',
    'LoginRequest',
    'UserResponse',
    'UserStatusUpdate',
    'GameCreate',
    'GameUpdate',
    'GameResponse',
    'TransactionCreate',
    'TransactionResponse',
    'GameResultCreate',
    'GameResultResponse',
    'AdminStats',
]
