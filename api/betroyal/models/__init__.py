from betroyal.models.user import User, UserRole
from betroyal.models.game import Game
from betroyal.models.transaction import Transaction, TransactionType, TransactionStatus

__all__ = [
    'User',
    'UserRole',
    'Game',
    'Transaction',
    'TransactionType',
    'TransactionStatus',
]
