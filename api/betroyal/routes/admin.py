"""Admin back-office. Every route requires an admin session."""
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from betroyal.db.database import get_db
from betroyal.deps import require_admin
from betroyal.errors import NotFound
from betroyal.models.game import Game
from betroyal.models.transaction import Transaction, TransactionType, TransactionStatus
from betroyal.models.user import User
from betroyal.schemas.admin import AdminStats
from betroyal.schemas.game import GameCreate, GameUpdate, GameResponse
from betroyal.schemas.transaction import TransactionResponse
from betroyal.schemas.user import UserResponse, UserStatusUpdate
from betroyal.services.account_store import AccountStore
from betroyal.services.ledger_service import LedgerService
from betroyal.services.transaction_log import TransactionLog

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


# --- Users ---

@router.get('/users', response_model=list[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await AccountStore(db).list_users()


@router.patch('/users/{user_id}', response_model=UserResponse)
async def update_user_status(
    user_id: int,
    data: UserStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Suspend or reactivate an account."""
    user = await AccountStore(db).set_active(user_id, data.is_active)
    if not user:
        raise NotFound('User not found')
    return user


# --- Games ---

@router.post('/games', response_model=GameResponse, status_code=status.HTTP_201_CREATED)
async def create_game(data: GameCreate, db: AsyncSession = Depends(get_db)):
    game = Game(**data.model_dump())
    db.add(game)
    await db.flush()
    await db.refresh(game)
    logger.info('Created game %s (%s)', game.id, game.name)
    return game


@router.patch('/games/{game_id}', response_model=GameResponse)
async def update_game(
    game_id: int,
    data: GameUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partial update of a catalog entry."""
    game = await db.get(Game, game_id)
    if not game:
        raise NotFound('Game not found')

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(game, field, value)

    await db.flush()
    await db.refresh(game)
    return game


@router.delete('/games/{game_id}', status_code=status.HTTP_204_NO_CONTENT)
async def delete_game(game_id: int, db: AsyncSession = Depends(get_db)):
    game = await db.get(Game, game_id)
    if not game:
        raise NotFound('Game not found')
    await db.delete(game)
    logger.info('Deleted game %s', game_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Transactions ---

@router.get('/transactions', response_model=list[TransactionResponse])
async def list_transactions(db: AsyncSession = Depends(get_db)):
    """Every transaction, oldest first."""
    return await TransactionLog(db).list_all()


@router.post('/transactions/{transaction_id}/complete', response_model=TransactionResponse)
async def complete_deposit(transaction_id: int, db: AsyncSession = Depends(get_db)):
    """Confirm a manual payment and credit the deposit."""
    return await LedgerService(db).complete_deposit(transaction_id)


@router.post('/transactions/{transaction_id}/fail', response_model=TransactionResponse)
async def fail_deposit(transaction_id: int, db: AsyncSession = Depends(get_db)):
    return await LedgerService(db).fail_deposit(transaction_id)


# --- Dashboard ---

@router.get('/stats', response_model=AdminStats)
async def get_stats(db: AsyncSession = Depends(get_db)):
    total_users = await db.scalar(select(func.count()).select_from(User))
    active_users = await db.scalar(
        select(func.count()).select_from(User).where(User.is_active.is_(True))
    )
    total_games = await db.scalar(select(func.count()).select_from(Game))
    active_games = await db.scalar(
        select(func.count()).select_from(Game).where(Game.is_active.is_(True))
    )

    async def completed_sum(kind: TransactionType) -> int:
        return await db.scalar(
            select(func.coalesce(func.sum(Transaction.amount), 0)).where(
                Transaction.type == kind.value,
                Transaction.status == TransactionStatus.COMPLETED.value,
            )
        )

    pending_deposits = await db.scalar(
        select(func.count()).select_from(Transaction).where(
            Transaction.type == TransactionType.DEPOSIT.value,
            Transaction.status == TransactionStatus.PENDING.value,
        )
    )

    return AdminStats(
        total_users=total_users or 0,
        active_users=active_users or 0,
        total_games=total_games or 0,
        active_games=active_games or 0,
        total_deposits=await completed_sum(TransactionType.DEPOSIT),
        total_withdrawals=await completed_sum(TransactionType.WITHDRAWAL),
        pending_deposits=pending_deposits or 0,
    )
