from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from betroyal.db.database import get_db
from betroyal.deps import get_current_user
from betroyal.models.user import User
from betroyal.schemas.transaction import (
    TransactionCreate, TransactionResponse, GameResultCreate, GameResultResponse,
)
from betroyal.services.game_reporter import GameResultReporter
from betroyal.services.ledger_service import LedgerService
from betroyal.services.payment_methods import PAYMENT_METHODS
from betroyal.services.transaction_log import TransactionLog

router = APIRouter()


@router.post(
    '/transactions',
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_transaction(
    data: TransactionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Deposit, withdraw or stake for the logged-in user.

    Completed requests move the balance immediately. Deposits submitted as
    pending wait for an admin to complete or fail them.
    """
    ledger = LedgerService(db)
    return await ledger.apply_transaction(
        user.id,
        data.type,
        data.amount,
        method=data.method,
        status=data.status,
        notes=data.notes,
    )


@router.get('/transactions', response_model=list[TransactionResponse])
async def list_my_transactions(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The caller's transactions, oldest first."""
    return await TransactionLog(db).list_for_user(user.id)


@router.post('/game-result', response_model=GameResultResponse)
async def report_game_result(
    data: GameResultCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    reporter = GameResultReporter(db)
    new_balance = await reporter.report(user.id, data.game_id, data.amount, data.is_win)
    return GameResultResponse(success=True, new_balance=new_balance)


@router.get('/payment-methods')
async def list_payment_methods():
    """Manual payment instructions for the deposit page."""
    return [method.to_dict() for method in PAYMENT_METHODS.values()]
