import asyncio
import random
from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from betroyal.config import settings
from betroyal.db.database import Base
from betroyal.errors import (
    InsufficientBalance, InvalidAmount, InvalidTransition, NotFound, Unauthenticated,
    ValidationFailure,
)
from betroyal.models.transaction import TransactionType, TransactionStatus
from betroyal.schemas.user import UserCreate
from betroyal.services.account_store import AccountStore, MAX_BALANCE
from betroyal.services.ledger_service import LedgerService
from betroyal.services.transaction_log import TransactionLog

STARTING_BALANCE = 5000


async def _completed_sum(db, user_id: int) -> int:
    rows = await TransactionLog(db).list_for_user(user_id)
    return sum(r.signed_amount for r in rows if r.status == TransactionStatus.COMPLETED.value)


async def test_deposit_loss_then_rejected_withdrawal(db_session, user):
    ledger = LedgerService(db_session)

    deposit = await ledger.apply_deposit(user.id, 1000, method='bKash')
    assert await ledger.get_balance(user.id) == 6000
    rows = await TransactionLog(db_session).list_for_user(user.id)
    assert [(r.type, r.amount) for r in rows] == [('deposit', 1000)]
    assert deposit.status == 'completed'

    assert await ledger.apply_game_result(user.id, 200, is_win=False) == 5800

    with pytest.raises(InsufficientBalance):
        await ledger.apply_withdrawal(user.id, 10_000)
    assert await ledger.get_balance(user.id) == 5800
    assert len(await TransactionLog(db_session).list_for_user(user.id)) == 2


async def test_balance_matches_completed_transactions(db_session, user):
    ledger = LedgerService(db_session)
    rng = random.Random(7)

    for _ in range(60):
        kind = rng.choice(list(TransactionType))
        amount = rng.randint(1, 3000)
        try:
            await ledger.apply_transaction(user.id, kind, amount)
        except InsufficientBalance:
            pass

    balance = await ledger.get_balance(user.id)
    assert balance >= 0
    assert balance == STARTING_BALANCE + await _completed_sum(db_session, user.id)


async def test_debit_above_balance_writes_nothing(db_session, user):
    ledger = LedgerService(db_session)

    with pytest.raises(InsufficientBalance):
        await ledger.apply_game_result(user.id, 5001, is_win=False)
    with pytest.raises(InsufficientBalance):
        await ledger.apply_transaction(user.id, TransactionType.WITHDRAWAL, 5001)

    assert await ledger.get_balance(user.id) == STARTING_BALANCE
    assert await TransactionLog(db_session).list_for_user(user.id) == []


async def test_loss_of_entire_balance_is_allowed(db_session, user):
    ledger = LedgerService(db_session)
    assert await ledger.apply_game_result(user.id, 5000, is_win=False) == 0


@pytest.mark.parametrize('amount', [1, 17, 100_000])
async def test_deposit_adds_exactly_the_amount(db_session, user, amount):
    ledger = LedgerService(db_session)
    await ledger.apply_deposit(user.id, amount)
    assert await ledger.get_balance(user.id) == STARTING_BALANCE + amount


async def test_win_credits_magnitude(db_session, user):
    ledger = LedgerService(db_session)
    assert await ledger.apply_game_result(user.id, 150, is_win=True) == 5150
    rows = await TransactionLog(db_session).list_for_user(user.id)
    assert rows[-1].type == 'win'
    assert rows[-1].method == 'game'


async def test_requires_authenticated_actor(db_session):
    ledger = LedgerService(db_session)
    with pytest.raises(Unauthenticated):
        await ledger.apply_game_result(None, 10, is_win=True)
    with pytest.raises(Unauthenticated):
        await ledger.apply_deposit(None, 10)


@pytest.mark.parametrize('amount', [0, -5, True, 2.5])
async def test_rejects_non_positive_or_non_integer_amount(db_session, user, amount):
    ledger = LedgerService(db_session)
    with pytest.raises(InvalidAmount):
        await ledger.apply_game_result(user.id, amount, is_win=True)
    with pytest.raises(InvalidAmount):
        await ledger.apply_deposit(user.id, amount)


@pytest.mark.parametrize('amount', [settings.max_amount + 1, 10**19])
async def test_rejects_amount_above_limit(db_session, user, amount):
    ledger = LedgerService(db_session)
    with pytest.raises(InvalidAmount):
        await ledger.apply_deposit(user.id, amount)
    with pytest.raises(InvalidAmount):
        await ledger.apply_game_result(user.id, amount, is_win=True)

    assert await ledger.get_balance(user.id) == STARTING_BALANCE
    assert await TransactionLog(db_session).list_for_user(user.id) == []


async def test_win_cannot_overflow_balance_column(db_session, user):
    ledger = LedgerService(db_session)
    await AccountStore(db_session).set_balance(user.id, MAX_BALANCE - 10)

    with pytest.raises(InvalidAmount):
        await ledger.apply_game_result(user.id, 11, is_win=True)
    assert await ledger.get_balance(user.id) == MAX_BALANCE - 10
    assert await TransactionLog(db_session).list_for_user(user.id) == []

    assert await ledger.apply_game_result(user.id, 10, is_win=True) == MAX_BALANCE
    assert await ledger.apply_game_result(user.id, 10, is_win=False) == MAX_BALANCE - 10


async def test_unknown_user_is_not_found(db_session, setup_db):
    ledger = LedgerService(db_session)
    with pytest.raises(NotFound):
        await ledger.apply_game_result(404, 10, is_win=False)
    with pytest.raises(NotFound):
        await ledger.get_balance(404)


async def test_concurrent_losses_never_lose_an_update(tmp_path):
    # Separate connections on a file database so the two requests really race
    race_engine = create_async_engine(
        f'sqlite+aiosqlite:///{tmp_path / "race.db"}', poolclass=NullPool,
    )
    Session = async_sessionmaker(race_engine, class_=AsyncSession, expire_on_commit=False)
    async with race_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with Session() as db:
        accounts = AccountStore(db)
        user = await accounts.create_user(UserCreate(
            username='racer', password='secret123', email='racer@example.com',
        ))
        await accounts.set_balance(user.id, 100)
        await db.commit()

    async def lose(amount: int) -> int:
        async with Session() as db:
            new_balance = await LedgerService(db).apply_game_result(user.id, amount, is_win=False)
            await db.commit()
            return new_balance

    try:
        results = await asyncio.gather(lose(50), lose(50))
        assert sorted(results) == [0, 50]

        async with Session() as db:
            ledger = LedgerService(db)
            assert await ledger.get_balance(user.id) == 0
            assert len(await TransactionLog(db).list_for_user(user.id)) == 2
            with pytest.raises(InsufficientBalance):
                await ledger.apply_game_result(user.id, 50, is_win=False)
    finally:
        await race_engine.dispose()


# --- Pending deposits ---

async def _pending(ledger, user_id, amount=1000, method='bKash', notes='TRX8842017'):
    return await ledger.apply_deposit(
        user_id, amount, method=method, status=TransactionStatus.PENDING, notes=notes,
    )


async def test_pending_deposit_holds_balance_until_completed(db_session, user):
    ledger = LedgerService(db_session)

    entry = await _pending(ledger, user.id)
    assert entry.status == 'pending'
    assert await ledger.get_balance(user.id) == STARTING_BALANCE

    completed = await ledger.complete_deposit(entry.id)
    assert completed.status == 'completed'
    assert await ledger.get_balance(user.id) == STARTING_BALANCE + 1000
    assert await ledger.get_balance(user.id) == STARTING_BALANCE + await _completed_sum(db_session, user.id)

    with pytest.raises(InvalidTransition):
        await ledger.complete_deposit(entry.id)
    assert await ledger.get_balance(user.id) == STARTING_BALANCE + 1000


async def test_failed_deposit_never_credits(db_session, user):
    ledger = LedgerService(db_session)
    entry = await _pending(ledger, user.id)

    failed = await ledger.fail_deposit(entry.id)
    assert failed.status == 'failed'
    with pytest.raises(InvalidTransition):
        await ledger.complete_deposit(entry.id)
    assert await ledger.get_balance(user.id) == STARTING_BALANCE


async def test_only_deposits_can_be_pending_or_settled(db_session, user):
    ledger = LedgerService(db_session)
    with pytest.raises(InvalidTransition):
        await ledger.apply_transaction(
            user.id, TransactionType.WITHDRAWAL, 100, status=TransactionStatus.PENDING,
        )

    loss = await ledger.apply_transaction(user.id, TransactionType.LOSS, 100)
    with pytest.raises(InvalidTransition):
        await ledger.complete_deposit(loss.id)
    with pytest.raises(NotFound):
        await ledger.fail_deposit(9999)


async def test_new_transactions_cannot_start_failed(db_session, user):
    ledger = LedgerService(db_session)
    with pytest.raises(InvalidTransition):
        await ledger.apply_deposit(user.id, 100, status=TransactionStatus.FAILED)


@pytest.mark.parametrize('amount, method, notes, error', [
    (99, 'bKash', 'TRX8842017', InvalidAmount),
    (100_001, 'bKash', 'TRX8842017', InvalidAmount),
    (1000, 'PayPal', 'TRX8842017', ValidationFailure),
    (1000, 'Nagad', 'abc', ValidationFailure),
    (1000, 'Nagad', None, ValidationFailure),
])
async def test_pending_deposit_validation(db_session, user, amount, method, notes, error):
    ledger = LedgerService(db_session)
    with pytest.raises(error):
        await _pending(ledger, user.id, amount=amount, method=method, notes=notes)
    assert await TransactionLog(db_session).list_for_user(user.id) == []


async def test_expire_pending_deposits(db_session, user):
    ledger = LedgerService(db_session)
    stale = await _pending(ledger, user.id)
    fresh = await _pending(ledger, user.id, amount=500)
    stale.created_at = datetime.utcnow() - timedelta(hours=72)
    await db_session.flush()

    assert await ledger.expire_pending_deposits() == 1

    log = TransactionLog(db_session)
    assert (await log.get(stale.id)).status == 'failed'
    assert (await log.get(fresh.id)).status == 'pending'
    assert await ledger.get_balance(user.id) == STARTING_BALANCE
