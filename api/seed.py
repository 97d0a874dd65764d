"""Seed script — wipe all data and create fresh test accounts ready for testing.

Usage (from the api directory):
    python seed.py
"""
import asyncio

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from betroyal.db.database import engine, async_session, init_db
from betroyal.models import Game, Transaction, User
from betroyal.schemas.user import UserCreate
from betroyal.services.account_store import AccountStore
from betroyal.services.bootstrap import ensure_admin, ensure_games
from betroyal.services.ledger_service import LedgerService


# Test accounts to create
TEST_USERS = [
    {
        'username': 'alice',
        'email': 'alice@example.com',
        'full_name': 'Alice',
        'deposit': 10_000,
    },
    {
        'username': 'bob',
        'email': 'bob@example.com',
        'full_name': 'Bob',
        'deposit': 2_500,
    },
    {
        'username': 'eve',
        'email': 'eve@example.com',
        'full_name': 'Eve',
        'deposit': 0,
    },
]
TEST_PASSWORD = 'password123'


async def wipe_all(db: AsyncSession):
    """Delete all rows in dependency-safe order."""
    for model in (Transaction, Game, User):
        await db.execute(delete(model))
    await db.commit()
    print('✓ All tables wiped')


async def create_users(db: AsyncSession):
    """Create test users; deposits go through the ledger so balances reconcile."""
    accounts = AccountStore(db)
    ledger = LedgerService(db)
    for u in TEST_USERS:
        user = await accounts.create_user(UserCreate(
            username=u['username'],
            password=TEST_PASSWORD,
            email=u['email'],
            full_name=u['full_name'],
        ))
        if u['deposit']:
            await ledger.apply_deposit(
                user.id, u['deposit'], method='Bank Transfer', notes='Seed deposit',
            )
        balance = await ledger.get_balance(user.id)
        print(f'  ✓ {u["full_name"]} ({u["username"]}) — {balance} coins, id={user.id}')

    await db.commit()


async def main():
    print()
    print('=' * 50)
    print('  BetRoyal Seed Script')
    print('=' * 50)
    print()

    await init_db()
    async with async_session() as db:
        print('[1/3] Wiping all data...')
        await wipe_all(db)

        print('[2/3] Creating admin and demo games...')
        await ensure_admin(db)
        await ensure_games(db)
        await db.commit()

        print('[3/3] Creating test users...')
        await create_users(db)

    await engine.dispose()

    print()
    print('Done! Ready for testing.')
    print()
    print(f'  Users (password: {TEST_PASSWORD}):')
    for u in TEST_USERS:
        print(f'    {u["username"]}')
    print()


if __name__ == '__main__':
    asyncio.run(main())
