"""Default admin account and demo catalog for a fresh database."""
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from betroyal.config import settings
from betroyal.models.game import Game
from betroyal.models.user import UserRole
from betroyal.schemas.user import UserCreate
from betroyal.services.account_store import AccountStore

logger = logging.getLogger(__name__)

DEMO_GAMES = [
    {
        'name': 'Spaceman Crash',
        'type': 'crash',
        'image': 'https://images.unsplash.com/photo-1485356824219-4bc17c2a2ea7?auto=format&fit=crop&w=800&h=500',
        'description': 'Watch the rocket fly and cash out before it crashes for big wins!',
        'players_count': 2450,
        'rating': 5,
    },
    {
        'name': 'Royal Slots',
        'type': 'slots',
        'image': None,
        'description': 'Classic slot machine game with exciting bonuses',
        'players_count': 1200,
        'rating': 4,
    },
    {
        'name': 'Lucky Dice',
        'type': 'dice',
        'image': 'https://images.unsplash.com/photo-1518548419970-58e3b4079ab2?auto=format&fit=crop&w=800&h=500',
        'description': 'Test your luck with our dice game',
        'players_count': 856,
        'rating': 4,
    },
    {
        'name': 'VIP Poker',
        'type': 'cards',
        'image': None,
        'description': 'Premium poker experience for high rollers',
        'players_count': 1500,
        'rating': 5,
    },
    {
        'name': 'Royal Roulette',
        'type': 'roulette',
        'image': 'https://images.unsplash.com/photo-1606167668584-78701c57f13d?auto=format&fit=crop&w=800&h=500',
        'description': 'Classic roulette with multiple betting options',
        'players_count': 923,
        'rating': 4,
    },
]


async def ensure_admin(db: AsyncSession):
    """Create the configured admin account if it does not exist (idempotent)."""
    accounts = AccountStore(db)
    if await accounts.get_user_by_username(settings.admin_username):
        return None
    return await accounts.create_user(
        UserCreate(
            username=settings.admin_username,
            password=settings.admin_password,
            email=settings.admin_email,
            full_name='Admin User',
        ),
        role=UserRole.ADMIN,
    )


async def ensure_games(db: AsyncSession) -> int:
    """Insert the demo catalog into an empty games table. Returns rows added."""
    count = await db.scalar(select(func.count()).select_from(Game))
    if count:
        return 0
    for data in DEMO_GAMES:
        db.add(Game(is_active=True, **data))
    await db.flush()
    logger.info('Seeded %d demo games', len(DEMO_GAMES))
    return len(DEMO_GAMES)
