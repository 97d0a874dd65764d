from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from betroyal.db.database import get_db
from betroyal.errors import NotFound
from betroyal.models.game import Game
from betroyal.schemas.game import GameResponse

router = APIRouter()


@router.get('', response_model=list[GameResponse])
async def list_games(db: AsyncSession = Depends(get_db)):
    """Full catalog, active and inactive."""
    result = await db.execute(select(Game).order_by(Game.id))
    return result.scalars().all()


@router.get('/{game_id}', response_model=GameResponse)
async def get_game(game_id: int, db: AsyncSession = Depends(get_db)):
    game = await db.get(Game, game_id)
    if not game:
        raise NotFound('Game not found')
    return game
