"""Game result reporter — hands a decided round to the ledger."""
from sqlalchemy.ext.asyncio import AsyncSession

from betroyal.errors import NotFound
from betroyal.models.game import Game
from betroyal.services.ledger_service import LedgerService


class GameResultReporter:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.ledger = LedgerService(db)

    async def report(
        self,
        user_id: int | None,
        game_id: int,
        amount: int,
        is_win: bool,
    ) -> int:
        """Apply a round's win or loss and return the new balance."""
        game = await self.db.get(Game, game_id)
        if not game or not game.is_active:
            raise NotFound('Game not found')

        return await self.ledger.apply_game_result(
            user_id, amount, is_win, notes=f'{game.name} ({game.type})',
        )
