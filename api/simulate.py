"""Simulator — play seeded rounds of the catalog games for one account.

Each round is decided by the reference rules in betroyal.services.game_engine
and reported through the same GameResultReporter the API uses, so the
transaction log and balance end up exactly as if a client had played.

Usage (from the api directory):
    python simulate.py [username] [rounds] [seed]
"""
import asyncio
import random
import sys
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from betroyal.db.database import engine, async_session, init_db
from betroyal.errors import InsufficientBalance
from betroyal.models.game import Game
from betroyal.services import game_engine
from betroyal.services.account_store import AccountStore
from betroyal.services.game_reporter import GameResultReporter

BET = 50

# Crash players cash out somewhere in this band
CASH_OUT_RANGE = (1.1, 3.0)


def _play_slots(bet: int, rng: random.Random) -> game_engine.GameOutcome:
    return game_engine.spin_slots(bet, rng)


def _play_dice(bet: int, rng: random.Random) -> game_engine.GameOutcome:
    return game_engine.roll_dice(bet, rng.randint(1, game_engine.DICE_FACES), rng)


def _play_cards(bet: int, rng: random.Random) -> game_engine.GameOutcome:
    current = rng.choice(game_engine.CARD_VALUES)
    return game_engine.flip_card(bet, current, rng.random() < 0.5, rng)


def _play_crash(bet: int, rng: random.Random) -> game_engine.GameOutcome:
    cash_out_at = round(rng.uniform(*CASH_OUT_RANGE), 2)
    return game_engine.play_crash(bet, cash_out_at, rng)


# Game type -> player; types without reference rules are not simulated
PLAYERS = {
    'slots': _play_slots,
    'dice': _play_dice,
    'cards': _play_cards,
    'crash': _play_crash,
}


@dataclass
class SessionSummary:
    start_balance: int
    end_balance: int
    wins: int = 0
    losses: int = 0
    broke: bool = False
    per_game: dict[str, int] = field(default_factory=dict)

    @property
    def rounds(self) -> int:
        return self.wins + self.losses


async def play_session(
    db: AsyncSession,
    user_id: int,
    rounds: int,
    rng: random.Random,
    bet: int = BET,
) -> SessionSummary:
    """Play up to `rounds` rounds, stopping early if the balance runs out."""
    start_balance = (await AccountStore(db).get_user(user_id)).balance
    summary = SessionSummary(start_balance=start_balance, end_balance=start_balance)

    result = await db.execute(
        select(Game)
        .where(Game.is_active.is_(True), Game.type.in_(list(PLAYERS)))
        .order_by(Game.id)
    )
    games = list(result.scalars().all())
    if not games:
        return summary

    reporter = GameResultReporter(db)
    for _ in range(rounds):
        game = rng.choice(games)
        outcome = PLAYERS[game.type](bet, rng)
        try:
            summary.end_balance = await reporter.report(
                user_id, game.id, outcome.amount, outcome.is_win,
            )
        except InsufficientBalance:
            summary.broke = True
            break

        if outcome.is_win:
            summary.wins += 1
        else:
            summary.losses += 1
        summary.per_game[game.name] = summary.per_game.get(game.name, 0) + 1

    return summary


async def main():
    username = sys.argv[1] if len(sys.argv) > 1 else 'alice'
    rounds = int(sys.argv[2]) if len(sys.argv) > 2 else 100
    seed = int(sys.argv[3]) if len(sys.argv) > 3 else 42

    print()
    print('=' * 50)
    print('  BetRoyal Game Simulator')
    print('=' * 50)
    print()

    await init_db()
    async with async_session() as db:
        user = await AccountStore(db).get_user_by_username(username)
        if not user:
            print(f'No user named {username}. Run seed.py first.')
            await engine.dispose()
            return

        print(f'Playing {rounds} rounds of {BET} coins as {user.username} (seed {seed})...')
        summary = await play_session(db, user.id, rounds, random.Random(seed))
        await db.commit()

    await engine.dispose()

    print()
    for name, count in sorted(summary.per_game.items()):
        print(f'  {name}: {count} rounds')
    print()
    print(f'  Wins: {summary.wins}, losses: {summary.losses}')
    print(f'  Balance: {summary.start_balance} -> {summary.end_balance}')
    if summary.broke:
        print('  Stopped early: balance ran out')
    print()


if __name__ == '__main__':
    asyncio.run(main())
