"""Reference outcome rules for the browser games.

Rounds are decided in the browser; these functions reproduce the same rules
server-side so that payouts can be checked and simulated. Every function takes
a random.Random so results are reproducible from a seed.
"""
import math
import random
from dataclasses import dataclass, field

SLOT_SYMBOLS = ['cherry', 'orange', 'grape', 'lemon', 'watermelon', 'seven', 'diamond']
SLOT_REELS = 3
SLOT_PAYOUT = 3

DICE_FACES = 6
DICE_PAYOUT = 5

CARD_VALUES = ['2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A']
CARD_SUITS = ['spades', 'hearts', 'diamonds', 'clubs']
CARD_PAYOUT = 2
# Chance that the next card lands on the side the player guessed
CARD_GUESS_BIAS = 0.6

CRASH_MIN = 1.0
CRASH_SPREAD = 10.0
# Multiplier grows linearly by this much per second of flight
CRASH_RATE = 0.5


@dataclass
class GameOutcome:
    """A decided round.

    amount is what gets reported: the payout on a win, the stake on a loss.
    """
    is_win: bool
    amount: int
    detail: dict = field(default_factory=dict)


def _outcome(is_win: bool, bet: int, payout: int, detail: dict) -> GameOutcome:
    return GameOutcome(is_win=is_win, amount=bet * payout if is_win else bet, detail=detail)


def _check_bet(bet: int):
    if bet <= 0:
        raise ValueError('Bet must be positive')


def spin_slots(bet: int, rng: random.Random) -> GameOutcome:
    """Three reels; any two matching symbols win 3x."""
    _check_bet(bet)
    reels = [rng.choice(SLOT_SYMBOLS) for _ in range(SLOT_REELS)]
    is_win = len(set(reels)) < SLOT_REELS
    return _outcome(is_win, bet, SLOT_PAYOUT, {'reels': reels})


def roll_dice(bet: int, guess: int, rng: random.Random) -> GameOutcome:
    """Guess the face of one die; a hit pays 5x."""
    _check_bet(bet)
    if not 1 <= guess <= DICE_FACES:
        raise ValueError(f'Guess must be between 1 and {DICE_FACES}')
    roll = rng.randint(1, DICE_FACES)
    return _outcome(roll == guess, bet, DICE_PAYOUT, {'roll': roll, 'guess': guess})


def flip_card(bet: int, current: str, guess_higher: bool, rng: random.Random) -> GameOutcome:
    """Higher/lower on the next card; a correct call pays 2x.

    The next card is drawn from the guessed side with CARD_GUESS_BIAS
    probability. A card equal to the current one loses.
    """
    _check_bet(bet)
    index = CARD_VALUES.index(current)
    higher = list(range(index + 1, len(CARD_VALUES)))
    lower = list(range(0, index))

    preferred, other = (higher, lower) if guess_higher else (lower, higher)
    pool = preferred if rng.random() < CARD_GUESS_BIAS else other
    # Top or bottom card: one side is empty
    next_index = rng.choice(pool) if pool else index

    is_win = next_index > index if guess_higher else next_index < index
    return _outcome(is_win, bet, CARD_PAYOUT, {
        'current': current,
        'next': CARD_VALUES[next_index],
        'suit': rng.choice(CARD_SUITS),
        'guess': 'higher' if guess_higher else 'lower',
    })


def crash_point(rng: random.Random) -> float:
    """Multiplier at which the rocket explodes, uniform in [1, 11)."""
    return CRASH_MIN + rng.random() * CRASH_SPREAD


def crash_multiplier(elapsed_seconds: float) -> float:
    return round(1 + elapsed_seconds * CRASH_RATE, 2)


def play_crash(bet: int, cash_out_at: float, rng: random.Random) -> GameOutcome:
    """Cash out at a target multiplier; win if the rocket is still flying."""
    _check_bet(bet)
    if cash_out_at < CRASH_MIN:
        raise ValueError('Cash-out multiplier must be at least 1.0')
    crashed_at = crash_point(rng)
    is_win = cash_out_at < crashed_at
    amount = math.floor(bet * cash_out_at) if is_win else bet
    return GameOutcome(is_win=is_win, amount=amount, detail={
        'crash_point': round(crashed_at, 2),
        'cash_out_at': cash_out_at,
    })
