from betroyal.schemas.base import CamelModel


class AdminStats(CamelModel):
    """Counters for the admin dashboard."""
    total_users: int
    active_users: int
    total_games: int
    active_games: int
    total_deposits: int
    total_withdrawals: int
    pending_deposits: int
