from sqlalchemy import String, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from betroyal.db.database import Base


class Game(Base):
    """Catalog entry for a playable game. Managed from the admin back-office."""

    __tablename__ = 'games'

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    type: Mapped[str] = mapped_column(String(30))
    image: Mapped[str | None] = mapped_column(String(500), default=None)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    is_active: Mapped[bool] = mapped_column(default=True)

    # Display counters
    players_count: Mapped[int] = mapped_column(Integer, default=0)
    rating: Mapped[int] = mapped_column(Integer, default=0)
