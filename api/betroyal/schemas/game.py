from pydantic import Field

from betroyal.schemas.base import CamelModel


class GameCreate(CamelModel):
    """Schema for adding a game to the catalog."""
    name: str = Field(..., min_length=1, max_length=100)
    type: str = Field(..., min_length=1, max_length=30)
    image: str | None = Field(None, max_length=500)
    description: str | None = None
    is_active: bool = True
    players_count: int = Field(0, ge=0)
    rating: int = Field(0, ge=0, le=5)


class GameUpdate(CamelModel):
    """Partial update; only fields present in the request are applied."""
    name: str | None = Field(None, min_length=1, max_length=100)
    type: str | None = Field(None, min_length=1, max_length=30)
    image: str | None = Field(None, max_length=500)
    description: str | None = None
    is_active: bool | None = None
    players_count: int | None = Field(None, ge=0)
    rating: int | None = Field(None, ge=0, le=5)


class GameResponse(CamelModel):
    id: int
    name: str
    type: str
    image: str | None
    description: str | None
    is_active: bool
    players_count: int
    rating: int
