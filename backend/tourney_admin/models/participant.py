from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tourney_admin.models.tournament import Tournament


class Participant(SQLModel, table=True):
    # No unique (tournament_id, seed) constraint: withdrawn entries keep stale
    # seeds and removals may leave gaps until the roster is reseeded.

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    user_id: Optional[str] = Field(default=None)
    display_name: str
    email: Optional[str] = Field(default=None)
    seed: int  # 1-based seed (1=top seed)
    status: str = Field(default="registered")  # registered | confirmed | withdrawn
    registered_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="participants")
