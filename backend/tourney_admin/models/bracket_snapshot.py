from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, List, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tourney_admin.models.tournament import Tournament


class BracketSnapshot(SQLModel, table=True):
    """Bracket structure as reported by the external generator. Read-only once stored."""

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    bracket_type: str
    total_rounds: int
    total_matches: int
    players: List[Any] = Field(default_factory=list, sa_column=Column(JSON))
    generated_at: datetime
    validation_status: str = Field(default="pending")  # valid | invalid | pending
    validation_errors: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="bracket_snapshots")
