from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tourney_admin.models.bracket_snapshot import BracketSnapshot
    from tourney_admin.models.participant import Participant


class Tournament(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str
    game_type: str = Field(default="chess")
    max_players: int = Field(default=16)
    entry_fee: float = Field(default=0.0)
    start_date: date
    end_date: date
    bracket_type: str = Field(default="SINGLE_ELIMINATION")
    status: str = Field(default="draft")  # draft | registration | active | completed | cancelled

    # {"first": 50, "second": 30, "third": 20}
    prize_breakdown: Dict[str, float] = Field(default_factory=dict, sa_column=Column(JSON))

    use_advanced_seeding: bool = Field(default=False)
    # Wire-format seedingOptions blob (includePerformance, ratingWeight, ...)
    seeding_options: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)},
    )

    # Relationships
    participants: List["Participant"] = Relationship(
        back_populates="tournament", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    bracket_snapshots: List["BracketSnapshot"] = Relationship(
        back_populates="tournament", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
