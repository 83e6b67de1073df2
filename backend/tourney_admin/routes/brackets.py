"""
Bracket Validation API Routes

Stores the bracket structure reported by the external generator and serves
its validation summary. No bracket generation happens here.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field, field_validator, model_validator
from sqlmodel import Session, select

from tourney_admin.database import get_session
from tourney_admin.models.bracket_snapshot import BracketSnapshot
from tourney_admin.routes.tournaments import get_tournament_or_404
from tourney_admin.schemas import CamelModel
from tourney_admin.services.bracket_validation import (
    BracketStructure,
    contract_errors,
    status_label,
    summarize,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class BracketStructureSchema(CamelModel):
    type: str
    total_rounds: int = Field(ge=0)
    total_matches: int = Field(ge=0)
    players: List[Any] = Field(default_factory=list)
    generated_at: datetime
    validation_status: Literal["valid", "invalid", "pending"] = "pending"
    validation_errors: List[str] = Field(default_factory=list)

    @field_validator("generated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Generator timestamps without an offset are taken as UTC
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)

    @model_validator(mode="after")
    def check_status_errors_pairing(self):
        problems = contract_errors(self.validation_status, self.validation_errors)
        if problems:
            raise ValueError(problems[0])
        return self


class BracketSummarySchema(CamelModel):
    ok: bool
    error_count: int


class BracketValidationResponse(CamelModel):
    tournament_id: int
    bracket: BracketStructureSchema
    summary: BracketSummarySchema
    status_label: str


def _to_structure(snapshot: BracketSnapshot) -> BracketStructure:
    return BracketStructure(
        type=snapshot.bracket_type,
        total_rounds=snapshot.total_rounds,
        total_matches=snapshot.total_matches,
        players=tuple(snapshot.players or []),
        generated_at=snapshot.generated_at,
        validation_status=snapshot.validation_status,
        validation_errors=tuple(snapshot.validation_errors or []),
    )


def _response(snapshot: BracketSnapshot) -> BracketValidationResponse:
    structure = _to_structure(snapshot)
    summary = summarize(structure)
    return BracketValidationResponse(
        tournament_id=snapshot.tournament_id,
        bracket=BracketStructureSchema(
            type=structure.type,
            total_rounds=structure.total_rounds,
            total_matches=structure.total_matches,
            players=list(structure.players),
            generated_at=structure.generated_at,
            validation_status=structure.validation_status,
            validation_errors=list(structure.validation_errors),
        ),
        summary=BracketSummarySchema(ok=summary.ok, error_count=summary.error_count),
        status_label=status_label(structure),
    )


@router.put("/tournaments/{tournament_id}/bracket", response_model=BracketValidationResponse)
def store_bracket(tournament_id: int, request: BracketStructureSchema, session: Session = Depends(get_session)):
    """Record the generator's bracket structure and return its validation summary."""
    get_tournament_or_404(session, tournament_id)

    snapshot = BracketSnapshot(
        tournament_id=tournament_id,
        bracket_type=request.type,
        total_rounds=request.total_rounds,
        total_matches=request.total_matches,
        players=list(request.players),
        generated_at=request.generated_at,
        validation_status=request.validation_status,
        validation_errors=list(request.validation_errors),
    )
    session.add(snapshot)
    session.commit()
    session.refresh(snapshot)

    if snapshot.validation_status == "invalid":
        logger.warning(
            "Tournament %d bracket reported invalid with %d error(s)",
            tournament_id,
            len(snapshot.validation_errors),
        )
    return _response(snapshot)


@router.get("/tournaments/{tournament_id}/bracket", response_model=BracketValidationResponse)
def get_bracket(tournament_id: int, session: Session = Depends(get_session)):
    """Most recently stored bracket structure with its validation summary."""
    get_tournament_or_404(session, tournament_id)
    snapshot = session.exec(
        select(BracketSnapshot)
        .where(BracketSnapshot.tournament_id == tournament_id)
        .order_by(BracketSnapshot.id.desc())
    ).first()
    if not snapshot:
        raise HTTPException(status_code=404, detail="No bracket has been generated for this tournament")
    return _response(snapshot)
