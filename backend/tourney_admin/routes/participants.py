"""
Participant Roster API Routes

Roster edits (add, remove, seed moves, explicit seed, status changes and
random reseed) for a tournament. Each request loads the roster into value
objects, applies one seed_assignment operation and writes changed rows back.
"""

import logging
from datetime import datetime
from typing import Dict, List, Literal, Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field, model_validator
from sqlmodel import Session, select

from tourney_admin.database import get_session
from tourney_admin.models.participant import Participant
from tourney_admin.routes.tournaments import get_tournament_or_404
from tourney_admin.schemas import CamelModel
from tourney_admin.services.seed_assignment import (
    RosterEntry,
    RosterFullError,
    active_count,
    add_participant,
    filter_roster,
    is_contiguous,
    move_seed,
    remove_participant,
    reseed_randomly,
    set_seed,
    set_status,
    sorted_by_seed,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ParticipantStatus = Literal["registered", "confirmed", "withdrawn"]


# ============================================================================
# Request/Response Models
# ============================================================================


class ParticipantCreateRequest(CamelModel):
    display_name: Optional[str] = None
    email: Optional[str] = None
    user_id: Optional[str] = None

    @model_validator(mode="after")
    def require_name_or_email(self):
        if not (self.display_name and self.display_name.strip()):
            if not (self.email and self.email.strip()):
                raise ValueError("displayName or email is required")
            # Fall back to the local part of the email address
            self.display_name = self.email.strip().split("@")[0]
        return self


class MoveSeedRequest(CamelModel):
    direction: Literal["up", "down"]


class SetSeedRequest(CamelModel):
    seed: int = Field(ge=1)


class StatusUpdateRequest(CamelModel):
    status: ParticipantStatus


class ParticipantResponse(CamelModel):
    id: int
    tournament_id: int
    user_id: Optional[str] = None
    display_name: str
    email: Optional[str] = None
    seed: int
    status: str
    registered_at: datetime


class RosterResponse(CamelModel):
    participants: List[ParticipantResponse]
    active_count: int
    max_participants: int
    seeds_contiguous: bool


# ============================================================================
# Helpers
# ============================================================================


def _load_rows(session: Session, tournament_id: int) -> List[Participant]:
    return list(session.exec(select(Participant).where(Participant.tournament_id == tournament_id)).all())


def _to_entry(row: Participant) -> RosterEntry:
    return RosterEntry(
        id=row.id,
        display_name=row.display_name,
        seed=row.seed,
        status=row.status,
        registered_at=row.registered_at,
        email=row.email,
        user_id=row.user_id,
    )


def _to_response(row: Participant) -> ParticipantResponse:
    return ParticipantResponse(
        id=row.id,
        tournament_id=row.tournament_id,
        user_id=row.user_id,
        display_name=row.display_name,
        email=row.email,
        seed=row.seed,
        status=row.status,
        registered_at=row.registered_at,
    )


def _write_back(session: Session, rows: Sequence[Participant], roster: Sequence[RosterEntry]) -> int:
    """Persist seed/status changes from the roster onto the matching rows. Returns rows changed."""
    by_id: Dict[int, RosterEntry] = {e.id: e for e in roster}
    changed = 0
    for row in rows:
        entry = by_id.get(row.id)
        if entry is None:
            continue
        if row.seed != entry.seed or row.status != entry.status:
            row.seed = entry.seed
            row.status = entry.status
            session.add(row)
            changed += 1
    session.commit()
    return changed


def _roster_response(session: Session, tournament_id: int, max_participants: int) -> RosterResponse:
    rows = _load_rows(session, tournament_id)
    by_id = {row.id: row for row in rows}
    roster = sorted_by_seed([_to_entry(r) for r in rows])
    return RosterResponse(
        participants=[_to_response(by_id[e.id]) for e in roster],
        active_count=active_count(roster),
        max_participants=max_participants,
        seeds_contiguous=is_contiguous(roster),
    )


def _get_participant_or_404(rows: Sequence[Participant], participant_id: int) -> Participant:
    for row in rows:
        if row.id == participant_id:
            return row
    raise HTTPException(status_code=404, detail="Participant not found")


# ============================================================================
# Roster Endpoints
# ============================================================================


@router.get("/tournaments/{tournament_id}/participants", response_model=RosterResponse)
def list_participants(
    tournament_id: int,
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None, description="registered | confirmed | withdrawn | all"),
    session: Session = Depends(get_session),
):
    """
    List participants ordered by seed ascending.

    search matches display name or email (case-insensitive); status narrows to
    one status. active_count and seeds_contiguous always describe the full
    roster, not the filtered view.
    """
    tournament = get_tournament_or_404(session, tournament_id)
    rows = _load_rows(session, tournament_id)
    by_id = {row.id: row for row in rows}
    roster = [_to_entry(r) for r in rows]
    visible = filter_roster(roster, search=search, status=status)

    return RosterResponse(
        participants=[_to_response(by_id[e.id]) for e in visible],
        active_count=active_count(roster),
        max_participants=tournament.max_players,
        seeds_contiguous=is_contiguous(roster),
    )


@router.post("/tournaments/{tournament_id}/participants", response_model=ParticipantResponse, status_code=201)
def create_participant(
    tournament_id: int,
    request: ParticipantCreateRequest,
    session: Session = Depends(get_session),
):
    """Add a participant at the bottom of the active roster (seed = active count + 1)."""
    tournament = get_tournament_or_404(session, tournament_id)
    roster = [_to_entry(r) for r in _load_rows(session, tournament_id)]

    candidate = RosterEntry(
        id=None,
        display_name=request.display_name,
        email=request.email,
        user_id=request.user_id,
    )
    try:
        updated = add_participant(roster, candidate, tournament.max_players)
    except RosterFullError as e:
        raise HTTPException(status_code=409, detail=str(e))

    seeded = updated[-1]
    participant = Participant(
        tournament_id=tournament_id,
        user_id=seeded.user_id,
        display_name=seeded.display_name,
        email=seeded.email,
        seed=seeded.seed,
    )
    session.add(participant)
    session.commit()
    session.refresh(participant)
    logger.info("Added participant %d to tournament %d at seed %d", participant.id, tournament_id, participant.seed)

    return _to_response(participant)


@router.delete("/tournaments/{tournament_id}/participants/{participant_id}", status_code=204)
def delete_participant(tournament_id: int, participant_id: int, session: Session = Depends(get_session)):
    """Remove a participant. Remaining seeds are not renumbered; reseed to close gaps."""
    get_tournament_or_404(session, tournament_id)
    rows = _load_rows(session, tournament_id)
    row = _get_participant_or_404(rows, participant_id)

    roster = remove_participant([_to_entry(r) for r in rows], participant_id)

    session.delete(row)
    session.commit()
    logger.info("Removed participant %d from tournament %d", participant_id, tournament_id)
    if not is_contiguous(roster):
        logger.info("Tournament %d seeds have gaps after removal; reseed to close them", tournament_id)
    return None


@router.post("/tournaments/{tournament_id}/participants/{participant_id}/move", response_model=RosterResponse)
def move_participant_seed(
    tournament_id: int,
    participant_id: int,
    request: MoveSeedRequest,
    session: Session = Depends(get_session),
):
    """Swap a participant with the neighbouring seed. Moves past either end are no-ops."""
    tournament = get_tournament_or_404(session, tournament_id)
    rows = _load_rows(session, tournament_id)
    _get_participant_or_404(rows, participant_id)

    roster = move_seed([_to_entry(r) for r in rows], participant_id, request.direction)
    _write_back(session, rows, roster)

    return _roster_response(session, tournament_id, tournament.max_players)


@router.put("/tournaments/{tournament_id}/participants/{participant_id}/seed", response_model=RosterResponse)
def update_participant_seed(
    tournament_id: int,
    participant_id: int,
    request: SetSeedRequest,
    session: Session = Depends(get_session),
):
    """Place a participant at an explicit seed, swapping with its current holder."""
    tournament = get_tournament_or_404(session, tournament_id)
    rows = _load_rows(session, tournament_id)
    _get_participant_or_404(rows, participant_id)

    roster = [_to_entry(r) for r in rows]
    if request.seed > active_count(roster):
        raise HTTPException(
            status_code=422,
            detail=f"Seed must be between 1 and {active_count(roster)}",
        )

    roster = set_seed(roster, participant_id, request.seed)
    _write_back(session, rows, roster)

    return _roster_response(session, tournament_id, tournament.max_players)


@router.patch("/tournaments/{tournament_id}/participants/{participant_id}/status", response_model=ParticipantResponse)
def update_participant_status(
    tournament_id: int,
    participant_id: int,
    request: StatusUpdateRequest,
    session: Session = Depends(get_session),
):
    """Change status. Withdrawn participants drop out of seeding but keep their old seed."""
    tournament = get_tournament_or_404(session, tournament_id)
    rows = _load_rows(session, tournament_id)
    row = _get_participant_or_404(rows, participant_id)

    try:
        roster = set_status([_to_entry(r) for r in rows], participant_id, request.status, tournament.max_players)
    except RosterFullError as e:
        raise HTTPException(status_code=409, detail=str(e))

    _write_back(session, rows, roster)
    session.refresh(row)
    return _to_response(row)


@router.post("/tournaments/{tournament_id}/participants/reseed", response_model=RosterResponse)
def reseed_participants(tournament_id: int, session: Session = Depends(get_session)):
    """Randomly reassign seeds 1..N across active participants."""
    tournament = get_tournament_or_404(session, tournament_id)
    rows = _load_rows(session, tournament_id)

    roster = reseed_randomly([_to_entry(r) for r in rows])
    changed = _write_back(session, rows, roster)
    logger.info("Reseeded tournament %d (%d seeds changed)", tournament_id, changed)

    return _roster_response(session, tournament_id, tournament.max_players)
