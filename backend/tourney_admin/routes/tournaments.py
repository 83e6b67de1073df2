"""
Tournament API Routes

Create/read/update/delete tournaments together with their prize breakdown
and bracket configuration. Prize and seeding configuration are re-validated
server-side on every write; the browser form is not trusted.
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Annotated, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import AfterValidator, Field, model_validator
from sqlmodel import Session, select

from tourney_admin.database import get_session
from tourney_admin.models.participant import Participant
from tourney_admin.models.tournament import Tournament
from tourney_admin.schemas import (
    BracketConfigSchema,
    CamelModel,
    PrizeAmountsSchema,
    PrizeBreakdownSchema,
    SeedingOptionsSchema,
)
from tourney_admin.services.prize_distribution import PrizeBreakdown, compute_amounts, prize_pool, validate
from tourney_admin.services.seed_assignment import STATUS_WITHDRAWN
from tourney_admin.services.weight_normalizer import is_balanced, to_options

logger = logging.getLogger(__name__)

router = APIRouter()

GameType = Literal["chess", "checkers", "connect4", "tictactoe"]
BracketType = Literal["SINGLE_ELIMINATION", "DOUBLE_ELIMINATION", "ROUND_ROBIN", "SWISS"]
TournamentStatus = Literal["draft", "registration", "active", "completed", "cancelled"]

MIN_PLAYERS = 4
MAX_PLAYERS = 256


# ============================================================================
# Request/Response Models
# ============================================================================


def _check_title(v: str) -> str:
    v = v.strip()
    if len(v) < 3:
        raise ValueError("Tournament title must be at least 3 characters")
    if len(v) > 100:
        raise ValueError("Tournament title must be less than 100 characters")
    return v


def _check_description(v: str) -> str:
    v = v.strip()
    if len(v) < 10:
        raise ValueError("Description must be at least 10 characters")
    if len(v) > 500:
        raise ValueError("Description must be less than 500 characters")
    return v


def _check_max_players(v: int) -> int:
    if v < MIN_PLAYERS:
        raise ValueError(f"Minimum {MIN_PLAYERS} participants required")
    if v > MAX_PLAYERS:
        raise ValueError(f"Maximum {MAX_PLAYERS} participants allowed")
    return v


def _check_entry_fee(v: float) -> float:
    if not math.isfinite(v):
        raise ValueError("Entry fee must be a finite number")
    if v < 0:
        raise ValueError("Entry fee cannot be negative")
    return v


Title = Annotated[str, AfterValidator(_check_title)]
Description = Annotated[str, AfterValidator(_check_description)]
MaxPlayers = Annotated[int, AfterValidator(_check_max_players)]
EntryFee = Annotated[float, AfterValidator(_check_entry_fee)]


def configuration_errors(
    prize_breakdown: PrizeBreakdown,
    bracket_config: Optional[BracketConfigSchema],
) -> List[str]:
    """Server-side re-validation of prize and seeding configuration."""
    errors = list(validate(prize_breakdown).errors)
    if bracket_config and bracket_config.use_advanced_seeding and bracket_config.seeding_options:
        if not is_balanced(bracket_config.seeding_options.to_domain()):
            errors.append("Seeding factor weights must sum to 100%")
    return errors


class TournamentCreate(CamelModel):
    title: Title
    description: Description
    game_type: GameType = "chess"
    max_players: MaxPlayers = 16
    entry_fee: EntryFee = 0
    start_date: date
    end_date: date
    bracket_type: BracketType = "SINGLE_ELIMINATION"
    prize_breakdown: PrizeBreakdownSchema = Field(default_factory=PrizeBreakdownSchema)
    bracket_config: Optional[BracketConfigSchema] = None

    @model_validator(mode="after")
    def validate_configuration(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        errors = configuration_errors(self.prize_breakdown.to_domain(), self.bracket_config)
        if errors:
            raise ValueError("; ".join(errors))
        return self


class TournamentUpdate(CamelModel):
    title: Optional[Title] = None
    description: Optional[Description] = None
    game_type: Optional[GameType] = None
    max_players: Optional[MaxPlayers] = None
    entry_fee: Optional[EntryFee] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    bracket_type: Optional[BracketType] = None
    status: Optional[TournamentStatus] = None
    prize_breakdown: Optional[PrizeBreakdownSchema] = None
    bracket_config: Optional[BracketConfigSchema] = None


class TournamentResponse(CamelModel):
    id: int
    title: str
    description: str
    game_type: str
    max_players: int
    entry_fee: float
    start_date: date
    end_date: date
    bracket_type: str
    status: str
    prize_breakdown: PrizeBreakdownSchema
    bracket_config: BracketConfigSchema
    prize_pool: float
    prize_amounts: PrizeAmountsSchema
    current_participants: int
    created_at: datetime
    updated_at: datetime


def _breakdown(tournament: Tournament) -> PrizeBreakdown:
    return PrizeBreakdown(**(tournament.prize_breakdown or {}))


def _active_participant_count(session: Session, tournament_id: int) -> int:
    rows = session.exec(select(Participant).where(Participant.tournament_id == tournament_id)).all()
    return sum(1 for p in rows if p.status != STATUS_WITHDRAWN)


def to_response(session: Session, tournament: Tournament) -> TournamentResponse:
    breakdown = _breakdown(tournament)
    seeding = (
        SeedingOptionsSchema.model_validate(tournament.seeding_options) if tournament.seeding_options else None
    )
    return TournamentResponse(
        id=tournament.id,
        title=tournament.title,
        description=tournament.description,
        game_type=tournament.game_type,
        max_players=tournament.max_players,
        entry_fee=tournament.entry_fee,
        start_date=tournament.start_date,
        end_date=tournament.end_date,
        bracket_type=tournament.bracket_type,
        status=tournament.status,
        prize_breakdown=PrizeBreakdownSchema(**breakdown.as_dict()),
        bracket_config=BracketConfigSchema(
            use_advanced_seeding=tournament.use_advanced_seeding,
            seeding_options=seeding,
        ),
        prize_pool=float(prize_pool(tournament.entry_fee, tournament.max_players)),
        prize_amounts=PrizeAmountsSchema(
            **compute_amounts(breakdown, tournament.entry_fee, tournament.max_players).to_dict()
        ),
        current_participants=_active_participant_count(session, tournament.id),
        created_at=tournament.created_at,
        updated_at=tournament.updated_at,
    )


def get_tournament_or_404(session: Session, tournament_id: int) -> Tournament:
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return tournament


def _apply_bracket_config(tournament: Tournament, bracket_config: BracketConfigSchema) -> None:
    tournament.use_advanced_seeding = bracket_config.use_advanced_seeding
    if bracket_config.seeding_options is not None:
        # Round-trip through the domain so stored weights are clamped to bounds
        tournament.seeding_options = to_options(bracket_config.seeding_options.to_domain())


# ============================================================================
# Tournament CRUD Endpoints
# ============================================================================


@router.get("/tournaments", response_model=List[TournamentResponse])
def list_tournaments(session: Session = Depends(get_session)):
    """List all tournaments"""
    tournaments = session.exec(select(Tournament).order_by(Tournament.id)).all()
    return [to_response(session, t) for t in tournaments]


@router.post("/tournaments", response_model=TournamentResponse, status_code=201)
def create_tournament(tournament_data: TournamentCreate, session: Session = Depends(get_session)):
    """Create a new tournament with its prize breakdown and bracket configuration"""
    tournament = Tournament(
        title=tournament_data.title,
        description=tournament_data.description,
        game_type=tournament_data.game_type,
        max_players=tournament_data.max_players,
        entry_fee=tournament_data.entry_fee,
        start_date=tournament_data.start_date,
        end_date=tournament_data.end_date,
        bracket_type=tournament_data.bracket_type,
        prize_breakdown=tournament_data.prize_breakdown.to_domain().as_dict(),
    )
    if tournament_data.bracket_config is not None:
        _apply_bracket_config(tournament, tournament_data.bracket_config)

    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    logger.info("Created tournament %d (%s)", tournament.id, tournament.title)

    return to_response(session, tournament)


@router.get("/tournaments/{tournament_id}", response_model=TournamentResponse)
def get_tournament(tournament_id: int, session: Session = Depends(get_session)):
    """Get a tournament by ID"""
    return to_response(session, get_tournament_or_404(session, tournament_id))


@router.put("/tournaments/{tournament_id}", response_model=TournamentResponse)
def update_tournament(tournament_id: int, tournament_data: TournamentUpdate, session: Session = Depends(get_session)):
    """
    Partially update a tournament.

    Dates and prize breakdown are validated on the merged result (stored
    values overlaid with the update). Fields sent as null are left unchanged.
    """
    tournament = get_tournament_or_404(session, tournament_id)

    start = tournament_data.start_date or tournament.start_date
    end = tournament_data.end_date or tournament.end_date
    if end <= start:
        raise HTTPException(status_code=422, detail="End date must be after start date")

    breakdown = tournament_data.prize_breakdown.to_domain() if tournament_data.prize_breakdown else _breakdown(tournament)
    # Only a submitted bracketConfig is re-checked. Stored weights can be left
    # unbalanced by a clamped edit on the seeding endpoints.
    errors = configuration_errors(breakdown, tournament_data.bracket_config)
    if errors:
        logger.warning("Rejected update for tournament %d: %s", tournament_id, errors)
        raise HTTPException(status_code=422, detail="; ".join(errors))

    if tournament_data.max_players is not None:
        active = _active_participant_count(session, tournament_id)
        if tournament_data.max_players < active:
            raise HTTPException(
                status_code=409,
                detail=f"maxPlayers cannot be below the {active} active participants",
            )

    update_data = tournament_data.model_dump(
        exclude_unset=True,
        exclude_none=True,
        exclude={"prize_breakdown", "bracket_config"},
    )
    for field, value in update_data.items():
        setattr(tournament, field, value)
    if tournament_data.prize_breakdown is not None:
        tournament.prize_breakdown = breakdown.as_dict()
    if tournament_data.bracket_config is not None:
        _apply_bracket_config(tournament, tournament_data.bracket_config)

    tournament.updated_at = datetime.now(timezone.utc)
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    logger.info("Updated tournament %d", tournament_id)

    return to_response(session, tournament)


@router.delete("/tournaments/{tournament_id}", status_code=204)
def delete_tournament(tournament_id: int, session: Session = Depends(get_session)):
    """Delete a tournament along with its participants and bracket snapshots"""
    tournament = get_tournament_or_404(session, tournament_id)
    try:
        session.delete(tournament)
        session.commit()
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to delete tournament: {str(e)}")

    logger.info("Deleted tournament %d", tournament_id)
    return Response(status_code=204)
