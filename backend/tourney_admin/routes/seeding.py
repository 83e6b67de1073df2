"""
Seeding Configuration API Routes

Draft endpoints (/seeding/...) apply one edit to a configuration supplied in
the request and return the rebalanced result without storing anything.
Tournament endpoints apply the same edits to a tournament's stored
configuration.
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlmodel import Session

from tourney_admin.database import get_session
from tourney_admin.routes.tournaments import get_tournament_or_404
from tourney_admin.schemas import CamelModel, SeedingOptionsSchema
from tourney_admin.services.weight_normalizer import (
    SeedingConfiguration,
    default_configuration,
    enabled_total,
    from_options,
    is_balanced,
    set_parameters,
    set_weight,
    to_options,
    toggle_factor,
)

logger = logging.getLogger(__name__)

router = APIRouter()

FactorKey = Literal["rating", "performance", "history", "regional", "consistency"]
TogglableFactorKey = Literal["performance", "history", "regional", "consistency"]


# ============================================================================
# Request/Response Models
# ============================================================================


class WeightEdit(CamelModel):
    factor: FactorKey
    weight: float


class ToggleEdit(CamelModel):
    factor: TogglableFactorKey
    enabled: bool


class ParameterEdit(CamelModel):
    recent_tournaments: Optional[int] = Field(default=None, ge=1)
    regional_radius: Optional[int] = Field(default=None, ge=1)


class DraftWeightEdit(WeightEdit):
    options: SeedingOptionsSchema = Field(default_factory=SeedingOptionsSchema)


class DraftToggleEdit(ToggleEdit):
    options: SeedingOptionsSchema = Field(default_factory=SeedingOptionsSchema)


class SeedingStateResponse(CamelModel):
    options: SeedingOptionsSchema
    total_percent: float
    balanced: bool


def _state(config: SeedingConfiguration) -> SeedingStateResponse:
    return SeedingStateResponse(
        options=SeedingOptionsSchema.from_domain(config),
        total_percent=round(enabled_total(config) * 100, 2),
        balanced=is_balanced(config),
    )


def _stored_configuration(tournament) -> SeedingConfiguration:
    if tournament.seeding_options:
        return from_options(tournament.seeding_options)
    return default_configuration()


def _store(session: Session, tournament, config: SeedingConfiguration) -> None:
    tournament.seeding_options = to_options(config)
    session.add(tournament)
    session.commit()
    session.refresh(tournament)


# ============================================================================
# Draft Endpoints
# ============================================================================


@router.get("/seeding/defaults", response_model=SeedingStateResponse)
def get_default_seeding():
    """Configuration a new tournament form starts from."""
    return _state(default_configuration())


@router.post("/seeding/weight", response_model=SeedingStateResponse)
def preview_weight_edit(request: DraftWeightEdit):
    """Set one factor's weight on a draft and rebalance the rest."""
    config = set_weight(request.options.to_domain(), request.factor, request.weight)
    return _state(config)


@router.post("/seeding/toggle", response_model=SeedingStateResponse)
def preview_toggle(request: DraftToggleEdit):
    """Enable/disable a factor on a draft and rebalance."""
    config = toggle_factor(request.options.to_domain(), request.factor, request.enabled)
    return _state(config)


# ============================================================================
# Stored Configuration Endpoints
# ============================================================================


@router.get("/tournaments/{tournament_id}/seeding", response_model=SeedingStateResponse)
def get_tournament_seeding(tournament_id: int, session: Session = Depends(get_session)):
    tournament = get_tournament_or_404(session, tournament_id)
    return _state(_stored_configuration(tournament))


@router.put("/tournaments/{tournament_id}/seeding/weight", response_model=SeedingStateResponse)
def update_tournament_weight(tournament_id: int, request: WeightEdit, session: Session = Depends(get_session)):
    tournament = get_tournament_or_404(session, tournament_id)
    config = set_weight(_stored_configuration(tournament), request.factor, request.weight)
    _store(session, tournament, config)
    logger.info("Tournament %d: %s weight set to %.2f", tournament_id, request.factor, request.weight)
    if not is_balanced(config):
        logger.warning(
            "Tournament %d seeding weights total %.1f%% after clamping",
            tournament_id,
            enabled_total(config) * 100,
        )
    return _state(config)


@router.put("/tournaments/{tournament_id}/seeding/toggle", response_model=SeedingStateResponse)
def update_tournament_toggle(tournament_id: int, request: ToggleEdit, session: Session = Depends(get_session)):
    tournament = get_tournament_or_404(session, tournament_id)
    config = toggle_factor(_stored_configuration(tournament), request.factor, request.enabled)
    _store(session, tournament, config)
    logger.info("Tournament %d: %s %s", tournament_id, request.factor, "enabled" if request.enabled else "disabled")
    return _state(config)


@router.put("/tournaments/{tournament_id}/seeding/parameters", response_model=SeedingStateResponse)
def update_tournament_parameters(tournament_id: int, request: ParameterEdit, session: Session = Depends(get_session)):
    tournament = get_tournament_or_404(session, tournament_id)
    config = set_parameters(
        _stored_configuration(tournament),
        recent_tournaments_window=request.recent_tournaments,
        regional_radius_km=request.regional_radius,
    )
    _store(session, tournament, config)
    return _state(config)
