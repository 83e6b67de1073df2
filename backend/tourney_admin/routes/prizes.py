"""
Prize preview: validation plus computed amounts for a draft breakdown.
Never rejects; the caller decides whether to block submission.
"""

from typing import List, Optional

from fastapi import APIRouter
from pydantic import Field

from tourney_admin.schemas import CamelModel, PrizeAmountsSchema, PrizeBreakdownSchema
from tourney_admin.services.prize_distribution import PrizeSumRule, compute_amounts, prize_pool, validate

router = APIRouter()


class PrizePreviewRequest(CamelModel):
    breakdown: PrizeBreakdownSchema = Field(default_factory=PrizeBreakdownSchema)
    entry_fee: float = 0
    max_players: int = 16
    rule: Optional[PrizeSumRule] = None


class PrizeValidationSchema(CamelModel):
    ok: bool
    total: float
    errors: List[str]


class PrizePreviewResponse(CamelModel):
    validation: PrizeValidationSchema
    prize_pool: float
    amounts: PrizeAmountsSchema


@router.post("/prizes/preview", response_model=PrizePreviewResponse)
def preview_prizes(request: PrizePreviewRequest):
    breakdown = request.breakdown.to_domain()
    result = validate(breakdown, rule=request.rule)
    return PrizePreviewResponse(
        validation=PrizeValidationSchema(**result.to_dict()),
        prize_pool=float(prize_pool(request.entry_fee, request.max_players)),
        amounts=PrizeAmountsSchema(**compute_amounts(breakdown, request.entry_fee, request.max_players).to_dict()),
    )
