"""
Prize distribution validation and amount calculation.

A prize breakdown splits the pool (entry_fee * max_participants) across
1st/2nd/3rd place as percentages. Validation is non-fatal: it returns a
structured result and never raises, so the operator can see and correct
the problem before resubmitting.

Sum rules:
  lenient  first + second + third <= 100  (default)
  strict   first + second + third == 100
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, List, Optional, Union

from tourney_admin.config import PRIZE_SUM_RULE

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]

TIERS = ("first", "second", "third")
_TIER_LABELS = {"first": "First", "second": "Second", "third": "Third"}

# Percent totals are compared with a small tolerance so 33.3 + 33.3 + 33.4 passes.
SUM_TOLERANCE = 1e-9

_CENTS = Decimal("0.01")


class PrizeSumRule(str, Enum):
    LENIENT = "lenient"
    STRICT = "strict"


def default_rule() -> PrizeSumRule:
    try:
        return PrizeSumRule(PRIZE_SUM_RULE)
    except ValueError:
        return PrizeSumRule.LENIENT


@dataclass(frozen=True)
class PrizeBreakdown:
    first: float = 50
    second: float = 30
    third: float = 20

    @property
    def total(self) -> float:
        return self.first + self.second + self.third

    def as_dict(self) -> Dict[str, float]:
        return {"first": self.first, "second": self.second, "third": self.third}


@dataclass(frozen=True)
class PrizeValidationResult:
    ok: bool
    total: float
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {"ok": self.ok, "total": self.total, "errors": list(self.errors)}


@dataclass(frozen=True)
class PrizeAmounts:
    first: Decimal
    second: Decimal
    third: Decimal

    def to_dict(self) -> Dict[str, float]:
        return {"first": float(self.first), "second": float(self.second), "third": float(self.third)}


def validate(breakdown: PrizeBreakdown, rule: Optional[PrizeSumRule] = None) -> PrizeValidationResult:
    """Check each tier is within [0, 100] and the total satisfies the sum rule."""
    rule = rule or default_rule()
    errors: List[str] = []

    for tier in TIERS:
        pct = getattr(breakdown, tier)
        if not math.isfinite(pct):
            errors.append(f"{_TIER_LABELS[tier]} place prize must be a finite number")
        elif pct < 0:
            errors.append(f"{_TIER_LABELS[tier]} place prize cannot be negative")
        elif pct > 100:
            errors.append(f"{_TIER_LABELS[tier]} place prize percentage cannot exceed 100")

    total = breakdown.total
    if not math.isfinite(total):
        if not errors:
            errors.append("Total prize breakdown must be a finite number")
    elif rule is PrizeSumRule.STRICT:
        if abs(total - 100) > SUM_TOLERANCE:
            errors.append(f"Total prize breakdown must equal 100% (got {total:g}%)")
    elif total > 100 + SUM_TOLERANCE:
        errors.append(f"Total prize breakdown cannot exceed 100% (got {total:g}%)")

    return PrizeValidationResult(ok=not errors, total=total, errors=errors)


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    return Decimal(str(value))


def prize_pool(entry_fee: Number, max_participants: int) -> Decimal:
    fee = _to_decimal(entry_fee)
    if not fee.is_finite():
        return fee
    return fee * int(max_participants)


def compute_amounts(breakdown: PrizeBreakdown, entry_fee: Number, max_participants: int) -> PrizeAmounts:
    """
    Absolute amount per tier, rounded half-up to 2 decimal places.

    A non-finite pool or percentage yields 0.00 for the affected tiers; such
    inputs are already reported by validate().
    """
    pool = prize_pool(entry_fee, max_participants)
    if not pool.is_finite():
        logger.warning("Non-finite prize pool (entry fee %r), amounts reported as 0.00", entry_fee)

    def amount(pct: Number) -> Decimal:
        pct = _to_decimal(pct)
        if not (pool.is_finite() and pct.is_finite()):
            return Decimal("0.00")
        return (pool * pct / 100).quantize(_CENTS, rounding=ROUND_HALF_UP)

    return PrizeAmounts(
        first=amount(breakdown.first),
        second=amount(breakdown.second),
        third=amount(breakdown.third),
    )
