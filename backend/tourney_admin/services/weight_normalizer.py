"""
Seeding factor weight normalization.

A seeding configuration is a set of weighted factors (rating, recent
performance, tournament history, region, consistency). Whenever one weight is
edited or a factor is toggled, the remaining enabled weights are rescaled so
the enabled weights keep summing to 1.

Rules:
  - The edited value is clamped to the factor's [min_weight, max_weight].
  - Other enabled factors keep their relative shares of what remains
    (proportional scaling). If they are all at zero, the remainder is split
    evenly between them.
  - Redistributed values are clamped to their own bounds in a single pass.
    Clamping can leave the total slightly off 1; is_balanced() reports it.
  - Disabled factors are never rescaled and do not count toward the total.
  - rating is always enabled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

RATING = "rating"
PERFORMANCE = "performance"
HISTORY = "history"
REGIONAL = "regional"
CONSISTENCY = "consistency"

FACTOR_KEYS: Tuple[str, ...] = (RATING, PERFORMANCE, HISTORY, REGIONAL, CONSISTENCY)
TOGGLABLE_KEYS: Tuple[str, ...] = (PERFORMANCE, HISTORY, REGIONAL, CONSISTENCY)

# (min_weight, max_weight) per factor
FACTOR_BOUNDS: Dict[str, Tuple[float, float]] = {
    RATING: (0.10, 0.80),
    PERFORMANCE: (0.0, 0.50),
    HISTORY: (0.0, 0.40),
    REGIONAL: (0.0, 0.30),
    CONSISTENCY: (0.0, 0.20),
}

DEFAULT_WEIGHTS: Dict[str, float] = {
    RATING: 0.40,
    PERFORMANCE: 0.25,
    HISTORY: 0.15,
    REGIONAL: 0.10,
    CONSISTENCY: 0.10,
}

DEFAULT_RECENT_TOURNAMENTS = 10
DEFAULT_REGIONAL_RADIUS_KM = 100

BALANCE_TOLERANCE = 1e-3


@dataclass(frozen=True)
class SeedingFactor:
    key: str
    enabled: bool
    weight: float
    min_weight: float
    max_weight: float

    def clamp(self, value: float) -> float:
        return min(self.max_weight, max(self.min_weight, value))


@dataclass(frozen=True)
class SeedingConfiguration:
    factors: Dict[str, SeedingFactor] = field(default_factory=dict)
    recent_tournaments_window: int = DEFAULT_RECENT_TOURNAMENTS
    regional_radius_km: int = DEFAULT_REGIONAL_RADIUS_KM

    def factor(self, key: str) -> SeedingFactor:
        try:
            return self.factors[key]
        except KeyError:
            raise KeyError(f"Unknown seeding factor '{key}'") from None

    def enabled_keys(self) -> List[str]:
        return [k for k in FACTOR_KEYS if k in self.factors and self.factors[k].enabled]

    def weights(self) -> Dict[str, float]:
        return {k: f.weight for k, f in self.factors.items()}


def default_configuration() -> SeedingConfiguration:
    """Configuration a tournament-creation form opens with: every factor enabled, default weights."""
    factors = {
        key: SeedingFactor(
            key=key,
            enabled=True,
            weight=DEFAULT_WEIGHTS[key],
            min_weight=FACTOR_BOUNDS[key][0],
            max_weight=FACTOR_BOUNDS[key][1],
        )
        for key in FACTOR_KEYS
    }
    return SeedingConfiguration(factors=factors)


def enabled_total(config: SeedingConfiguration) -> float:
    return sum(f.weight for f in config.factors.values() if f.enabled)


def is_balanced(config: SeedingConfiguration, tolerance: float = BALANCE_TOLERANCE) -> bool:
    """True when enabled weights sum to 1 within tolerance."""
    return abs(enabled_total(config) - 1.0) <= tolerance


def _redistribute(
    factors: Dict[str, SeedingFactor],
    others: List[str],
    remaining: float,
) -> None:
    """Spread `remaining` across `others` in place (proportional, else even), clamping each."""
    if not others:
        return

    other_sum = sum(factors[k].weight for k in others)
    if other_sum > 0:
        scale = remaining / other_sum
        for k in others:
            f = factors[k]
            factors[k] = replace(f, weight=f.clamp(f.weight * scale))
    else:
        share = remaining / len(others)
        for k in others:
            f = factors[k]
            factors[k] = replace(f, weight=f.clamp(share))


def set_weight(config: SeedingConfiguration, key: str, new_value: float) -> SeedingConfiguration:
    """
    Set one factor's weight and rescale the other enabled factors.

    Never fails on out-of-range values: they are clamped. Editing a disabled
    factor stores the clamped weight without touching the others, since
    disabled factors do not count toward the total.
    """
    target = config.factor(key)
    value = target.clamp(float(new_value))
    factors = dict(config.factors)
    factors[key] = replace(target, weight=value)

    if not target.enabled:
        logger.debug("Weight for disabled factor %s stored without redistribution", key)
        return replace(config, factors=factors)

    others = [k for k in config.enabled_keys() if k != key]
    _redistribute(factors, others, 1.0 - value)

    result = replace(config, factors=factors)
    logger.debug(
        "set_weight %s=%.4f -> enabled total %.4f",
        key,
        value,
        enabled_total(result),
    )
    return result


def toggle_factor(config: SeedingConfiguration, key: str, enabled: bool) -> SeedingConfiguration:
    """
    Enable or disable a factor.

    Enabling sets the factor to its minimum weight and rebalances through
    set_weight(). Disabling zeroes it and hands its prior weight to the
    remaining enabled factors. rating cannot be toggled; it is returned
    unchanged.
    """
    target = config.factor(key)
    if key == RATING:
        logger.debug("Ignoring toggle of rating factor")
        return config
    if target.enabled == enabled:
        return config

    factors = dict(config.factors)
    if enabled:
        factors[key] = replace(target, enabled=True)
        return set_weight(replace(config, factors=factors), key, target.min_weight)

    factors[key] = replace(target, enabled=False, weight=0.0)
    others = [k for k in config.enabled_keys() if k != key]
    _redistribute(factors, others, 1.0)
    return replace(config, factors=factors)


def set_parameters(
    config: SeedingConfiguration,
    recent_tournaments_window: Optional[int] = None,
    regional_radius_km: Optional[int] = None,
) -> SeedingConfiguration:
    """Update scalar tuning parameters. Non-positive values are ignored."""
    updates: Dict[str, int] = {}
    if recent_tournaments_window is not None and recent_tournaments_window > 0:
        updates["recent_tournaments_window"] = int(recent_tournaments_window)
    if regional_radius_km is not None and regional_radius_km > 0:
        updates["regional_radius_km"] = int(regional_radius_km)
    return replace(config, **updates) if updates else config


# ─── Wire format (tournament payload seedingOptions) ──────────────────────

_INCLUDE_FLAG = {
    PERFORMANCE: "includePerformance",
    HISTORY: "includeHistory",
    REGIONAL: "includeRegional",
    CONSISTENCY: "includeConsistency",
}


def to_options(config: SeedingConfiguration) -> Dict[str, Any]:
    """Serialize to the seedingOptions shape used in tournament payloads."""
    options: Dict[str, Any] = {}
    for key, flag in _INCLUDE_FLAG.items():
        options[flag] = config.factor(key).enabled
    for key in FACTOR_KEYS:
        options[f"{key}Weight"] = config.factor(key).weight
    options["recentTournaments"] = config.recent_tournaments_window
    options["regionalRadius"] = config.regional_radius_km
    return options


def from_options(options: Optional[Mapping[str, Any]]) -> SeedingConfiguration:
    """
    Build a configuration from a seedingOptions blob.

    Missing keys fall back to defaults. Weights are clamped to bounds but
    otherwise taken as given; callers check is_balanced() before accepting.
    """
    config = default_configuration()
    if not options:
        return config

    factors = dict(config.factors)
    for key in FACTOR_KEYS:
        f = factors[key]
        enabled = True if key == RATING else bool(options.get(_INCLUDE_FLAG[key], f.enabled))
        raw = options.get(f"{key}Weight")
        weight = f.weight if raw is None else f.clamp(float(raw))
        factors[key] = replace(f, enabled=enabled, weight=weight if enabled else 0.0)

    return set_parameters(
        replace(config, factors=factors),
        recent_tournaments_window=options.get("recentTournaments"),
        regional_radius_km=options.get("regionalRadius"),
    )
