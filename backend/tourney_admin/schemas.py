"""
Wire-format models shared by several routers.

Payloads use camelCase on the wire (title, maxPlayers, prizeBreakdown, ...)
and snake_case in Python.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from tourney_admin.services.prize_distribution import PrizeBreakdown
from tourney_admin.services.weight_normalizer import (
    DEFAULT_WEIGHTS,
    SeedingConfiguration,
    from_options,
    to_options,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class PrizeBreakdownSchema(CamelModel):
    first: float = 50
    second: float = 30
    third: float = 20

    def to_domain(self) -> PrizeBreakdown:
        return PrizeBreakdown(first=self.first, second=self.second, third=self.third)


class PrizeAmountsSchema(CamelModel):
    first: float
    second: float
    third: float


class SeedingOptionsSchema(CamelModel):
    include_performance: bool = True
    include_history: bool = True
    include_regional: bool = True
    include_consistency: bool = True
    rating_weight: float = DEFAULT_WEIGHTS["rating"]
    performance_weight: float = DEFAULT_WEIGHTS["performance"]
    history_weight: float = DEFAULT_WEIGHTS["history"]
    regional_weight: float = DEFAULT_WEIGHTS["regional"]
    consistency_weight: float = DEFAULT_WEIGHTS["consistency"]
    recent_tournaments: int = 10
    regional_radius: int = 100

    def to_domain(self) -> SeedingConfiguration:
        return from_options(self.model_dump(by_alias=True))

    @classmethod
    def from_domain(cls, config: SeedingConfiguration) -> "SeedingOptionsSchema":
        return cls.model_validate(to_options(config))


class BracketConfigSchema(CamelModel):
    use_advanced_seeding: bool = False
    seeding_options: Optional[SeedingOptionsSchema] = None
