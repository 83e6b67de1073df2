"""
Bracket validation display contract.

Brackets are generated elsewhere; this module only holds the structure the
generator reports and summarizes its validation outcome for callers that
decide whether to proceed.

States: pending -> valid | invalid.
An invalid structure always carries at least one error; valid and pending
carry none.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Sequence

STATUS_VALID = "valid"
STATUS_INVALID = "invalid"
STATUS_PENDING = "pending"
VALIDATION_STATUSES = (STATUS_VALID, STATUS_INVALID, STATUS_PENDING)


def contract_errors(validation_status: str, validation_errors: Sequence[str]) -> List[str]:
    """Violations of the status/errors pairing; empty when the pair is consistent."""
    if validation_status not in VALIDATION_STATUSES:
        return [f"Unknown validation status '{validation_status}'"]
    if validation_status == STATUS_INVALID and not validation_errors:
        return ["An invalid bracket must report at least one validation error"]
    if validation_status != STATUS_INVALID and validation_errors:
        return [f"A {validation_status} bracket cannot carry validation errors"]
    return []


@dataclass(frozen=True)
class BracketStructure:
    type: str
    total_rounds: int
    total_matches: int
    players: Sequence[Any]
    generated_at: datetime
    validation_status: str = STATUS_PENDING
    validation_errors: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self):
        problems = contract_errors(self.validation_status, self.validation_errors)
        if problems:
            raise ValueError(problems[0])


@dataclass(frozen=True)
class BracketSummary:
    ok: bool
    error_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "error_count": self.error_count}


def summarize(structure: BracketStructure) -> BracketSummary:
    """Pass/fail for calling code. Only a valid bracket passes; pending does not."""
    return BracketSummary(
        ok=structure.validation_status == STATUS_VALID,
        error_count=len(structure.validation_errors),
    )


def status_label(structure: BracketStructure) -> str:
    return structure.validation_status.capitalize()
