"""
Participant seed assignment.

Operates on a roster: a list of RosterEntry value objects. Every operation
returns a new list and leaves its input untouched.

Seeds among active (non-withdrawn) entries form a permutation of
1..active_count after add / move / reseed / set_seed. remove does not
renumber, so it may leave gaps until the next reseed. Withdrawn entries keep
whatever seed they had and are ignored by every seed check.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Hashable, List, Optional, Sequence

logger = logging.getLogger(__name__)

STATUS_REGISTERED = "registered"
STATUS_CONFIRMED = "confirmed"
STATUS_WITHDRAWN = "withdrawn"
STATUSES = (STATUS_REGISTERED, STATUS_CONFIRMED, STATUS_WITHDRAWN)

DIRECTION_UP = "up"
DIRECTION_DOWN = "down"


class RosterFullError(Exception):
    """Raised when adding to a roster that already holds max_participants active entries."""

    def __init__(self, max_participants: int):
        self.max_participants = max_participants
        super().__init__(f"Roster is full ({max_participants} active participants)")


@dataclass(frozen=True)
class RosterEntry:
    id: Hashable
    display_name: str
    seed: int = 0
    status: str = STATUS_REGISTERED
    registered_at: Optional[datetime] = None
    email: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status != STATUS_WITHDRAWN


def active_entries(roster: Sequence[RosterEntry]) -> List[RosterEntry]:
    return [p for p in roster if p.is_active]


def active_count(roster: Sequence[RosterEntry]) -> int:
    return sum(1 for p in roster if p.is_active)


def sorted_by_seed(roster: Sequence[RosterEntry]) -> List[RosterEntry]:
    return sorted(roster, key=lambda p: p.seed)


def is_contiguous(roster: Sequence[RosterEntry]) -> bool:
    """True when active seeds are exactly 1..active_count."""
    seeds = sorted(p.seed for p in roster if p.is_active)
    return seeds == list(range(1, len(seeds) + 1))


def _find(roster: Sequence[RosterEntry], participant_id: Hashable) -> Optional[RosterEntry]:
    for p in roster:
        if p.id == participant_id:
            return p
    return None


def _active_holder(roster: Sequence[RosterEntry], seed: int) -> Optional[RosterEntry]:
    for p in roster:
        if p.is_active and p.seed == seed:
            return p
    return None


def add_participant(
    roster: Sequence[RosterEntry],
    new_member: RosterEntry,
    max_participants: int,
) -> List[RosterEntry]:
    """Append new_member with seed active_count + 1."""
    count = active_count(roster)
    if count >= max_participants:
        raise RosterFullError(max_participants)
    return list(roster) + [replace(new_member, seed=count + 1)]


def remove_participant(roster: Sequence[RosterEntry], participant_id: Hashable) -> List[RosterEntry]:
    """Drop the record entirely. Remaining seeds are not renumbered."""
    return [p for p in roster if p.id != participant_id]


def _swap(roster: Sequence[RosterEntry], a: RosterEntry, b: RosterEntry) -> List[RosterEntry]:
    swapped = []
    for p in roster:
        if p.id == a.id:
            swapped.append(replace(p, seed=b.seed))
        elif p.id == b.id:
            swapped.append(replace(p, seed=a.seed))
        else:
            swapped.append(p)
    return swapped


def move_seed(roster: Sequence[RosterEntry], participant_id: Hashable, direction: str) -> List[RosterEntry]:
    """
    Move a participant one seed up (toward 1) or down, swapping with the
    current holder of the target seed.

    Returns the roster unchanged when the target falls outside
    [1, active_count], nobody holds the target seed, or the participant is
    unknown or withdrawn.
    """
    if direction not in (DIRECTION_UP, DIRECTION_DOWN):
        raise ValueError(f"direction must be 'up' or 'down', got {direction!r}")

    participant = _find(roster, participant_id)
    if participant is None or not participant.is_active:
        return list(roster)

    target_seed = participant.seed - 1 if direction == DIRECTION_UP else participant.seed + 1
    if target_seed < 1 or target_seed > active_count(roster):
        return list(roster)

    other = _active_holder(roster, target_seed)
    if other is None:
        return list(roster)

    return _swap(roster, participant, other)


def set_seed(roster: Sequence[RosterEntry], participant_id: Hashable, seed: int) -> List[RosterEntry]:
    """
    Place a participant at an explicit seed, swapping with whoever holds it.

    No-op for unknown/withdrawn participants or a seed outside
    [1, active_count]. If no one holds the seed (a gap left by removal) the
    participant simply takes it.
    """
    participant = _find(roster, participant_id)
    if participant is None or not participant.is_active:
        return list(roster)
    if seed < 1 or seed > active_count(roster) or seed == participant.seed:
        return list(roster)

    other = _active_holder(roster, seed)
    if other is None:
        return [replace(p, seed=seed) if p.id == participant_id else p for p in roster]
    return _swap(roster, participant, other)


def set_status(
    roster: Sequence[RosterEntry],
    participant_id: Hashable,
    status: str,
    max_participants: int,
) -> List[RosterEntry]:
    """
    Change a participant's status.

    Withdrawing keeps the stale seed. Reinstating a withdrawn participant
    re-enters them at the bottom (active_count + 1), subject to capacity.
    """
    if status not in STATUSES:
        raise ValueError(f"Unknown participant status {status!r}")

    participant = _find(roster, participant_id)
    if participant is None or participant.status == status:
        return list(roster)

    if not participant.is_active and status != STATUS_WITHDRAWN:
        count = active_count(roster)
        if count >= max_participants:
            raise RosterFullError(max_participants)
        updated = replace(participant, status=status, seed=count + 1)
    else:
        updated = replace(participant, status=status)

    return [updated if p.id == participant_id else p for p in roster]


def shuffle(items: List, rng: Optional[random.Random] = None) -> List:
    """Fisher-Yates shuffle, returns a new list."""
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def reseed_randomly(roster: Sequence[RosterEntry], rng: Optional[random.Random] = None) -> List[RosterEntry]:
    """
    Shuffle the active participants and assign seeds 1..N in shuffled order.

    Uniform over all N! orderings. Withdrawn entries keep their stale seeds.
    The returned roster keeps the input's order of records.
    """
    active = active_entries(roster)
    new_seeds = {p.id: i + 1 for i, p in enumerate(shuffle(active, rng))}
    logger.debug("Reseeded %d active participants", len(new_seeds))
    return [replace(p, seed=new_seeds[p.id]) if p.id in new_seeds else p for p in roster]


def filter_roster(
    roster: Sequence[RosterEntry],
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> List[RosterEntry]:
    """Case-insensitive search on name/email plus status filter, ordered by seed."""
    filtered = list(roster)
    if search:
        needle = search.lower()
        filtered = [
            p
            for p in filtered
            if needle in p.display_name.lower() or (p.email is not None and needle in p.email.lower())
        ]
    if status and status != "all":
        filtered = [p for p in filtered if p.status == status]
    return sorted_by_seed(filtered)
