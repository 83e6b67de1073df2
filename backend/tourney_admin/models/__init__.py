from tourney_admin.models.bracket_snapshot import BracketSnapshot
from tourney_admin.models.participant import Participant
from tourney_admin.models.tournament import Tournament

__all__ = [
    "Tournament",
    "Participant",
    "BracketSnapshot",
]
