# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from tourney_admin.models.bracket_snapshot import BracketSnapshot  # noqa: F401
from tourney_admin.models.participant import Participant  # noqa: F401
from tourney_admin.models.tournament import Tournament  # noqa: F401
