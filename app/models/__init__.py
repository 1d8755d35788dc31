from app.models.field_position import FieldPosition
from app.models.match import Match
from app.models.match_appearance import MatchAppearance
from app.models.player import Player
from app.models.team import Team
from app.models.tournament import Tournament

__all__ = [
    "FieldPosition",
    "Match",
    "MatchAppearance",
    "Player",
    "Team",
    "Tournament",
]
