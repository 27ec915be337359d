"""Database models"""

from league_api.models.access_grant import AccessGrant
from league_api.models.access_token import AccessToken
from league_api.models.assist import Assist
from league_api.models.card import Card, CardType
from league_api.models.database import Base, close_db, get_db, init_db
from league_api.models.goal import Goal
from league_api.models.match import Match
from league_api.models.oauth_application import OAuthApplication
from league_api.models.team import Team
from league_api.models.user import User

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "close_db",
    "User",
    "OAuthApplication",
    "AccessGrant",
    "AccessToken",
    "Team",
    "Match",
    "Goal",
    "Card",
    "CardType",
    "Assist",
]
