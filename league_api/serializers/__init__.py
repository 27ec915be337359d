"""Serializer schemas and their registration"""

from league_api.models import Assist, Card, Goal, Match, OAuthApplication, Team, User
from league_api.rendering.registry import SerializerRegistry
from league_api.serializers.league import (
    AssistSerializer,
    CardSerializer,
    GoalSerializer,
    MatchSerializer,
    TeamSerializer,
)
from league_api.serializers.oauth_application import (
    CreatedOAuthApplicationSerializer,
    OAuthApplicationSerializer,
)
from league_api.serializers.user import UserSerializer


def register_serializers(registry: SerializerRegistry) -> SerializerRegistry:
    """Fill registry with every renderable entity"""
    registry.register(User, UserSerializer, "users", human_name="User")
    registry.register(
        OAuthApplication,
        OAuthApplicationSerializer,
        "oauth_applications",
        human_name="OAuth application",
    )
    registry.register(Team, TeamSerializer, "teams", human_name="Team")
    registry.register(Match, MatchSerializer, "matches", human_name="Match")
    registry.register(Goal, GoalSerializer, "goals", human_name="Goal")
    registry.register(Assist, AssistSerializer, "assists", human_name="Assist")
    registry.register(Card, CardSerializer, "cards", human_name="Card")
    return registry


__all__ = [
    "register_serializers",
    "UserSerializer",
    "OAuthApplicationSerializer",
    "CreatedOAuthApplicationSerializer",
    "TeamSerializer",
    "MatchSerializer",
    "GoalSerializer",
    "AssistSerializer",
    "CardSerializer",
]
