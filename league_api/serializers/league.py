"""Serializers for league records"""

import datetime

from league_api.serializers.base import SerializerSchema


class TeamSerializer(SerializerSchema):
    name: str


class MatchSerializer(SerializerSchema):
    home_team_id: int
    away_team_id: int
    date: datetime.date
    home_score: int
    away_score: int


class GoalSerializer(SerializerSchema):
    match_id: int
    player_id: int


class AssistSerializer(SerializerSchema):
    match_id: int
    player_id: int


class CardSerializer(SerializerSchema):
    match_id: int
    player_id: int
    card_type: str
