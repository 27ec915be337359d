"""
Unit tests for the object / collection renderers and the response renderer.
"""
import datetime
import json

import pytest

from league_api.core.errors import RecordInvalid, RecordNotFound, RenderError
from league_api.models import Match, Team, User
from league_api.rendering import (
    CollectionRenderer,
    ObjectRenderer,
    ResponseRenderer,
    SerializerRegistry,
    error_envelope,
)
from league_api.serializers import TeamSerializer, register_serializers


@pytest.fixture
def registry():
    return register_serializers(SerializerRegistry())


def make_user(user_id=1, email="ada@example.com"):
    return User(id=user_id, email=email, first_name="Ada", last_name="Lovelace", password_digest="x")


def test_object_renderer_envelope(registry):
    body = ObjectRenderer(make_user(), registry=registry).render()

    assert body == {
        "data": {
            "id": "1",
            "type": "users",
            "attributes": {
                "email": "ada@example.com",
                "firstName": "Ada",
                "lastName": "Lovelace",
            },
        }
    }


def test_password_digest_never_rendered(registry):
    attributes = ObjectRenderer(make_user(), registry=registry).render()["data"]["attributes"]

    assert "passwordDigest" not in attributes
    assert "password_digest" not in attributes


def test_collection_renderer(registry):
    users = [make_user(i, f"user{i}@example.com") for i in range(1, 4)]

    body = CollectionRenderer(users, registry=registry).render()

    assert [item["id"] for item in body["data"]] == ["1", "2", "3"]
    assert all(item["type"] == "users" for item in body["data"])


def test_empty_collection(registry):
    assert CollectionRenderer([], registry=registry).render() == {"data": []}


@pytest.mark.parametrize("renderer_cls", [ObjectRenderer, CollectionRenderer])
def test_nil_raises(registry, renderer_cls):
    with pytest.raises(RenderError, match="Provided object must not be nil"):
        renderer_cls(None, registry=registry).render()


def test_object_renderer_rejects_collection(registry):
    with pytest.raises(RenderError):
        ObjectRenderer([make_user()], registry=registry).render()


def test_collection_renderer_rejects_single_object(registry):
    with pytest.raises(RenderError):
        CollectionRenderer(make_user(), registry=registry).render()


def test_collection_must_be_homogeneous(registry):
    with pytest.raises(RenderError):
        CollectionRenderer([make_user(), Team(id=1, name="Rovers")], registry=registry).render()


def test_unregistered_type_raises():
    with pytest.raises(RenderError, match="No serializer registered for User"):
        ObjectRenderer(make_user(), registry=SerializerRegistry()).render()


def test_options(registry):
    body = ObjectRenderer(
        make_user(),
        {"fields": ["first_name"], "meta": {"total": 1}, "type": "players"},
        registry=registry,
    ).render()

    assert body["data"]["type"] == "players"
    assert body["data"]["attributes"] == {"firstName": "Ada"}
    assert body["meta"] == {"total": 1}


def test_serializer_override(registry):
    team = Team(id=7, name="Rovers")

    body = ObjectRenderer(team, {"serializer": TeamSerializer}, registry=registry).render()

    assert body["data"] == {"id": "7", "type": "teams", "attributes": {"name": "Rovers"}}


def test_match_attributes_camel_cased(registry):
    match = Match(
        id=3,
        home_team_id=1,
        away_team_id=2,
        date=datetime.date(2024, 5, 1),
        home_score=2,
        away_score=1,
    )

    body = ObjectRenderer(match, registry=registry).render()

    assert body["data"]["type"] == "matches"
    assert body["data"]["attributes"] == {
        "homeTeamId": 1,
        "awayTeamId": 2,
        "date": "2024-05-01",
        "homeScore": 2,
        "awayScore": 1,
    }


def test_registry_normalizes_type_casing():
    registry = SerializerRegistry()

    entry = registry.register(Team, TeamSerializer, "league_teams")

    assert entry.type == "leagueTeams"
    assert entry.human_name == "Team"
    assert Team in registry


def test_error_envelope_drops_missing_message():
    assert error_envelope("unauthorized") == {"data": {"errorName": "unauthorized"}}


def test_response_renderer_statuses(registry):
    renderer = ResponseRenderer(registry)

    assert renderer.render_object(make_user()).status_code == 200
    assert renderer.render_created(make_user()).status_code == 201

    deleted = renderer.render_deleted()
    assert deleted.status_code == 204
    assert deleted.body == b""


def test_response_renderer_errors(registry):
    renderer = ResponseRenderer(registry)

    invalid = renderer.render_record_invalid(RecordInvalid({"email": ["can't be blank"]}))
    assert invalid.status_code == 422
    assert json.loads(invalid.body) == {
        "data": {"errorName": "invalid_record", "errorMessage": {"email": ["can't be blank"]}}
    }

    not_found = renderer.render_record_not_found(RecordNotFound("User", 5))
    assert not_found.status_code == 404
    assert json.loads(not_found.body) == {
        "data": {"errorName": "record_not_found", "errorMessage": "User not found"}
    }

    unauthorized = renderer.render_unauthorized()
    assert unauthorized.status_code == 401
    assert unauthorized.headers["WWW-Authenticate"].startswith("Bearer")
