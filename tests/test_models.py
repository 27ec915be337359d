"""
Tests for model constraints enforced by the store.
"""
import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from league_api.models import Card, CardType, Goal, Match, Team, User


async def make_teams(db):
    home, away = Team(name="Rovers"), Team(name="United")
    db.add_all([home, away])
    await db.commit()
    return home, away


@pytest.mark.asyncio
async def test_match_unique_per_teams_and_date(db):
    home, away = await make_teams(db)
    kickoff = datetime.date(2024, 5, 1)
    db.add(Match(home_team_id=home.id, away_team_id=away.id, date=kickoff))
    await db.commit()

    db.add(Match(home_team_id=home.id, away_team_id=away.id, date=kickoff))
    with pytest.raises(IntegrityError):
        await db.commit()
    await db.rollback()

    # Return fixture on the same day is a different match
    db.add(Match(home_team_id=away.id, away_team_id=home.id, date=kickoff))
    await db.commit()


@pytest.mark.asyncio
async def test_match_scores_default_to_zero(db):
    home, away = await make_teams(db)
    match = Match(home_team_id=home.id, away_team_id=away.id, date=datetime.date(2024, 5, 1))
    db.add(match)
    await db.commit()

    assert (match.home_score, match.away_score) == (0, 0)


@pytest.mark.asyncio
async def test_team_name_unique(db):
    db.add_all([Team(name="Rovers"), Team(name="Rovers")])

    with pytest.raises(IntegrityError):
        await db.commit()


@pytest.mark.asyncio
@pytest.mark.parametrize("stored, duplicate", [("a@example.com", "A@EXAMPLE.COM"), ("éva@example.com", "Éva@example.com")])
async def test_user_email_unique_index_ignores_case(db, stored, duplicate):
    db.add(User(email=stored, first_name="A", last_name="B", password_digest="x"))
    await db.commit()

    db.add(User(email=duplicate, first_name="A", last_name="B", password_digest="x"))
    with pytest.raises(IntegrityError):
        await db.commit()


@pytest.mark.asyncio
async def test_foreign_keys_enforced(db):
    db.add(Goal(match_id=12345, player_id=67890))

    with pytest.raises(IntegrityError):
        await db.commit()


@pytest.mark.asyncio
async def test_card_for_player(db, user):
    home, away = await make_teams(db)
    match = Match(home_team_id=home.id, away_team_id=away.id, date=datetime.date(2024, 5, 1))
    db.add(match)
    await db.commit()

    card = Card(match_id=match.id, player_id=user.id, card_type=CardType.YELLOW.value)
    db.add(card)
    await db.commit()

    assert card.id is not None
    assert card.card_type == "yellow"


def test_user_helpers():
    user = User(email="a@example.com", first_name="Ada", last_name="Lovelace", password_digest="x")

    assert user.full_name == "Ada Lovelace"
    assert user.is_admin is False
    assert user.is_confirmed is False
