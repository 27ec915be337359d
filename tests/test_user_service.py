"""
Unit tests for UserService: validation, persistence and credential verification.
"""
import pytest

from league_api.core.errors import RecordInvalid, RecordNotFound
from league_api.models import Team
from league_api.services.user_service import user_service
from league_api.utils.crypto import verify_password

from tests.conftest import PASSWORD, user_params


@pytest.mark.asyncio
async def test_create_user_hashes_password(db):
    user = await user_service.create_user(db, user_params())

    assert user.id is not None
    assert user.password_digest != PASSWORD
    assert verify_password(PASSWORD, user.password_digest)
    assert user.admin is False
    assert user.full_name == "Ada Lovelace"


@pytest.mark.asyncio
async def test_create_user_reports_every_violation(db):
    with pytest.raises(RecordInvalid) as exc_info:
        await user_service.create_user(db, {"email": "nope"})

    errors = exc_info.value.errors
    assert errors["email"] == ["is invalid"]
    assert errors["password"] == ["can't be blank"]
    assert errors["first_name"] == ["can't be blank"]
    assert errors["last_name"] == ["can't be blank"]


@pytest.mark.asyncio
async def test_password_length_limits(db):
    with pytest.raises(RecordInvalid) as exc_info:
        await user_service.create_user(db, user_params(password="abc", password_confirmation="abc"))
    assert exc_info.value.errors["password"] == ["is too short (minimum is 6 characters)"]

    long_password = "x" * 73
    with pytest.raises(RecordInvalid) as exc_info:
        await user_service.create_user(
            db, user_params(password=long_password, password_confirmation=long_password)
        )
    assert exc_info.value.errors["password"] == ["is too long (maximum is 72 characters)"]


@pytest.mark.asyncio
async def test_password_confirmation_must_match(db):
    with pytest.raises(RecordInvalid) as exc_info:
        await user_service.create_user(db, user_params(password_confirmation="different"))

    assert exc_info.value.errors == {"password_confirmation": ["doesn't match Password"]}


@pytest.mark.asyncio
async def test_email_unique_ignoring_case(db, user):
    with pytest.raises(RecordInvalid) as exc_info:
        await user_service.create_user(db, user_params(email="PLAYER@Example.com"))

    assert exc_info.value.errors == {"email": ["has already been taken"]}


@pytest.mark.asyncio
async def test_email_unique_ignoring_non_ascii_case(db):
    await user_service.create_user(db, user_params(email="Éva@example.com"))

    with pytest.raises(RecordInvalid) as exc_info:
        await user_service.create_user(db, user_params(email="éva@example.com"))

    assert exc_info.value.errors == {"email": ["has already been taken"]}

@pytest.mark.asyncio
async def test_unknown_team_rejected(db):
    with pytest.raises(RecordInvalid) as exc_info:
        await user_service.create_user(db, user_params(team_id=999))

    assert exc_info.value.errors == {"team": ["must exist"]}


@pytest.mark.asyncio
async def test_user_joins_existing_team(db):
    team = Team(name="Rovers")
    db.add(team)
    await db.commit()

    user = await user_service.create_user(db, user_params(team_id=team.id))

    assert user.team_id == team.id


@pytest.mark.asyncio
async def test_update_name_without_password(db, user):
    digest = user.password_digest

    updated = await user_service.update_user(db, user.id, {"first_name": "Grace"})

    assert updated.first_name == "Grace"
    assert updated.password_digest == digest


@pytest.mark.asyncio
async def test_blank_password_on_update_is_ignored(db, user):
    digest = user.password_digest

    updated = await user_service.update_user(db, user.id, {"password": "", "last_name": "Hopper"})

    assert updated.last_name == "Hopper"
    assert updated.password_digest == digest


@pytest.mark.asyncio
async def test_password_change_requires_confirmation(db, user):
    with pytest.raises(RecordInvalid) as exc_info:
        await user_service.update_user(db, user.id, {"password": "newsecret"})

    assert exc_info.value.errors == {"password_confirmation": ["can't be blank"]}


@pytest.mark.asyncio
async def test_password_change(db, user):
    await user_service.update_user(
        db, user.id, {"password": "newsecret", "password_confirmation": "newsecret"}
    )

    assert await user_service.authenticate(db, user.email, "newsecret") is not None
    assert await user_service.authenticate(db, user.email, PASSWORD) is None


@pytest.mark.asyncio
async def test_update_keeps_own_email(db, user):
    updated = await user_service.update_user(db, user.id, {"email": "Player@example.com"})

    assert updated.email == "Player@example.com"


@pytest.mark.asyncio
async def test_find_unknown_or_non_numeric_id(db):
    with pytest.raises(RecordNotFound) as exc_info:
        await user_service.find(db, 999999)
    assert str(exc_info.value) == "User not found"

    with pytest.raises(RecordNotFound):
        await user_service.find(db, "abc")

    with pytest.raises(RecordNotFound):
        await user_service.find(db, "99999999999999999999999")

    with pytest.raises(RecordNotFound):
        await user_service.find(db, 0)


@pytest.mark.asyncio
async def test_delete_user(db, user):
    await user_service.delete_user(db, user.id)

    assert await user_service.get_by_id(db, user.id) is None


@pytest.mark.asyncio
async def test_list_users_paginates_only_with_both_params(db):
    for i in range(5):
        await user_service.create_user(db, user_params(email=f"player{i}@example.com"))

    assert len(await user_service.list_users(db)) == 5
    assert len(await user_service.list_users(db, page=2)) == 5

    page = await user_service.list_users(db, page=2, per_page=2)
    assert [u.email for u in page] == ["player2@example.com", "player3@example.com"]


@pytest.mark.asyncio
async def test_authenticate_matches_ignoring_email_case(db, user):
    found = await user_service.authenticate(db, "PLAYER@EXAMPLE.COM", PASSWORD)

    assert found is not None
    assert found.id == user.id


@pytest.mark.asyncio
@pytest.mark.parametrize("email", ["Éva@example.com", "éva@EXAMPLE.com", "ÉVA@example.com"])
async def test_authenticate_non_ascii_email(db, email):
    created = await user_service.create_user(db, user_params(email="Éva@example.com"))

    found = await user_service.authenticate(db, email, PASSWORD)

    assert found is not None
    assert found.id == created.id

@pytest.mark.asyncio
async def test_authenticate_wrong_password(db, user):
    assert await user_service.authenticate(db, user.email, "wrong-password") is None


@pytest.mark.asyncio
async def test_authenticate_unknown_email(db):
    assert await user_service.authenticate(db, "nobody@example.com", PASSWORD) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("password", ["", None])
async def test_authenticate_empty_password(db, user, password):
    assert await user_service.authenticate(db, user.email, password) is None
