"""
Unit tests for BruteForceProtection with a mocked Redis client.
"""
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from league_api.core.config import settings
from league_api.services.brute_force_protection import BruteForceProtection


@pytest.fixture
def redis_mock():
    return AsyncMock()


@pytest.fixture
def protection(redis_mock, monkeypatch):
    monkeypatch.setattr(settings, "enable_brute_force_protection", True)
    service = BruteForceProtection()
    service._redis = redis_mock
    return service


@pytest.mark.asyncio
async def test_record_failed_attempt_sets_expiry_on_first_failure(protection, redis_mock):
    redis_mock.incr.return_value = 1

    await protection.record_failed_attempt("Player@Example.com", "10.0.0.1")

    redis_mock.incr.assert_any_await("failed_attempts:email:player@example.com")
    redis_mock.incr.assert_any_await("failed_attempts:ip:10.0.0.1")
    redis_mock.expire.assert_any_await(
        "failed_attempts:email:player@example.com",
        settings.brute_force_lockout_duration,
    )


@pytest.mark.asyncio
async def test_locked_out_after_threshold(protection, redis_mock):
    redis_mock.get.return_value = str(settings.brute_force_threshold)
    redis_mock.ttl.return_value = 120

    is_locked, reason = await protection.is_locked_out("player@example.com", "10.0.0.1")

    assert is_locked is True
    assert "120 seconds" in reason


@pytest.mark.asyncio
async def test_not_locked_below_threshold(protection, redis_mock):
    redis_mock.get.return_value = "1"

    assert await protection.is_locked_out("player@example.com", "10.0.0.1") == (False, None)


@pytest.mark.asyncio
async def test_fails_open_when_redis_down(protection, redis_mock):
    redis_mock.get.side_effect = RedisConnectionError("down")

    assert await protection.is_locked_out("player@example.com", "10.0.0.1") == (False, None)


@pytest.mark.asyncio
async def test_reset_deletes_both_counters(protection, redis_mock):
    await protection.reset_failed_attempts("player@example.com", "10.0.0.1")

    redis_mock.delete.assert_awaited_once_with(
        "failed_attempts:email:player@example.com",
        "failed_attempts:ip:10.0.0.1",
    )


@pytest.mark.asyncio
async def test_disabled_never_touches_redis(redis_mock, monkeypatch):
    monkeypatch.setattr(settings, "enable_brute_force_protection", False)
    service = BruteForceProtection()
    service._redis = redis_mock

    await service.record_failed_attempt("player@example.com", "10.0.0.1")
    assert await service.is_locked_out("player@example.com", "10.0.0.1") == (False, None)

    redis_mock.incr.assert_not_awaited()
    redis_mock.get.assert_not_awaited()


@pytest.mark.asyncio
async def test_password_grant_locked_out(client, user, application, monkeypatch):
    from league_api.services.brute_force_protection import brute_force_protection

    monkeypatch.setattr(
        brute_force_protection,
        "is_locked_out",
        AsyncMock(return_value=(True, "Too many failed attempts. Try again in 60 seconds.")),
    )

    response = await client.post(
        "/oauth/token",
        data={
            "grant_type": "password",
            "username": user.email,
            "password": "whatever",
            "client_id": application.uid,
            "client_secret": application.plaintext_secret,
        },
    )

    assert response.status_code == 429
    assert response.json()["error"] == "invalid_grant"
