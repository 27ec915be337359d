"""Brute-force protection service"""

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from league_api.core.config import logger, settings


class BruteForceProtection:
    """
    Failed password attempt counters kept in Redis

    Counters expire after the lockout duration. Every Redis failure is
    logged and treated as "not locked" so logins keep working without Redis.
    """

    def __init__(self):
        self._redis: aioredis.Redis | None = None

    @property
    def enabled(self) -> bool:
        return settings.enable_brute_force_protection

    def get_redis(self) -> aioredis.Redis:
        """Get Redis connection"""
        if self._redis is None:
            self._redis = aioredis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._redis

    @staticmethod
    def _keys(email: str, ip_address: str) -> tuple[str, str]:
        return (
            f"failed_attempts:email:{email.strip().lower()}",
            f"failed_attempts:ip:{ip_address}",
        )

    async def record_failed_attempt(self, email: str, ip_address: str) -> None:
        """
        Record a failed login attempt

        Args:
            email: Email that failed
            ip_address: IP address of the request
        """
        if not self.enabled:
            return

        email_key, ip_key = self._keys(email, ip_address)

        try:
            redis = self.get_redis()
            email_count = await redis.incr(email_key)
            ip_count = await redis.incr(ip_key)

            # Reset after lockout duration
            if email_count == 1:
                await redis.expire(email_key, settings.brute_force_lockout_duration)
            if ip_count == 1:
                await redis.expire(ip_key, settings.brute_force_lockout_duration)

            logger.warning(
                "Failed login attempt",
                extra={"ip_address": ip_address, "email_count": email_count, "ip_count": ip_count},
            )

        except RedisError as e:
            logger.error(f"Failed to record failed attempt: {e}")

    async def is_locked_out(self, email: str, ip_address: str) -> tuple[bool, str | None]:
        """
        Check if email or IP is locked out

        Args:
            email: Email to check
            ip_address: IP address to check

        Returns:
            Tuple of (is_locked, reason)
        """
        if not self.enabled:
            return False, None

        email_key, ip_key = self._keys(email, ip_address)

        try:
            redis = self.get_redis()

            email_count = await redis.get(email_key)
            if email_count and int(email_count) >= settings.brute_force_threshold:
                ttl = await redis.ttl(email_key)
                logger.warning(f"Email locked out ({email_count} attempts, {ttl}s remaining)")
                return True, f"Too many failed attempts. Try again in {ttl} seconds."

            ip_count = await redis.get(ip_key)
            if ip_count and int(ip_count) >= settings.brute_force_threshold * 2:
                ttl = await redis.ttl(ip_key)
                logger.warning(f"IP locked out: {ip_address} ({ip_count} attempts, {ttl}s remaining)")
                return True, f"Too many failed attempts from this IP. Try again in {ttl} seconds."

            return False, None

        except RedisError as e:
            logger.error(f"Failed to check lockout: {e}")
            return False, None

    async def reset_failed_attempts(self, email: str, ip_address: str) -> None:
        """Reset failed attempts counters (on successful login)"""
        if not self.enabled:
            return

        try:
            await self.get_redis().delete(*self._keys(email, ip_address))
        except RedisError as e:
            logger.error(f"Failed to reset failed attempts: {e}")

    async def get_failed_attempts_count(self, email: str) -> int:
        """Number of failed attempts recorded for email"""
        email_key, _ = self._keys(email, "")
        try:
            count = await self.get_redis().get(email_key)
            return int(count) if count else 0
        except RedisError as e:
            logger.error(f"Failed to get failed attempts count: {e}")
            return 0

    async def close(self) -> None:
        """Close Redis connection"""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


# Global instance
brute_force_protection = BruteForceProtection()
