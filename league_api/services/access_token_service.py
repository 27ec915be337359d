"""Access token service: issuing, resolving and revoking bearer tokens"""

from dataclasses import dataclass
from datetime import timedelta

from jose import JWTError
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from league_api.core.config import logger, settings
from league_api.models.access_token import AccessToken
from league_api.models.database import as_utc, utcnow
from league_api.models.oauth_application import OAuthApplication
from league_api.schemas.oauth import TokenResponse
from league_api.schemas.token import ResolvedToken
from league_api.services.token_service import token_service
from league_api.utils.crypto import digest_token


@dataclass
class IssuedToken:
    """A stored token record together with the strings handed to the client"""

    record: AccessToken
    access_token: str
    refresh_token: str | None

    def to_response(self) -> TokenResponse:
        return TokenResponse(
            access_token=self.access_token,
            expires_in=self.record.expires_in,
            refresh_token=self.refresh_token,
            scope=self.record.scopes,
            created_at=int(as_utc(self.record.created_at).timestamp()),
        )


class AccessTokenService:
    """Service for access token lifecycle"""

    async def issue(
        self,
        db: AsyncSession,
        application: OAuthApplication,
        resource_owner_id: int | None,
        scopes: str,
        use_refresh_token: bool = True,
        previous_refresh_token_digest: str = "",
    ) -> IssuedToken:
        """
        Sign a new access token (and refresh token) and store their digests

        Args:
            db: Database session
            application: Application the token is issued to
            resource_owner_id: Owning user, None for client tokens
            scopes: Normalized space-separated scopes
            use_refresh_token: Whether to issue a refresh token
            previous_refresh_token_digest: Digest of the refresh token being rotated

        Returns:
            IssuedToken with the stored record and the raw token strings
        """
        issued_at = utcnow().replace(microsecond=0)
        subject = str(resource_owner_id) if resource_owner_id is not None else application.uid

        access_token, access_payload = token_service.create_access_token(
            subject=subject,
            client_id=application.uid,
            scope=scopes,
            issued_at=issued_at,
        )

        refresh_token = None
        refresh_digest = None
        if use_refresh_token:
            refresh_token, refresh_payload = token_service.create_refresh_token(
                subject=subject,
                client_id=application.uid,
                scope=scopes,
                issued_at=issued_at,
            )
            refresh_digest = digest_token(refresh_payload.jti)

        record = AccessToken(
            resource_owner_id=resource_owner_id,
            application_id=application.id,
            token_digest=digest_token(access_payload.jti),
            refresh_token_digest=refresh_digest,
            previous_refresh_token_digest=previous_refresh_token_digest,
            scopes=scopes,
            expires_in=settings.access_token_lifetime,
            created_at=issued_at,
        )

        db.add(record)
        await db.commit()
        await db.refresh(record)

        logger.info(
            "Access token issued",
            extra={
                "token_id": record.id,
                "application_id": application.id,
                "resource_owner_id": resource_owner_id,
                "scope": scopes,
                "has_refresh_token": refresh_token is not None,
            },
        )

        return IssuedToken(record=record, access_token=access_token, refresh_token=refresh_token)

    async def find_by_access_token(self, db: AsyncSession, token: str) -> AccessToken | None:
        """Stored record for a signed access token, None if unknown or malformed"""
        try:
            payload = token_service.validate_access_token(token)
        except (JWTError, ValueError):
            return None

        result = await db.execute(
            select(AccessToken).where(AccessToken.token_digest == digest_token(payload.jti))
        )
        return result.scalar_one_or_none()

    async def find_by_refresh_token(self, db: AsyncSession, token: str) -> AccessToken | None:
        """Stored record for a signed refresh token, None if unknown or malformed"""
        try:
            payload = token_service.validate_refresh_token(token)
        except (JWTError, ValueError):
            return None

        result = await db.execute(
            select(AccessToken).where(AccessToken.refresh_token_digest == digest_token(payload.jti))
        )
        return result.scalar_one_or_none()

    async def resolve(self, db: AsyncSession, bearer_token: str | None) -> ResolvedToken | None:
        """
        Resolve a bearer token to what endpoints need to know about it

        Args:
            db: Database session
            bearer_token: Raw token from the Authorization header

        Returns:
            ResolvedToken, or None when missing, malformed, unknown, revoked or expired
        """
        if not bearer_token:
            return None

        record = await self.find_by_access_token(db, bearer_token)
        if record is None or not record.is_accessible:
            return None

        return ResolvedToken(
            resource_owner_id=record.resource_owner_id,
            scopes=frozenset(record.scope_list),
            valid_until=record.expires_at,
            application_id=record.application_id,
            token_id=record.id,
        )

    async def revoke(self, db: AsyncSession, record: AccessToken) -> None:
        """Revoke an access token together with its refresh token"""
        record.revoke()
        await db.commit()

        logger.info("Access token revoked", extra={"token_id": record.id})

    async def revoke_chain(self, db: AsyncSession, record: AccessToken) -> int:
        """
        Revoke every live token of the same owner and application

        Used when a revoked refresh token is presented again.

        Returns:
            Number of tokens revoked
        """
        record.revoke()

        owner_clause = (
            AccessToken.resource_owner_id.is_(None)
            if record.resource_owner_id is None
            else AccessToken.resource_owner_id == record.resource_owner_id
        )
        result = await db.execute(
            select(AccessToken).where(
                AccessToken.application_id == record.application_id,
                owner_clause,
                AccessToken.revoked_at.is_(None),
            )
        )
        tokens_to_revoke = result.scalars().all()

        for token in tokens_to_revoke:
            token.revoke()

        await db.commit()

        logger.warning(
            f"SECURITY: Revoked {len(tokens_to_revoke)} tokens in chain",
            extra={
                "resource_owner_id": record.resource_owner_id,
                "application_id": record.application_id,
            },
        )

        return len(tokens_to_revoke)

    async def cleanup_expired_tokens(self, db: AsyncSession, days_to_keep: int = 7) -> int:
        """
        Delete tokens revoked or expired more than days_to_keep ago

        Returns:
            Number of deleted tokens
        """
        cutoff = utcnow() - timedelta(days=days_to_keep)

        result = await db.execute(
            select(AccessToken).where(
                or_(AccessToken.revoked_at < cutoff, AccessToken.created_at < cutoff)
            )
        )
        tokens_to_delete = [token for token in result.scalars().all() if self._is_stale(token, cutoff)]

        for token in tokens_to_delete:
            await db.delete(token)

        await db.commit()

        count = len(tokens_to_delete)
        if count > 0:
            logger.info(f"Cleaned up {count} expired access tokens")

        return count

    def _is_stale(self, token: AccessToken, cutoff) -> bool:
        if token.revoked_at is not None:
            return as_utc(token.revoked_at) < cutoff
        # A live refresh token keeps the row usable past the access token expiry
        lifetime = settings.refresh_token_lifetime if token.refresh_token_digest else token.expires_in
        if lifetime is None:
            return False
        return as_utc(token.created_at) + timedelta(seconds=lifetime) < cutoff


# Global instance
access_token_service = AccessTokenService()
