"""Access grant service for the authorization code flow"""

import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from league_api.core.config import logger, settings
from league_api.models.access_grant import AccessGrant
from league_api.models.database import utcnow
from league_api.models.oauth_application import OAuthApplication
from league_api.utils.crypto import digest_token


class AccessGrantService:
    """Service for issuing and redeeming authorization codes"""

    async def create_grant(
        self,
        db: AsyncSession,
        application: OAuthApplication,
        resource_owner_id: int,
        redirect_uri: str,
        scopes: str,
    ) -> tuple[AccessGrant, str]:
        """
        Issue an authorization code

        Args:
            db: Database session
            application: Application being authorized
            resource_owner_id: Approving user
            redirect_uri: Redirect URI the code is bound to
            scopes: Normalized space-separated scopes

        Returns:
            Tuple of (stored grant, plaintext code)
        """
        code = secrets.token_urlsafe(32)

        grant = AccessGrant(
            resource_owner_id=resource_owner_id,
            application_id=application.id,
            token_digest=digest_token(code),
            expires_in=settings.authorization_code_lifetime,
            redirect_uri=redirect_uri,
            scopes=scopes,
        )

        db.add(grant)
        await db.commit()
        await db.refresh(grant)

        logger.info(
            "Authorization code issued",
            extra={"grant_id": grant.id, "application_id": application.id, "resource_owner_id": resource_owner_id},
        )

        return grant, code

    async def consume_grant(
        self,
        db: AsyncSession,
        application: OAuthApplication,
        code: str,
        redirect_uri: str | None,
    ) -> AccessGrant | None:
        """
        Redeem an authorization code once

        The grant is revoked whenever it is found for this application, so a
        code cannot be replayed even after a failed exchange.

        Returns:
            The grant if it is usable with this redirect URI, None otherwise
        """
        result = await db.execute(
            select(AccessGrant).where(
                AccessGrant.token_digest == digest_token(code),
                AccessGrant.application_id == application.id,
            )
        )
        grant = result.scalar_one_or_none()
        if grant is None:
            return None

        if not grant.is_accessible:
            logger.warning(
                "Authorization code reused or expired",
                extra={"grant_id": grant.id, "revoked": grant.is_revoked},
            )
            return None

        grant.revoked_at = utcnow()
        await db.commit()

        if redirect_uri != grant.redirect_uri:
            logger.warning("Authorization code redirect URI mismatch", extra={"grant_id": grant.id})
            return None

        return grant


# Global instance
access_grant_service = AccessGrantService()
