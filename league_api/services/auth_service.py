"""Authentication service: OAuth2 grant flows"""

from datetime import timedelta
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy.ext.asyncio import AsyncSession

from league_api.core.config import logger, settings
from league_api.core.errors import OAuthError
from league_api.models.access_token import AccessToken
from league_api.models.database import as_utc, utcnow
from league_api.models.oauth_application import OAuthApplication
from league_api.schemas.oauth import (
    GrantType,
    IntrospectionResponse,
    TokenInfoApplication,
    TokenInfoResponse,
    TokenRequest,
    TokenResponse,
    TokenTypeHint,
)
from league_api.schemas.token import ResolvedToken
from league_api.services.access_grant_service import access_grant_service
from league_api.services.access_token_service import access_token_service
from league_api.services.brute_force_protection import brute_force_protection
from league_api.services.oauth_application_service import oauth_application_service
from league_api.services.user_service import user_service


def invalid_client() -> OAuthError:
    return OAuthError("invalid_client", "Client authentication failed", status_code=401)


def append_query(uri: str, params: dict[str, str | None]) -> str:
    """Add params to the query string of uri, skipping None values"""
    parts = urlsplit(uri)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.extend((key, value) for key, value in params.items() if value is not None)
    return urlunsplit(parts._replace(query=urlencode(query)))


class AuthService:
    """Service for token issuance and the other token authority operations"""

    async def authenticate_client(
        self,
        db: AsyncSession,
        client_id: str | None,
        client_secret: str | None,
    ) -> OAuthApplication:
        """
        Authenticate the calling client

        Raises:
            OAuthError: invalid_client (401) if unknown or the secret is wrong
        """
        application = await oauth_application_service.authenticate_client(db, client_id, client_secret)
        if application is None:
            raise invalid_client()
        return application

    def negotiate_scopes(self, application: OAuthApplication, requested: str | None) -> str:
        """
        Raises:
            OAuthError: invalid_scope if any requested scope is not allowed
        """
        scopes = oauth_application_service.negotiate_scopes(application, requested)
        if scopes is None:
            raise OAuthError("invalid_scope", "The requested scope is invalid, unknown, or malformed.")
        return scopes

    async def exchange(
        self,
        db: AsyncSession,
        token_request: TokenRequest,
        ip_address: str = "unknown",
    ) -> TokenResponse:
        """
        Token endpoint: trade a grant for a bearer token

        Args:
            db: Database session
            token_request: Parsed token request (client credentials already merged in)
            ip_address: Caller address for brute-force accounting

        Returns:
            TokenResponse

        Raises:
            OAuthError: RFC 6749 error for any failed exchange
        """
        application = await self.authenticate_client(
            db,
            token_request.client_id,
            token_request.client_secret,
        )

        if token_request.grant_type == GrantType.PASSWORD:
            issued = await self.password_grant(db, application, token_request, ip_address)
        elif token_request.grant_type == GrantType.CLIENT_CREDENTIALS:
            issued = await self.client_credentials_grant(db, application, token_request)
        elif token_request.grant_type == GrantType.AUTHORIZATION_CODE:
            issued = await self.authorization_code_grant(db, application, token_request)
        else:
            issued = await self.refresh_token_grant(db, application, token_request)

        logger.info(
            f"{token_request.grant_type.value} grant successful",
            extra={
                "grant_type": token_request.grant_type.value,
                "client_id": application.uid,
                "resource_owner_id": issued.record.resource_owner_id,
                "scope": issued.record.scopes,
            },
        )

        return issued.to_response()

    async def password_grant(
        self,
        db: AsyncSession,
        application: OAuthApplication,
        token_request: TokenRequest,
        ip_address: str,
    ):
        """Resource owner password credentials grant"""
        if not token_request.username or not token_request.password:
            raise OAuthError("invalid_request", "Missing required parameters: username and password")

        is_locked, lockout_reason = await brute_force_protection.is_locked_out(
            token_request.username,
            ip_address,
        )
        if is_locked:
            raise OAuthError("invalid_grant", lockout_reason or "Account temporarily locked", status_code=429)

        scopes = self.negotiate_scopes(application, token_request.scope)

        user = await user_service.authenticate(db, token_request.username, token_request.password)
        if user is None:
            await brute_force_protection.record_failed_attempt(token_request.username, ip_address)
            raise OAuthError("invalid_grant", "Invalid email or password")

        await brute_force_protection.reset_failed_attempts(token_request.username, ip_address)

        return await access_token_service.issue(db, application, user.id, scopes)

    async def client_credentials_grant(
        self,
        db: AsyncSession,
        application: OAuthApplication,
        token_request: TokenRequest,
    ):
        """Client credentials grant: confidential clients only, no refresh token"""
        if not application.confidential:
            raise OAuthError("unauthorized_client", "Public clients cannot use client credentials")

        scopes = self.negotiate_scopes(application, token_request.scope)

        return await access_token_service.issue(db, application, None, scopes, use_refresh_token=False)

    async def authorization_code_grant(
        self,
        db: AsyncSession,
        application: OAuthApplication,
        token_request: TokenRequest,
    ):
        """Authorization code grant: redeem a code from the authorize endpoint"""
        if not token_request.code:
            raise OAuthError("invalid_request", "Missing required parameter: code")

        grant = await access_grant_service.consume_grant(
            db,
            application,
            token_request.code,
            token_request.redirect_uri,
        )
        if grant is None:
            raise OAuthError(
                "invalid_grant",
                "The provided authorization grant is invalid, expired, revoked, "
                "does not match the redirection URI used in the authorization request, "
                "or was issued to another client.",
            )

        return await access_token_service.issue(db, application, grant.resource_owner_id, grant.scopes)

    async def refresh_token_grant(
        self,
        db: AsyncSession,
        application: OAuthApplication,
        token_request: TokenRequest,
    ):
        """
        Refresh token grant with rotation

        The presented token is revoked and the new one records it as its
        predecessor. Presenting an already revoked refresh token revokes every
        live token of that owner and application.
        """
        if not token_request.refresh_token:
            raise OAuthError("invalid_request", "Missing required parameter: refresh_token")

        record = await access_token_service.find_by_refresh_token(db, token_request.refresh_token)
        if record is None or record.application_id != application.id:
            raise OAuthError("invalid_grant", "Invalid or expired refresh token")

        if record.is_revoked:
            logger.warning(
                "SECURITY: Refresh token reuse detected",
                extra={"token_id": record.id, "resource_owner_id": record.resource_owner_id},
            )
            await access_token_service.revoke_chain(db, record)
            raise OAuthError("invalid_grant", "Refresh token has been revoked")

        if token_request.scope and token_request.scope.strip():
            requested = set(token_request.scope.split())
            if not requested <= set(record.scope_list):
                raise OAuthError("invalid_scope", "The requested scope is invalid, unknown, or malformed.")
            scopes = " ".join(s for s in record.scope_list if s in requested)
        else:
            scopes = record.scopes

        record.revoke()
        return await access_token_service.issue(
            db,
            application,
            record.resource_owner_id,
            scopes,
            previous_refresh_token_digest=record.refresh_token_digest or "",
        )

    async def authorize(
        self,
        db: AsyncSession,
        resource_owner_id: int,
        response_type: str | None,
        client_id: str | None,
        redirect_uri: str | None,
        scope: str | None,
        state: str | None,
    ) -> str:
        """
        Approve an application on behalf of the signed-in resource owner

        Returns:
            Redirect URI carrying the authorization code and state

        Raises:
            OAuthError: If the request is invalid
        """
        application = await oauth_application_service.get_by_uid(db, client_id) if client_id else None
        if application is None:
            raise invalid_client()

        if not redirect_uri and len(application.redirect_uris) == 1:
            redirect_uri = application.redirect_uris[0]
        if not redirect_uri or redirect_uri not in application.redirect_uris:
            raise OAuthError(
                "invalid_redirect_uri",
                "The requested redirect uri is malformed or doesn't match client redirect URI.",
            )

        if response_type != "code":
            raise OAuthError(
                "unsupported_response_type",
                "The authorization server does not support this response type.",
            )

        scopes = self.negotiate_scopes(application, scope)

        _, code = await access_grant_service.create_grant(
            db,
            application,
            resource_owner_id,
            redirect_uri,
            scopes,
        )

        return append_query(redirect_uri, {"code": code, "state": state})

    async def find_token(
        self,
        db: AsyncSession,
        token: str,
        hint: TokenTypeHint | None = None,
    ) -> tuple[AccessToken | None, TokenTypeHint | None]:
        """Look a token up as access or refresh token, hinted kind first"""
        lookups = [
            (TokenTypeHint.ACCESS_TOKEN, access_token_service.find_by_access_token),
            (TokenTypeHint.REFRESH_TOKEN, access_token_service.find_by_refresh_token),
        ]
        if hint == TokenTypeHint.REFRESH_TOKEN:
            lookups.reverse()

        for kind, lookup in lookups:
            record = await lookup(db, token)
            if record is not None:
                return record, kind
        return None, None

    async def revoke(
        self,
        db: AsyncSession,
        token: str,
        hint: TokenTypeHint | None,
        application: OAuthApplication | None,
    ) -> None:
        """
        RFC 7009 revocation

        Unknown tokens are ignored. Tokens of confidential applications can
        only be revoked by that application.

        Raises:
            OAuthError: unauthorized_client (403) when revoking another client's token
        """
        record, _ = await self.find_token(db, token, hint)
        if record is None:
            logger.debug("Revocation requested for unknown token")
            return

        if application is not None:
            allowed = application.id == record.application_id
        else:
            owner = await db.get(OAuthApplication, record.application_id)
            allowed = owner is not None and not owner.confidential

        if not allowed:
            raise OAuthError(
                "unauthorized_client",
                "You are not authorized to revoke this token",
                status_code=403,
            )

        await access_token_service.revoke(db, record)

    async def introspect(
        self,
        db: AsyncSession,
        token: str | None,
        hint: TokenTypeHint | None = None,
    ) -> IntrospectionResponse:
        """RFC 7662 introspection, inactive for anything unusable"""
        if not token:
            return IntrospectionResponse(active=False)

        record, kind = await self.find_token(db, token, hint)
        if record is None or record.is_revoked:
            return IntrospectionResponse(active=False)

        if kind == TokenTypeHint.ACCESS_TOKEN:
            if record.is_expired:
                return IntrospectionResponse(active=False)
            expires_at = record.expires_at
        else:
            expires_at = as_utc(record.created_at) + timedelta(seconds=settings.refresh_token_lifetime)

        application = await db.get(OAuthApplication, record.application_id)

        return IntrospectionResponse(
            active=True,
            scope=record.scopes,
            client_id=application.uid if application else None,
            token_type="Bearer" if kind == TokenTypeHint.ACCESS_TOKEN else kind.value,
            exp=int(expires_at.timestamp()) if expires_at else None,
            iat=int(as_utc(record.created_at).timestamp()),
            sub=str(record.resource_owner_id) if record.resource_owner_id is not None else None,
        )

    async def token_info(self, db: AsyncSession, resolved: ResolvedToken) -> TokenInfoResponse:
        """Details about an already resolved bearer token"""
        record = await db.get(AccessToken, resolved.token_id)
        application = await db.get(OAuthApplication, resolved.application_id)

        expires_in = None
        if resolved.valid_until is not None:
            expires_in = max(0, int((resolved.valid_until - utcnow()).total_seconds()))

        return TokenInfoResponse(
            resource_owner_id=resolved.resource_owner_id,
            scope=sorted(resolved.scopes, key=record.scope_list.index),
            expires_in=expires_in,
            application=TokenInfoApplication(uid=application.uid if application else None),
            created_at=int(as_utc(record.created_at).timestamp()),
        )


# Global instance
auth_service = AuthService()
