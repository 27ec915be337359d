"""Token service for JWT operations"""

import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwk, jwt

from league_api.core.config import logger, settings
from league_api.core.security import rsa_key_manager
from league_api.schemas.token import AccessTokenPayload, RefreshTokenPayload, TokenType


class TokenService:
    """Service for signing and validating JWT bearer and refresh tokens"""

    def __init__(self):
        self.algorithm = "RS256"

    def _build_payload(
        self,
        payload_cls: type[AccessTokenPayload] | type[RefreshTokenPayload],
        subject: str,
        client_id: str,
        scope: str,
        lifetime: int,
        issued_at: datetime | None = None,
    ) -> AccessTokenPayload | RefreshTokenPayload:
        now = issued_at or datetime.now(timezone.utc)
        exp = now + timedelta(seconds=lifetime)

        return payload_cls(
            iss=settings.jwt_issuer,
            sub=subject,
            aud=settings.jwt_audience,
            exp=int(exp.timestamp()),
            iat=int(now.timestamp()),
            jti=str(uuid.uuid4()),
            client_id=client_id,
            scope=scope,
        )

    def _sign(self, payload: AccessTokenPayload | RefreshTokenPayload) -> str:
        return jwt.encode(
            payload.model_dump(mode="json"),
            rsa_key_manager.get_private_key_pem(),
            algorithm=self.algorithm,
            headers={"kid": rsa_key_manager.kid},
        )

    def create_access_token(
        self,
        subject: str,
        client_id: str,
        scope: str,
        lifetime: int | None = None,
        issued_at: datetime | None = None,
    ) -> tuple[str, AccessTokenPayload]:
        """
        Create an access token

        Args:
            subject: Resource owner id, or the client uid for client tokens
            client_id: Application uid
            scope: Space-separated scopes
            lifetime: Token lifetime in seconds (default from settings)
            issued_at: Issue time shared with the stored record

        Returns:
            Tuple of (token string, payload)
        """
        payload = self._build_payload(
            AccessTokenPayload,
            subject,
            client_id,
            scope,
            lifetime or settings.access_token_lifetime,
            issued_at,
        )
        return self._sign(payload), payload

    def create_refresh_token(
        self,
        subject: str,
        client_id: str,
        scope: str,
        lifetime: int | None = None,
        issued_at: datetime | None = None,
    ) -> tuple[str, RefreshTokenPayload]:
        """
        Create a refresh token

        Args:
            subject: Resource owner id
            client_id: Application uid
            scope: Space-separated scopes
            lifetime: Token lifetime in seconds (default from settings)
            issued_at: Issue time shared with the stored record

        Returns:
            Tuple of (token string, payload)
        """
        payload = self._build_payload(
            RefreshTokenPayload,
            subject,
            client_id,
            scope,
            lifetime or settings.refresh_token_lifetime,
            issued_at,
        )
        return self._sign(payload), payload

    def decode_token(self, token: str, verify: bool = True) -> dict:
        """
        Decode and validate a JWT token

        Args:
            token: JWT token string
            verify: Whether to verify signature and expiration

        Returns:
            Decoded payload

        Raises:
            JWTError: If token is invalid
        """
        try:
            return jwt.decode(
                token,
                rsa_key_manager.get_public_key_pem(),
                algorithms=[self.algorithm],
                audience=settings.jwt_audience,
                issuer=settings.jwt_issuer,
                options={"verify_signature": verify, "verify_exp": verify},
            )
        except JWTError as e:
            logger.debug(
                f"Token decode failed: {e}",
                extra={"trace_point": "token_decode_failed", "error_type": type(e).__name__},
            )
            raise JWTError(f"Invalid token: {str(e)}")

    def validate_access_token(self, token: str) -> AccessTokenPayload:
        """
        Validate an access token

        Raises:
            JWTError: If token is invalid or is not an access token
        """
        return self._validate(token, TokenType.ACCESS, AccessTokenPayload)

    def validate_refresh_token(self, token: str) -> RefreshTokenPayload:
        return self._validate(token, TokenType.REFRESH, RefreshTokenPayload)

    def _validate(self, token, token_type: TokenType, payload_cls):
        claims = self.decode_token(token)
        # Both kinds share one key, the type claim keeps them apart
        if claims.get("type") != token_type.value:
            raise JWTError(f"Expected a {token_type.value} token")
        return payload_cls(**claims)

    def get_jwks(self) -> dict:
        """
        Get JWKS (JSON Web Key Set) for public key distribution

        Returns:
            JWKS dictionary with the signing public key
        """
        key = jwk.construct(rsa_key_manager.get_public_key_pem(), self.algorithm).to_dict()
        key.update({"use": "sig", "kid": rsa_key_manager.kid, "alg": self.algorithm})
        return {"keys": [key]}


# Global instance
token_service = TokenService()
