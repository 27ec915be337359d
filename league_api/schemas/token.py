"""Token schemas (JWT payload)"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TokenType(str, Enum):
    """Token types"""

    ACCESS = "access"
    REFRESH = "refresh"


class JWTPayload(BaseModel):
    """Claims carried by every issued token"""

    iss: str = Field(..., description="Issuer")
    sub: str = Field(..., description="Resource owner id, or client uid for client tokens")
    aud: str = Field(..., description="Audience")
    exp: int = Field(..., description="Expiration time (Unix timestamp)")
    iat: int = Field(..., description="Issued at (Unix timestamp)")
    jti: str = Field(..., description="JWT ID (unique identifier)")
    type: TokenType = Field(..., description="Token type")
    client_id: str = Field(..., description="Application uid")
    scope: str = Field(..., description="Space-separated scopes")


class AccessTokenPayload(JWTPayload):
    type: TokenType = TokenType.ACCESS


class RefreshTokenPayload(JWTPayload):
    type: TokenType = TokenType.REFRESH


@dataclass(frozen=True)
class ResolvedToken:
    """What the token authority tells endpoints about a valid bearer token"""

    resource_owner_id: int | None
    scopes: frozenset[str]
    valid_until: datetime | None
    application_id: int
    token_id: int

    def has_scopes(self, *required: str) -> bool:
        return set(required) <= self.scopes
