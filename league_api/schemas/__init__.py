"""Pydantic schemas"""

from league_api.schemas.common import ResourceParams
from league_api.schemas.oauth import (
    AuthorizeResponse,
    GrantType,
    IntrospectionResponse,
    OAuthApplicationParams,
    TokenErrorResponse,
    TokenInfoResponse,
    TokenRequest,
    TokenResponse,
    TokenTypeHint,
)
from league_api.schemas.token import (
    AccessTokenPayload,
    JWTPayload,
    RefreshTokenPayload,
    ResolvedToken,
    TokenType,
)
from league_api.schemas.user import UserParams

__all__ = [
    "ResourceParams",
    # OAuth
    "GrantType",
    "TokenTypeHint",
    "TokenRequest",
    "TokenResponse",
    "TokenErrorResponse",
    "IntrospectionResponse",
    "TokenInfoResponse",
    "AuthorizeResponse",
    "OAuthApplicationParams",
    # Token
    "TokenType",
    "JWTPayload",
    "AccessTokenPayload",
    "RefreshTokenPayload",
    "ResolvedToken",
    # User
    "UserParams",
]
