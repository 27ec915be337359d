"""OAuth schemas"""

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel

from league_api.schemas.common import ResourceParams


class GrantType(str, Enum):
    """OAuth2 grant types"""

    PASSWORD = "password"
    REFRESH_TOKEN = "refresh_token"
    AUTHORIZATION_CODE = "authorization_code"
    CLIENT_CREDENTIALS = "client_credentials"


class TokenTypeHint(str, Enum):
    """RFC 7009 / RFC 7662 token type hints"""

    ACCESS_TOKEN = "access_token"
    REFRESH_TOKEN = "refresh_token"


class TokenRequest(BaseModel):
    """OAuth2 token request"""

    grant_type: GrantType
    client_id: str | None = None
    client_secret: str | None = None

    # Password grant fields
    username: str | None = None
    password: str | None = None

    # Authorization code grant fields
    code: str | None = None
    redirect_uri: str | None = None

    # Refresh token grant fields
    refresh_token: str | None = None

    scope: str | None = None


class TokenResponse(BaseModel):
    """OAuth2 token response"""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    scope: str
    created_at: int


class TokenErrorResponse(BaseModel):
    """OAuth2 error response"""

    error: str
    error_description: str | None = None


class IntrospectionResponse(BaseModel):
    """RFC 7662 introspection response"""

    active: bool
    scope: str | None = None
    client_id: str | None = None
    token_type: str | None = None
    exp: int | None = None
    iat: int | None = None
    sub: str | None = None


class TokenInfoApplication(BaseModel):
    uid: str | None


class TokenInfoResponse(BaseModel):
    """Details about the bearer token presented"""

    resource_owner_id: int | None
    scope: list[str]
    expires_in: int | None
    application: TokenInfoApplication
    created_at: int


class AuthorizeResponse(BaseModel):
    """Authorization endpoint response for API clients"""

    status: str = "redirect"
    redirect_uri: str


class OAuthApplicationParams(ResourceParams):
    """Attributes a client may set on an OAuth application"""

    root_key: ClassVar[str] = "oauth_application"

    name: str | None = None
    redirect_uri: str | None = None
    scopes: str | None = None
    confidential: bool | None = None
