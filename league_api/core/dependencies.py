"""FastAPI dependencies"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from league_api.core.config import settings
from league_api.core.errors import InsufficientScope, NotAuthenticated
from league_api.models.database import get_db
from league_api.models.user import User
from league_api.rendering.responses import ResponseRenderer, response_renderer
from league_api.schemas.token import ResolvedToken
from league_api.services.access_token_service import access_token_service
from league_api.services.user_service import user_service

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_renderer() -> ResponseRenderer:
    """Get the renderer endpoints delegate output to"""
    return response_renderer


RendererDep = Annotated[ResponseRenderer, Depends(get_renderer)]


def extract_bearer_token(request: Request) -> str | None:
    """
    Token from ``Authorization: Bearer <token>``

    Returns:
        The token, or None when the header is missing or uses another scheme
    """
    header = request.headers.get("Authorization")
    if not header:
        return None

    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_optional_token(request: Request, db: DBSession) -> ResolvedToken | None:
    """Resolve the bearer token if one is usable, None otherwise"""
    token = await access_token_service.resolve(db, extract_bearer_token(request))
    request.state.token = token
    return token


async def get_current_token(
    token: Annotated[ResolvedToken | None, Depends(get_optional_token)],
) -> ResolvedToken:
    """
    Require a valid bearer token

    Raises:
        NotAuthenticated: Missing, unknown, revoked or expired token
    """
    if token is None:
        raise NotAuthenticated()
    return token


OptionalToken = Annotated[ResolvedToken | None, Depends(get_optional_token)]
CurrentToken = Annotated[ResolvedToken, Depends(get_current_token)]


def require_scopes(*scopes: str):
    """
    Dependency factory requiring a valid token carrying every scope given

    Scope checks are skipped when ``enforce_scopes`` is off; a valid token
    is still required.
    """

    async def dependency(token: CurrentToken) -> ResolvedToken:
        if settings.enforce_scopes and not token.has_scopes(*scopes):
            raise InsufficientScope(scopes)
        return token

    return dependency


async def get_current_user(token: CurrentToken, db: DBSession) -> User:
    """
    Resource owner of the bearer token

    Raises:
        NotAuthenticated: Client tokens have no resource owner
    """
    if token.resource_owner_id is None:
        raise NotAuthenticated()

    user = await user_service.get_by_id(db, token.resource_owner_id)
    if user is None:
        raise NotAuthenticated()
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def authorize_application_registration(token: OptionalToken) -> ResolvedToken | None:
    """
    Gate for registering OAuth applications

    Open when ``allow_open_application_registration`` is set, otherwise an
    admin-scoped token is required.
    """
    if settings.allow_open_application_registration:
        return token
    if token is None:
        raise NotAuthenticated()
    if settings.enforce_scopes and not token.has_scopes("admin"):
        raise InsufficientScope(("admin",))
    return token


ReadScope = Depends(require_scopes("read"))
WriteScope = Depends(require_scopes("write"))
AdminScope = Depends(require_scopes("admin"))
