"""OAuth2 endpoints"""

import base64
import binascii
from typing import Any
from urllib.parse import unquote

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from league_api.core.config import logger
from league_api.core.dependencies import CurrentToken, CurrentUser, DBSession, OptionalToken
from league_api.core.errors import OAuthError
from league_api.middleware.logging import get_client_ip
from league_api.schemas.oauth import AuthorizeResponse, GrantType, TokenRequest, TokenTypeHint
from league_api.services.auth_service import auth_service

router = APIRouter()

NO_STORE_HEADERS = {"Cache-Control": "no-store", "Pragma": "no-cache"}


async def read_params(request: Request) -> dict[str, Any]:
    """
    Request parameters from a JSON or form body

    Raises:
        OAuthError: invalid_request if the body cannot be decoded
    """
    content_type = request.headers.get("Content-Type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise OAuthError("invalid_request", "Request body is not valid JSON")
        if not isinstance(body, dict):
            raise OAuthError("invalid_request", "Request body must be a JSON object")
        return {key: value for key, value in body.items() if value is not None}

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str) and value != ""}


def basic_credentials(request: Request) -> tuple[str, str] | None:
    """client_id and client_secret from an HTTP Basic Authorization header"""
    header = request.headers.get("Authorization", "")
    scheme, _, encoded = header.partition(" ")
    if scheme.lower() != "basic" or not encoded:
        return None

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise OAuthError("invalid_client", "Malformed Basic credentials", status_code=401)

    client_id, separator, client_secret = decoded.partition(":")
    if not separator:
        raise OAuthError("invalid_client", "Malformed Basic credentials", status_code=401)
    return unquote(client_id), unquote(client_secret)


def client_credentials(request: Request, params: dict[str, Any]) -> tuple[str | None, str | None]:
    """Client credentials from Basic auth, falling back to body parameters"""
    credentials = basic_credentials(request)
    if credentials is not None:
        return credentials
    return params.get("client_id"), params.get("client_secret")


@router.post("/token")
async def token_endpoint(request: Request, db: DBSession):
    """
    OAuth2 Token Endpoint

    Supports:
    - Password Grant: email + password → access_token + refresh_token
    - Client Credentials Grant: confidential client → access_token
    - Authorization Code Grant: code from /oauth/authorize → token pair
    - Refresh Token Grant: refresh_token → rotated token pair

    Accepts form or JSON bodies; clients authenticate with HTTP Basic or
    client_id / client_secret parameters.
    """
    params = await read_params(request)
    ip_address = get_client_ip(request)

    grant_type = params.get("grant_type")
    if not grant_type:
        raise OAuthError("invalid_request", "Missing required parameter: grant_type")
    if grant_type not in {g.value for g in GrantType}:
        raise OAuthError("unsupported_grant_type", f"Grant type '{grant_type}' is not supported")

    client_id, client_secret = client_credentials(request, params)

    try:
        token_request = TokenRequest(**{**params, "client_id": client_id, "client_secret": client_secret})
    except ValidationError:
        raise OAuthError("invalid_request", "Malformed token request")

    logger.info(
        f"Token endpoint called: grant_type={grant_type}",
        extra={"grant_type": grant_type, "client_id": client_id, "ip_address": ip_address},
    )

    token_response = await auth_service.exchange(db, token_request, ip_address)

    return JSONResponse(
        content=token_response.model_dump(exclude_none=True),
        status_code=200,
        headers=NO_STORE_HEADERS,
    )


@router.post("/authorize", response_model=AuthorizeResponse)
async def authorize_endpoint(request: Request, db: DBSession, user: CurrentUser):
    """
    Authorization endpoint for API clients

    The signed-in resource owner approves the application; the response
    names the redirect URI carrying the authorization code.
    """
    params = await read_params(request)

    redirect_uri = await auth_service.authorize(
        db,
        resource_owner_id=user.id,
        response_type=params.get("response_type"),
        client_id=params.get("client_id"),
        redirect_uri=params.get("redirect_uri"),
        scope=params.get("scope"),
        state=params.get("state"),
    )

    return AuthorizeResponse(redirect_uri=redirect_uri)


def parse_token_type_hint(value: Any) -> TokenTypeHint | None:
    try:
        return TokenTypeHint(value) if value else None
    except ValueError:
        return None


@router.post("/revoke")
async def revoke_endpoint(request: Request, db: DBSession):
    """
    Token revocation (RFC 7009)

    Responds 200 whether or not the token was known.
    """
    params = await read_params(request)

    token = params.get("token")
    if not token:
        raise OAuthError("invalid_request", "Missing required parameter: token")

    client_id, client_secret = client_credentials(request, params)
    application = None
    if client_id:
        application = await auth_service.authenticate_client(db, client_id, client_secret)

    await auth_service.revoke(db, token, parse_token_type_hint(params.get("token_type_hint")), application)

    return JSONResponse(content={}, status_code=200)


@router.post("/introspect")
async def introspect_endpoint(request: Request, db: DBSession, bearer: OptionalToken):
    """
    Token introspection (RFC 7662)

    The caller authenticates as a client or with a valid bearer token.
    """
    params = await read_params(request)

    if bearer is None:
        client_id, client_secret = client_credentials(request, params)
        await auth_service.authenticate_client(db, client_id, client_secret)

    introspection = await auth_service.introspect(
        db,
        params.get("token"),
        parse_token_type_hint(params.get("token_type_hint")),
    )

    return JSONResponse(content=introspection.model_dump(exclude_none=True), headers=NO_STORE_HEADERS)


@router.get("/token/info")
async def token_info_endpoint(db: DBSession, token: CurrentToken):
    """Details about the bearer token presented"""
    info = await auth_service.token_info(db, token)
    return JSONResponse(content=info.model_dump())
