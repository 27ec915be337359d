"""Main FastAPI application"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from league_api.api.v1 import jwks, oauth, oauth_applications, users
from league_api.core.config import logger, settings
from league_api.core.errors import (
    InsufficientScope,
    NotAuthenticated,
    OAuthError,
    RecordInvalid,
    RecordNotFound,
)
from league_api.middleware import StructuredLoggingMiddleware
from league_api.rendering import response_renderer, serializer_registry
from league_api.schemas.oauth import TokenErrorResponse
from league_api.serializers import register_serializers

register_serializers(serializer_registry)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting League API...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Version: {settings.version}")

    try:
        from league_api.core.security import rsa_key_manager

        rsa_key_manager.load_keys()
        logger.info("RSA keys loaded")

        from league_api.models import init_db

        await init_db()
        logger.info("Database initialized")

        from league_api.core.seed import seed_default_data

        await seed_default_data()
        logger.info("Default data seeded")

    except Exception as e:
        logger.error(f"Failed to initialize: {e}")
        raise

    yield

    logger.info("Shutting down League API...")
    from league_api.models import close_db
    from league_api.services.brute_force_protection import brute_force_protection

    await brute_force_protection.close()
    await close_db()


app = FastAPI(
    title="League API",
    description="Sports league REST API secured by an OAuth2 authorization server",
    version=settings.version,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.add_middleware(StructuredLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RecordInvalid)
async def record_invalid_handler(request: Request, exc: RecordInvalid):
    logger.info(f"Record invalid: {exc.full_messages()}", extra={"path": request.url.path})
    return response_renderer.render_record_invalid(exc)


@app.exception_handler(RecordNotFound)
async def record_not_found_handler(request: Request, exc: RecordNotFound):
    return response_renderer.render_record_not_found(exc)


@app.exception_handler(NotAuthenticated)
async def not_authenticated_handler(request: Request, exc: NotAuthenticated):
    return response_renderer.render_unauthorized()


@app.exception_handler(InsufficientScope)
async def insufficient_scope_handler(request: Request, exc: InsufficientScope):
    logger.warning(
        f"Insufficient scope: {request.method} {request.url.path}",
        extra={"required_scopes": list(exc.required)},
    )
    return response_renderer.render_forbidden(str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed query or body parameters become an invalid_record envelope"""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        name = location[-1] if location else "base"
        errors.setdefault(name, []).append(error.get("msg", "is invalid"))
    return response_renderer.render_record_invalid(RecordInvalid(errors))


@app.exception_handler(OAuthError)
async def oauth_error_handler(request: Request, exc: OAuthError):
    """RFC 6749 error body"""
    headers = {"Cache-Control": "no-store", "Pragma": "no-cache"}
    if exc.status_code == 401:
        headers["WWW-Authenticate"] = 'Basic realm="League API"'

    logger.warning(
        f"OAuth error: {exc.error}",
        extra={"error": exc.error, "path": request.url.path, "status_code": exc.status_code},
    )

    return JSONResponse(
        content=TokenErrorResponse(error=exc.error, error_description=exc.description).model_dump(exclude_none=True),
        status_code=exc.status_code,
        headers=headers,
    )


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return JSONResponse(
        content={
            "status": "healthy",
            "version": settings.version,
            "environment": settings.environment,
        }
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return JSONResponse(
        content={
            "service": "League API",
            "version": settings.version,
            "docs": "/docs" if settings.is_development else None,
        }
    )


app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
app.include_router(oauth_applications.router, prefix="/api/v1/oauth_applications", tags=["OAuth applications"])
app.include_router(oauth.router, prefix="/oauth", tags=["OAuth2"])
app.include_router(jwks.router, prefix="/.well-known", tags=["JWKS"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "league_api.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
