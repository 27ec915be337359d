"""OAuth Application service"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from league_api.core.config import logger, settings
from league_api.core.errors import RecordInvalid, RecordNotFound
from league_api.models.database import parse_record_id
from league_api.models.oauth_application import OAuthApplication
from league_api.utils.crypto import generate_secret, generate_uid, hash_password, verify_password
from league_api.utils.validators import (
    Check,
    ValidationContext,
    ValidationPipeline,
    present,
    redirect_uris,
    scopes_within,
    when_present,
)

APPLICATION_COLUMNS = ("name", "redirect_uri", "scopes", "confidential")


def application_validation_pipeline() -> ValidationPipeline:
    """Ordered checks run before every application write"""
    return ValidationPipeline(
        [
            Check("name", present, "can't be blank"),
            Check("redirect_uri", present, "can't be blank"),
            Check(
                "redirect_uri",
                redirect_uris,
                "must be an absolute URI without a fragment",
                when_present("redirect_uri"),
            ),
            Check(
                "scopes",
                scopes_within(lambda: settings.server_scopes),
                "doesn't match configured on the server.",
                when_present("scopes"),
            ),
        ]
    )


def normalize_scopes(value: str | None) -> str:
    """Collapse whitespace and drop duplicate scopes, keeping order"""
    if not value:
        return ""
    return " ".join(dict.fromkeys(value.split()))


class OAuthApplicationService:
    """Service for OAuth application management"""

    human_name = "OAuth application"

    async def list_applications(self, db: AsyncSession) -> list[OAuthApplication]:
        result = await db.execute(select(OAuthApplication).order_by(OAuthApplication.id))
        return list(result.scalars().all())

    async def find(self, db: AsyncSession, application_id: int | str) -> OAuthApplication:
        """
        Get application by id or raise

        Raises:
            RecordNotFound: If id is not a valid row id or no such application exists
        """
        record_id = parse_record_id(application_id)
        application = await db.get(OAuthApplication, record_id) if record_id is not None else None
        if application is None:
            raise RecordNotFound(self.human_name, application_id)
        return application

    async def get_by_uid(self, db: AsyncSession, uid: str) -> OAuthApplication | None:
        """
        Get application by its public client identifier

        Args:
            db: Database session
            uid: client_id sent by the client

        Returns:
            Application or None if not found
        """
        result = await db.execute(select(OAuthApplication).where(OAuthApplication.uid == uid))
        return result.scalar_one_or_none()

    async def create_application(self, db: AsyncSession, params: dict[str, Any]) -> OAuthApplication:
        """
        Register a new client application

        A uid and secret are generated; only the secret's hash is stored and
        the plaintext is exposed once through ``plaintext_secret``.

        Raises:
            RecordInvalid: If validation fails
        """
        errors = application_validation_pipeline().run(params, ValidationContext(new_record=True))
        if errors:
            raise RecordInvalid(errors, model=self.human_name)

        secret = generate_secret()
        application = OAuthApplication(
            name=params["name"].strip(),
            uid=generate_uid(),
            secret_digest=await run_in_threadpool(hash_password, secret),
            redirect_uri=params["redirect_uri"].strip(),
            scopes=normalize_scopes(params.get("scopes")),
            confidential=params.get("confidential", True) is not False,
        )

        db.add(application)
        await db.commit()
        await db.refresh(application)
        application.plaintext_secret = secret

        logger.info(
            f"OAuth application created: {application.uid}",
            extra={"application_id": application.id, "confidential": application.confidential},
        )

        return application

    async def update_application(
        self,
        db: AsyncSession,
        application_id: int | str,
        params: dict[str, Any],
    ) -> OAuthApplication:
        """
        Update application attributes (uid and secret never change)

        Raises:
            RecordNotFound: If the application does not exist
            RecordInvalid: If validation fails
        """
        application = await self.find(db, application_id)

        values = {name: getattr(application, name) for name in APPLICATION_COLUMNS}
        values.update(params)

        errors = application_validation_pipeline().run(values, ValidationContext(new_record=False))
        if errors:
            raise RecordInvalid(errors, model=self.human_name)

        if "name" in params:
            application.name = params["name"].strip()
        if "redirect_uri" in params:
            application.redirect_uri = params["redirect_uri"].strip()
        if "scopes" in params:
            application.scopes = normalize_scopes(params["scopes"])
        if params.get("confidential") is not None:
            application.confidential = params["confidential"]

        await db.commit()
        await db.refresh(application)

        logger.info(f"OAuth application updated: {application.uid}", extra={"application_id": application.id})

        return application

    async def delete_application(self, db: AsyncSession, application_id: int | str) -> None:
        """
        Delete application together with its grants and tokens

        Raises:
            RecordNotFound: If the application does not exist
        """
        application = await self.find(db, application_id)

        await db.delete(application)
        await db.commit()

        logger.info(f"OAuth application deleted: {application_id}", extra={"application_id": application_id})

    async def authenticate_client(
        self,
        db: AsyncSession,
        uid: str | None,
        secret: str | None = None,
    ) -> OAuthApplication | None:
        """
        Validate client credentials

        Confidential applications must present their secret; public
        applications are identified by uid alone, but a secret they do send
        must still match.

        Args:
            db: Database session
            uid: Client ID
            secret: Client secret

        Returns:
            Application if valid, None otherwise
        """
        if not uid:
            return None

        application = await self.get_by_uid(db, uid)
        if application is None:
            logger.warning("Client authentication failed: unknown client", extra={"client_id": uid})
            return None

        if application.confidential or secret:
            if not secret:
                logger.warning("Client authentication failed: missing secret", extra={"client_id": uid})
                return None
            if not await run_in_threadpool(verify_password, secret, application.secret_digest):
                logger.warning("Client authentication failed: invalid secret", extra={"client_id": uid})
                return None

        logger.debug(f"Client authenticated: {uid}")
        return application

    def allowed_scopes(self, application: OAuthApplication) -> list[str]:
        """Scopes the application may request, the server scopes when it lists none"""
        return application.scope_list or settings.server_scopes

    def negotiate_scopes(self, application: OAuthApplication, requested: str | None) -> str | None:
        """
        Validate and normalize a requested scope string

        Args:
            application: Requesting application
            requested: Space-separated scopes, empty for the defaults

        Returns:
            Normalized scope string, or None if any scope is not allowed
        """
        if not requested or not requested.strip():
            scopes = settings.default_scopes.split()
        else:
            scopes = requested.split()

        allowed = set(self.allowed_scopes(application))
        invalid = set(scopes) - allowed
        if invalid:
            logger.warning(
                f"Invalid scopes requested: {' '.join(sorted(invalid))}",
                extra={"client_id": application.uid},
            )
            return None

        return normalize_scopes(" ".join(scopes))


# Global instance
oauth_application_service = OAuthApplicationService()
