"""Database seeding with default data"""

import secrets
import string

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from league_api.core.config import logger, settings
from league_api.models import OAuthApplication, User
from league_api.models.database import async_session_maker
from league_api.utils.crypto import generate_secret, generate_uid, hash_password

CONSOLE_APPLICATION_NAME = "League Console"


def generate_secure_password(length: int = 16) -> str:
    """Generate a secure random password"""
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    return "".join(secrets.choice(alphabet) for _ in range(length))


async def seed_default_data(session_maker=async_session_maker) -> None:
    """Seed database with the admin user and the first-party application"""
    async with session_maker() as db:
        try:
            await create_admin_user(db)
            await create_console_application(db)
            await db.commit()
        except Exception as e:
            logger.error(f"Failed to seed default data: {e}")
            await db.rollback()
            raise


async def create_admin_user(db: AsyncSession) -> User | None:
    """Create the admin user unless a user with admin_email exists"""
    result = await db.execute(select(User).where(func.lower(User.email) == func.lower(settings.admin_email)))
    if result.scalar_one_or_none():
        logger.debug("Admin user already exists")
        return None

    if settings.admin_password:
        admin_password = settings.admin_password
        logger.info("Using LEAGUE_API__ADMIN_PASSWORD for the admin user")
    else:
        admin_password = generate_secure_password()
        logger.warning("=" * 80)
        logger.warning("LEAGUE_API__ADMIN_PASSWORD not set! Generated random admin password:")
        logger.warning(f"Email: {settings.admin_email}")
        logger.warning(f"Password: {admin_password}")
        logger.warning("PLEASE SAVE THIS PASSWORD - IT WILL NOT BE SHOWN AGAIN!")
        logger.warning("=" * 80)

    admin = User(
        email=settings.admin_email,
        first_name="League",
        last_name="Admin",
        admin=True,
        password_digest=await run_in_threadpool(hash_password, admin_password),
    )
    db.add(admin)
    logger.info("Admin user created")
    return admin


async def create_console_application(db: AsyncSession) -> OAuthApplication | None:
    """Create the first-party public application used to obtain the first token"""
    result = await db.execute(
        select(OAuthApplication).where(OAuthApplication.name == CONSOLE_APPLICATION_NAME)
    )
    if result.scalar_one_or_none():
        logger.debug("Console application already exists")
        return None

    application = OAuthApplication(
        name=CONSOLE_APPLICATION_NAME,
        uid=generate_uid(),
        # Public client, the secret is never handed out
        secret_digest=await run_in_threadpool(hash_password, generate_secret()),
        redirect_uri="urn:ietf:wg:oauth:2.0:oob",
        scopes=" ".join(settings.server_scopes),
        confidential=False,
    )
    db.add(application)
    logger.info(f"OAuth application created: {CONSOLE_APPLICATION_NAME} (public, client_id: {application.uid})")
    return application
