"""User service for user management and credential verification"""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from league_api.core.config import logger, settings
from league_api.core.errors import RecordInvalid, RecordNotFound
from league_api.models.database import parse_record_id
from league_api.models.team import Team
from league_api.models.user import User
from league_api.utils.crypto import hash_password, verify_password
from league_api.utils.validators import (
    Check,
    ValidationContext,
    ValidationPipeline,
    email_format,
    max_bytes,
    matches_field,
    merge_errors,
    min_length,
    on_create,
    on_update_when_present,
    present,
    when_present,
)

BLANK = "can't be blank"
TAKEN = "has already been taken"

# Attributes stored on the row as-is
USER_COLUMNS = ("email", "first_name", "last_name", "team_id")


def user_validation_pipeline() -> ValidationPipeline:
    """Ordered checks run before every user write"""
    minimum = settings.password_min_length
    return ValidationPipeline(
        [
            Check("email", present, BLANK),
            Check("email", email_format, "is invalid", when_present("email")),
            Check("password", present, BLANK, on_create),
            Check(
                "password",
                min_length(minimum),
                f"is too short (minimum is {minimum} characters)",
                when_present("password"),
            ),
            Check(
                "password",
                max_bytes(72),
                "is too long (maximum is 72 characters)",
                when_present("password"),
            ),
            Check("password_confirmation", present, BLANK, on_update_when_present("password")),
            Check(
                "password_confirmation",
                matches_field("password"),
                "doesn't match Password",
                when_present("password_confirmation"),
            ),
            Check("first_name", present, BLANK),
            Check("last_name", present, BLANK),
        ]
    )


class UserService:
    """Service for user management operations"""

    human_name = "User"

    async def list_users(
        self,
        db: AsyncSession,
        page: int | None = None,
        per_page: int | None = None,
    ) -> list[User]:
        """
        List users ordered by id

        Pagination applies only when both page and per_page are given.
        """
        query = select(User).order_by(User.id)
        if page is not None and per_page is not None:
            per_page = max(1, min(per_page, settings.max_per_page))
            page = max(1, page)
            query = query.offset((page - 1) * per_page).limit(per_page)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, db: AsyncSession, user_id: int) -> User | None:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find(self, db: AsyncSession, user_id: int | str) -> User:
        """
        Get user by id or raise

        Raises:
            RecordNotFound: If id is not a valid row id or no such user exists
        """
        record_id = parse_record_id(user_id)
        user = await self.get_by_id(db, record_id) if record_id is not None else None
        if user is None:
            raise RecordNotFound(self.human_name, user_id)
        return user

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None:
        """Case-insensitive exact match on email"""
        result = await db.execute(
            select(User).where(func.lower(User.email) == func.lower(email.strip()))
        )
        return result.scalar_one_or_none()

    async def validate(
        self,
        db: AsyncSession,
        values: dict[str, Any],
        user: User | None = None,
    ) -> dict[str, list[str]]:
        """
        Run the validation pipeline plus store-backed checks

        Args:
            db: Database session
            values: Attribute values the record would have after the write
            user: Existing record for updates, None for creation

        Returns:
            Mapping of field name to violations (empty when valid)
        """
        context = ValidationContext(new_record=user is None)
        errors = user_validation_pipeline().run(values, context)

        email = values.get("email")
        if isinstance(email, str) and email.strip() and "email" not in errors:
            existing = await self.get_by_email(db, email)
            if existing is not None and (user is None or existing.id != user.id):
                errors = merge_errors(errors, {"email": [TAKEN]})

        team_id = values.get("team_id")
        if team_id is not None and await db.get(Team, team_id) is None:
            errors = merge_errors(errors, {"team": ["must exist"]})

        return errors

    async def create_user(self, db: AsyncSession, params: dict[str, Any]) -> User:
        """
        Create a new user

        Args:
            db: Database session
            params: Permitted attributes, including password and confirmation

        Returns:
            Created user

        Raises:
            RecordInvalid: If validation fails
        """
        errors = await self.validate(db, params)
        if errors:
            raise RecordInvalid(errors, model=self.human_name)

        user = User(
            **{name: params[name] for name in USER_COLUMNS if name in params},
            password_digest=await run_in_threadpool(hash_password, params["password"]),
        )
        user.email = user.email.strip()

        db.add(user)
        await self._commit(db, user)

        logger.info(f"User created: {user.id}", extra={"user_id": user.id})

        return user

    async def update_user(self, db: AsyncSession, user_id: int | str, params: dict[str, Any]) -> User:
        """
        Update user attributes

        Password rules run only when a new password is supplied; a blank
        password leaves the stored hash untouched.

        Raises:
            RecordNotFound: If the user does not exist
            RecordInvalid: If validation fails
        """
        user = await self.find(db, user_id)

        values = {name: getattr(user, name) for name in USER_COLUMNS}
        values.update(params)
        if not params.get("password"):
            values.pop("password", None)

        errors = await self.validate(db, values, user=user)
        if errors:
            raise RecordInvalid(errors, model=self.human_name)

        for name in USER_COLUMNS:
            if name in params:
                setattr(user, name, params[name])
        if "email" in params:
            user.email = user.email.strip()
        if values.get("password"):
            user.password_digest = await run_in_threadpool(hash_password, values["password"])

        await self._commit(db, user)

        logger.info(f"User updated: {user.id}", extra={"user_id": user.id})

        return user

    async def delete_user(self, db: AsyncSession, user_id: int | str) -> None:
        """
        Delete user

        Raises:
            RecordNotFound: If the user does not exist
            RecordInvalid: If goals, assists or cards still reference the user
        """
        user = await self.find(db, user_id)

        await db.delete(user)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            # Goals, assists and cards keep their player
            raise RecordInvalid(
                {"base": ["Cannot delete record because dependent league records exist"]},
                model=self.human_name,
            ) from e

        logger.info(f"User deleted: {user_id}", extra={"user_id": user_id})

    async def authenticate(
        self,
        db: AsyncSession,
        email: str | None,
        password: str | None,
    ) -> User | None:
        """
        Verify an email/password pair

        Read-only: issues nothing, mutates nothing. Fails closed.

        Args:
            db: Database session
            email: Candidate email (matched ignoring case)
            password: Candidate plaintext password

        Returns:
            User if the password matches the stored hash, None otherwise
        """
        if not email or not password:
            return None

        user = await self.get_by_email(db, email)
        if user is None:
            logger.debug("Authentication failed: unknown email", extra={"trace_point": "user_not_found"})
            return None

        if not await run_in_threadpool(verify_password, password, user.password_digest):
            logger.warning(
                "Authentication failed: invalid password",
                extra={"trace_point": "invalid_password", "user_id": user.id},
            )
            return None

        return user

    async def _commit(self, db: AsyncSession, user: User) -> None:
        """Commit, mapping a unique index violation on email to a validation error"""
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if "email" in str(e.orig).lower():
                raise RecordInvalid({"email": [TAKEN]}, model=self.human_name) from e
            raise
        await db.refresh(user)


# Global instance
user_service = UserService()
