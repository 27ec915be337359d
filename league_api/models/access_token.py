"""Access Token model"""

from datetime import datetime, timedelta

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from league_api.models.database import Base, as_utc, utcnow


class AccessToken(Base):
    """Issued bearer token with its optional refresh token"""

    __tablename__ = "oauth_access_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # NULL for client_credentials tokens
    resource_owner_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    application_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("oauth_applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    token_digest: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
        comment="SHA-256 hash of the access token jti",
    )
    refresh_token_digest: Mapped[str | None] = mapped_column(
        String(64),
        unique=True,
        nullable=True,
        index=True,
        comment="SHA-256 hash of the refresh token jti",
    )
    previous_refresh_token_digest: Mapped[str] = mapped_column(
        String(64),
        default="",
        nullable=False,
        comment="Refresh token this one was rotated from",
    )

    scopes: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    expires_in: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<AccessToken(id={self.id}, application_id={self.application_id}, "
            f"resource_owner_id={self.resource_owner_id}, revoked={self.is_revoked})>"
        )

    @property
    def scope_list(self) -> list[str]:
        return self.scopes.split() if self.scopes else []

    @property
    def expires_at(self) -> datetime | None:
        if self.expires_in is None:
            return None
        return as_utc(self.created_at) + timedelta(seconds=self.expires_in)

    @property
    def is_expired(self) -> bool:
        expires_at = self.expires_at
        return expires_at is not None and utcnow() >= expires_at

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    @property
    def is_accessible(self) -> bool:
        """Valid iff not revoked and not expired"""
        return not self.is_revoked and not self.is_expired

    def revoke(self) -> None:
        if self.revoked_at is None:
            self.revoked_at = utcnow()
