"""Access Grant model (authorization codes)"""

from datetime import datetime, timedelta

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from league_api.models.database import Base, as_utc, utcnow


class AccessGrant(Base):
    """Short-lived authorization code issued to an application for a resource owner"""

    __tablename__ = "oauth_access_grants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    resource_owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    application_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("oauth_applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # SHA-256 of the code handed to the client
    token_digest: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    expires_in: Mapped[int] = mapped_column(Integer, nullable=False)
    redirect_uri: Mapped[str] = mapped_column(Text, nullable=False)
    scopes: Mapped[str] = mapped_column(String(255), default="", nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<AccessGrant(id={self.id}, application_id={self.application_id})>"

    @property
    def expires_at(self) -> datetime:
        return as_utc(self.created_at) + timedelta(seconds=self.expires_in)

    @property
    def is_expired(self) -> bool:
        return utcnow() >= self.expires_at

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    @property
    def is_accessible(self) -> bool:
        return not self.is_revoked and not self.is_expired
