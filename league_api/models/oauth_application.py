"""OAuth Application model"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from league_api.models.database import Base, utcnow


class OAuthApplication(Base):
    """OAuth client application"""

    __tablename__ = "oauth_applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Public identifier sent as client_id
    uid: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    secret_digest: Mapped[str] = mapped_column(String(255), nullable=False)

    redirect_uri: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Whitespace-separated list of allowed redirect URIs",
    )
    scopes: Mapped[str] = mapped_column(
        String(255),
        default="",
        nullable=False,
        comment="Space-separated list of allowed scopes",
    )

    # True: must authenticate with its secret, False: public client
    confidential: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    # Set only right after creation, never persisted
    plaintext_secret = None

    def __repr__(self) -> str:
        return f"<OAuthApplication(id={self.id}, uid={self.uid}, name={self.name})>"

    @property
    def scope_list(self) -> list[str]:
        return self.scopes.split() if self.scopes else []

    @property
    def redirect_uris(self) -> list[str]:
        return self.redirect_uri.split()
