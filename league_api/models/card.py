"""Card model"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from league_api.models.database import Base, utcnow


class CardType(str, Enum):
    """Disciplinary card colours"""

    YELLOW = "yellow"
    RED = "red"


class Card(Base):
    """Card shown to a player in a match"""

    __tablename__ = "cards"
    __table_args__ = (
        Index("index_cards_on_player_id_and_match_id", "player_id", "match_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    match_id: Mapped[int] = mapped_column(Integer, ForeignKey("matches.id"), nullable=False, index=True)
    player_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    card_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Card(id={self.id}, match_id={self.match_id}, card_type={self.card_type})>"
