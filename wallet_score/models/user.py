from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from wallet_score.db.database import Base

__all__ = ["User"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """One row per wallet; ``wallet_address`` is the upsert conflict target."""

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("score >= 0", name="ck_users_score_non_negative"),)

    wallet_address: Mapped[str] = mapped_column(String(255), primary_key=True)
    score: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
