"""SQLAlchemy model for saved favorite plants."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text

from app.infrastructure.database import Base
from app.utils import ensure_utc_naive_datetime, utc_now


def _utc_naive_now():
    return ensure_utc_naive_datetime(utc_now())


class FavoriteModel(Base):
    """Database representation of a plant saved by a user."""

    __tablename__ = "favorite"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    name = Column(String(120), nullable=False)
    scientific_name = Column(String(160), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    care_guide = Column(JSON, nullable=False, default=dict)
    fun_facts = Column(JSON, nullable=False, default=list)
    image = Column(Text, nullable=False)
    saved_at = Column(DateTime(), nullable=False, default=_utc_naive_now)


__all__ = ["FavoriteModel"]
