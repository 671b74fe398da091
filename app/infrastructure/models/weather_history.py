"""SQLAlchemy model for the per-user weather notification history."""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String

from app.infrastructure.database import Base


class WeatherHistoryModel(Base):
    """Append-only weather reading mirrored for a user."""

    __tablename__ = "weather_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    dedupe_key = Column(String(80), nullable=False)
    condition = Column(String(60), nullable=False)
    temperature = Column(Integer, nullable=False)
    humidity = Column(Integer, nullable=True)
    wind_speed = Column(Float, nullable=True)
    location = Column(String(120), nullable=True)
    is_default_location = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(), nullable=False, index=True)


__all__ = ["WeatherHistoryModel"]
