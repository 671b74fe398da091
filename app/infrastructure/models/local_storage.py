"""SQLAlchemy model backing the local key/value cache."""

from sqlalchemy import Column, String, Text

from app.infrastructure.database import Base


class LocalStorageModel(Base):
    """Text blob stored under a string key."""

    __tablename__ = "local_storage"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)


__all__ = ["LocalStorageModel"]
