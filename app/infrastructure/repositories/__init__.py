"""Repository implementations for infrastructure layer."""

from .favorite_repository import FavoriteRepository
from .local_storage_repository import LocalStorageRepository
from .user_repository import UserRepository
from .weather_history_repository import WeatherHistoryRepository

__all__ = [
    "FavoriteRepository",
    "LocalStorageRepository",
    "UserRepository",
    "WeatherHistoryRepository",
]
