"""ORM models used by the application infrastructure."""

from .favorite import FavoriteModel
from .local_storage import LocalStorageModel
from .user import UserModel
from .weather_history import WeatherHistoryModel

__all__ = [
    "FavoriteModel",
    "LocalStorageModel",
    "UserModel",
    "WeatherHistoryModel",
]
