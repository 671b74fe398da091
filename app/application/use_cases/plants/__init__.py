"""Use cases for plant identification and favorites."""

from .favorites import FavoriteNotFoundError, list_favorites, remove_favorite, save_favorite
from .identify_plant import SAMPLE_PLANT, identify_plant

__all__ = [
    "FavoriteNotFoundError",
    "SAMPLE_PLANT",
    "identify_plant",
    "list_favorites",
    "remove_favorite",
    "save_favorite",
]
