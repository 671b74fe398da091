"""Domain entities describing identified plants and saved favorites."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class CareGuide:
    water: str
    sunlight: str
    soil: str
    temperature: str


@dataclass(frozen=True)
class PlantInfo:
    """Result of a plant identification."""

    name: str
    scientific_name: str
    description: str
    care_guide: CareGuide
    fun_facts: list[str] = field(default_factory=list)


@dataclass
class Favorite:
    """Plant saved by a user together with the captured image."""

    id: int | None
    user_id: int
    name: str
    scientific_name: str
    description: str
    care_guide: CareGuide
    fun_facts: list[str]
    image: str
    saved_at: datetime | None = None


__all__ = ["CareGuide", "Favorite", "PlantInfo"]
