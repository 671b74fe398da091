"""Schemas for plant identification, capture and favorites."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CareGuideSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    water: str
    sunlight: str
    soil: str
    temperature: str


class PlantInfoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    scientific_name: str
    description: str
    care_guide: CareGuideSchema
    fun_facts: list[str] = Field(default_factory=list)


class CapturedImageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    data: str = Field(..., description="Base64 encoded JPEG")
    content_type: str


class IdentificationRead(BaseModel):
    plant: PlantInfoSchema
    image: CapturedImageRead


class CaptureStatus(BaseModel):
    backend: str
    streaming: bool


class FavoriteCreate(BaseModel):
    plant: PlantInfoSchema
    image: str = Field(..., min_length=1, description="Base64 encoded JPEG of the plant")


class FavoriteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    scientific_name: str
    description: str
    care_guide: CareGuideSchema
    fun_facts: list[str]
    image: str
    saved_at: datetime | None = None


__all__ = [
    "CaptureStatus",
    "CapturedImageRead",
    "CareGuideSchema",
    "FavoriteCreate",
    "FavoriteRead",
    "IdentificationRead",
    "PlantInfoSchema",
]
