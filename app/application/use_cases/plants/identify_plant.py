"""Use case for identifying the plant in a captured image."""

from __future__ import annotations

import logging

import anyio

from app.application.use_cases.notifications import NotificationRegistry, notify_toast
from app.domain.entities import CapturedImage, CareGuide, NotificationCategory, PlantInfo

logger = logging.getLogger(__name__)

SAMPLE_PLANT = PlantInfo(
    name="Sample Plant",
    scientific_name="Plantus Exampleus",
    description=(
        "This is a sample plant description that provides information about the "
        "identified plant species."
    ),
    care_guide=CareGuide(
        water="Water twice a week",
        sunlight="Partial shade to full sun",
        soil="Well-draining potting mix",
        temperature="65-80°F (18-27°C)",
    ),
    fun_facts=[
        "This plant is native to various regions.",
        "It has been used in traditional medicine.",
        "Can grow up to 2 meters tall.",
    ],
)


async def identify_plant(
    registry: NotificationRegistry,
    image: CapturedImage,
    *,
    delay_seconds: float = 1.5,
) -> PlantInfo:
    """Return the identification for ``image``.

    Identification is simulated: after ``delay_seconds`` the sample plant is
    returned. The outcome is announced with a toast.
    """

    if not image.data:
        notify_toast(
            registry,
            "Failed to analyze plant. Please try again.",
            category=NotificationCategory.PLANT,
        )
        raise ValueError("Captured image is empty")

    logger.info("Analyzing plant image (%d bytes encoded)", len(image.data))
    await anyio.sleep(delay_seconds)
    notify_toast(
        registry,
        "Plant identified successfully!",
        category=NotificationCategory.PLANT,
    )
    return SAMPLE_PLANT


__all__ = ["SAMPLE_PLANT", "identify_plant"]
