"""Domain entity for captured still images."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CapturedImage:
    """Encoded still frame, base64 text plus its media type."""

    data: str
    content_type: str = "image/jpeg"

    def as_data_url(self) -> str:
        return f"data:{self.content_type};base64,{self.data}"


__all__ = ["CapturedImage"]
