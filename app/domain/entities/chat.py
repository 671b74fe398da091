"""Domain entity for chat conversation turns."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ChatRole = Literal["user", "assistant"]


@dataclass(frozen=True)
class ChatTurn:
    role: ChatRole
    content: str

    def as_message(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


__all__ = ["ChatRole", "ChatTurn"]
