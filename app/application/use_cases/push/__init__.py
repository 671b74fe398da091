"""Push delivery bridge."""

from .bridge import DEFAULT_PUSH_ICON, PushBridge

__all__ = ["DEFAULT_PUSH_ICON", "PushBridge"]
