"""Orientation categories reported by the accelerometer."""

from __future__ import annotations

from enum import Enum


def normalize(raw: str) -> str:
    """Lower-case ``raw`` and drop every non-alphanumeric character.

    ``"Bottom-Up"`` and ``"bottomup"`` both normalize to ``"bottomup"``.
    """
    return "".join(ch for ch in raw.lower() if ch.isalnum())


class OrientationCategory(str, Enum):
    """The five canonical device-rotation states."""

    NORMAL = "normal"
    UNDEFINED = "undefined"
    LEFT_UP = "leftup"
    RIGHT_UP = "rightup"
    BOTTOM_UP = "bottomup"

    @classmethod
    def from_string(cls, value: str) -> "OrientationCategory":
        """Map any raw orientation string to a category, never failing."""
        key = normalize(value)
        for member in cls:
            if member.value == key:
                return member
        return cls.UNDEFINED


__all__ = ["OrientationCategory", "normalize"]
