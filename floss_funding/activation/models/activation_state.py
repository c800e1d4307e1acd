"""Activation state enumeration."""
from __future__ import annotations

from enum import Enum


class ActivationState(Enum):
    """Outcome of classifying one activation token."""

    ACTIVATED = "activated"
    UNACTIVATED = "unactivated"
    INVALID = "invalid"

    def __str__(self) -> str:
        return self.value

