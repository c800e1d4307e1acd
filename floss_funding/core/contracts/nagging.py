"""core/contracts/nagging.py
==========================

Nag throttling contract.

Goal: ship a relaxed file-backed store today (tolerates a duplicate reminder
under racing processes, never corrupts), but let a stricter backend (OS file
lock, compare-and-swap key-value store) drop in by programming against this
interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from floss_funding.activation.models.activation_event import ActivationEvent
    from floss_funding.activation.models.library import Library


class NagStore(ABC):
    """Remembers which libraries have already been nagged within a lifetime."""

    @abstractmethod
    def check(self, library: "Library") -> bool:
        """True if *library* was already nagged in the current lifetime."""

    @abstractmethod
    def record(self, library: "Library", event: "ActivationEvent") -> None:
        """Remember that *library* was nagged. Idempotent."""

    @abstractmethod
    def rotate(self) -> bool:
        """Clear all nags if the lifetime has expired. Returns True if rotated."""

    @abstractmethod
    def touch(self) -> None:
        """Persist the current state without recording a nag."""
