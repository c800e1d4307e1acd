# core/common/registry.py
"""
Namespace registry for floss_funding.

Replaces module-level mutable lists with an explicit, injectable service.
All mutation goes through one re-entrant lock so that event appends from
concurrently importing threads are atomic. Tests build a fresh registry
instead of resetting process globals.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:  # pragma: no cover
    from floss_funding.activation.models.activation_event import ActivationEvent
    from floss_funding.activation.models.activation_state import ActivationState
    from floss_funding.activation.models.library import Library
    from floss_funding.activation.models.namespace import Namespace

logger = logging.getLogger(__name__)


class NamespaceRegistry:
    """Thread-safe map of namespace name -> Namespace plus process flags."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._namespaces: Dict[str, "Namespace"] = {}
        self._silenced = False
        self._errored = False

    # ---------- Registration ------------------------------------------
    def add_or_update_namespace_with_event(self, namespace: "Namespace", event: "ActivationEvent") -> "Namespace":
        """
        Store *namespace* (first registration wins) and append *event* to it.

        Returns the Namespace actually holding the event.
        """
        with self._lock:
            existing = self._namespaces.get(namespace.name)
            if existing is None:
                self._namespaces[namespace.name] = namespace
                existing = namespace
            existing.add_event(event)
            logger.debug("Registered %s event for %s", event.state.value, namespace.name)
            return existing

    # ---------- Queries ----------------------------------------------
    def namespaces(self) -> Dict[str, "Namespace"]:
        with self._lock:
            return dict(self._namespaces)

    def namespace(self, name: str) -> Optional["Namespace"]:
        with self._lock:
            return self._namespaces.get(name)

    def all_events(self) -> List["ActivationEvent"]:
        with self._lock:
            return [e for ns in self._namespaces.values() for e in ns.activation_events]

    def events_with_state(self, state: "ActivationState") -> List["ActivationEvent"]:
        return [e for e in self.all_events() if e.state is state]

    def libraries(self) -> List["Library"]:
        return [e.library for e in self.all_events()]

    # ---------- Process flags ----------------------------------------
    @property
    def silenced(self) -> bool:
        with self._lock:
            return self._silenced

    @silenced.setter
    def silenced(self, value: bool) -> None:
        with self._lock:
            self._silenced = bool(value)

    @property
    def errored(self) -> bool:
        with self._lock:
            return self._errored

    def mark_errored(self) -> None:
        """After an internal failure floss_funding stays inert for the rest of the process."""
        with self._lock:
            self._errored = True

    def clear(self) -> None:
        with self._lock:
            self._namespaces.clear()
            self._silenced = False
            self._errored = False


# Process-wide default instance
registry = NamespaceRegistry()
