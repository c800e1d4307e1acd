"""
activation/logic/nagger.py

Decides whether (and which) reminder an ActivationEvent deserves, and keeps
the nag lockfiles in step.

Messages are one line per library.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional, TextIO

from floss_funding.activation.logic.classifier import HEX_TOKEN_LENGTH
from floss_funding.activation.logic.contra_indications import ContraIndications
from floss_funding.activation.logic.env_key_name import env_key_name_deriver
from floss_funding.activation.models.activation_event import ActivationEvent
from floss_funding.activation.models.activation_state import ActivationState
from floss_funding.core.common.registry import NamespaceRegistry, registry as default_registry
from floss_funding.core.contracts.nagging import NagStore
from floss_funding.nagging.logic.lockfile_factory import at_exit_lockfile, on_load_lockfile

logger = logging.getLogger(__name__)

FUNDING_URL = "https://floss-funding.dev"


def invalid_message(event: ActivationEvent, env_var_name: str) -> str:
    return (
        f"FLOSS Funding: invalid activation key for {event.library.key} ({event.namespace}); "
        f"{env_var_name} holds {len(event.activation_key)} characters, paid keys are "
        f"{HEX_TOKEN_LENGTH} hex characters. Unset it or get a new one @ {FUNDING_URL}"
    )


def unactivated_message(event: ActivationEvent, env_var_name: str) -> str:
    return (
        f"FLOSS Funding: activation key missing for {event.library.key} ({event.namespace}). "
        f'Set ENV["{env_var_name}"] to your activation key; see {FUNDING_URL}'
    )


class Nagger:
    def __init__(
        self,
        registry: Optional[NamespaceRegistry] = None,
        *,
        contra_indications: Optional[ContraIndications] = None,
        on_load_store: Optional[NagStore] = None,
        at_exit_store: Optional[NagStore] = None,
        stream_provider: Callable[[], TextIO] = lambda: sys.stdout,
    ) -> None:
        self._registry = registry or default_registry
        self._contra = contra_indications or ContraIndications(self._registry, stream_provider=stream_provider)
        self._on_load_store = on_load_store
        self._at_exit_store = at_exit_store
        self._stream_provider = stream_provider

    @property
    def on_load_store(self) -> NagStore:
        return self._on_load_store or on_load_lockfile()

    @property
    def at_exit_store(self) -> NagStore:
        return self._at_exit_store or at_exit_lockfile()

    # ------------------------------------------------------------------ #
    @staticmethod
    def message_for(event: ActivationEvent) -> Optional[str]:
        if event.state is ActivationState.ACTIVATED:
            return None
        try:
            env_var_name = env_key_name_deriver.derive(event.namespace)
        except ValueError:
            env_var_name = "(unknown)"
        if event.state is ActivationState.INVALID:
            return invalid_message(event, env_var_name)
        return unactivated_message(event, env_var_name)

    def _emit(self, message: str) -> None:
        try:
            print(message, file=self._stream_provider())
        except (OSError, ValueError) as exc:
            logger.debug("Could not write reminder: %s", exc)

    def on_load(self, event: ActivationEvent) -> bool:
        """Emit the load-time reminder for *event* if allowed. Returns True when emitted."""
        message = self.message_for(event)
        if message is None:
            return False
        if self._contra.poke_contraindicated():
            logger.debug("on_load reminder for %s contraindicated", event.library.key)
            return False
        store = self.on_load_store
        if store.check(event.library):
            logger.debug("on_load reminder for %s already shown this lifetime", event.library.key)
            return False
        self._emit(message)
        store.record(event.library, event)
        return True

    def at_exit(self) -> List[ActivationEvent]:
        """Emit one exit-time reminder per not-yet-nagged, not-activated library."""
        if self._contra.at_exit_contraindicated():
            return []
        store = self.at_exit_store
        emitted: List[ActivationEvent] = []
        seen = set()
        for event in self._registry.all_events():
            key = event.library.key
            if key in seen or event.state is ActivationState.ACTIVATED:
                continue
            seen.add(key)
            if store.check(event.library):
                continue
            message = self.message_for(event)
            if message:
                self._emit(message)
                store.record(event.library, event)
                emitted.append(event)
        return emitted
