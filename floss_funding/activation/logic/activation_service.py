"""
activation/logic/activation_service.py

The load-time flow behind ``floss_funding.poke``:

    namespace + token -> Namespace (classified once) -> Library + ActivationEvent
    -> registry -> Nagger.on_load

Only misuse of the naming API (ValidationError) reaches the caller. Any other
failure marks the registry as errored, after which floss_funding stays inert
for the rest of the process.
"""

from __future__ import annotations

import atexit
import logging
import os
from datetime import datetime
from threading import Lock
from typing import Callable, Mapping, Optional

from floss_funding.activation.logic.classifier import ActivationClassifier
from floss_funding.activation.logic.env_key_name import EnvKeyNameDeriver, env_key_name_deriver
from floss_funding.activation.logic.nagger import Nagger
from floss_funding.activation.models.activation_event import ActivationEvent
from floss_funding.activation.models.library import Library, SilentFlag
from floss_funding.activation.models.namespace import Namespace
from floss_funding.core.common.registry import NamespaceRegistry, registry as default_registry
from floss_funding.core.exceptions.errors import ValidationError
from floss_funding.core.helpers.date_time_helper import utc_now

logger = logging.getLogger(__name__)

# Every event of one process shares the same timestamp.
LOADED_AT: datetime = utc_now()


class ActivationService:
    def __init__(
        self,
        registry: Optional[NamespaceRegistry] = None,
        *,
        classifier: Optional[ActivationClassifier] = None,
        deriver: Optional[EnvKeyNameDeriver] = None,
        nagger: Optional[Nagger] = None,
        clock: Callable[[], datetime] = lambda: LOADED_AT,
    ) -> None:
        self.registry = registry or default_registry
        self.classifier = classifier or ActivationClassifier()
        self.deriver = deriver or env_key_name_deriver
        self.nagger = nagger or Nagger(self.registry)
        self._clock = clock
        self._exit_hook_lock = Lock()
        self._exit_hook_installed = False

    # ------------------------------------------------------------------ #
    def activate(
        self,
        namespace: str,
        raw_token: Optional[str],
        library: Library,
    ) -> ActivationEvent:
        """Classify *raw_token* for *namespace* and register the resulting event."""
        ns = Namespace.build(
            namespace,
            raw_token or "",
            classifier=self.classifier,
            deriver=self.deriver,
            now=self._clock(),
        )
        event = ActivationEvent(
            library=library,
            activation_key=ns.activation_key,
            state=ns.state,
            occurred_at=self._clock(),
            silent=library.silent,
        )
        self.registry.add_or_update_namespace_with_event(ns, event)
        return event

    def poke(
        self,
        namespace: str,
        *,
        library_name: Optional[str] = None,
        silent: SilentFlag = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> Optional[ActivationEvent]:
        """
        Explicit registration entry point for a library.

        Returns the ActivationEvent, or None when floss_funding is inert.
        Raises ValidationError for an invalid namespace.
        """
        if self.registry.errored:
            return None
        env_var_name = self.deriver.derive(namespace)
        try:
            if silent is True:
                self.registry.silenced = True
            environ = os.environ if env is None else env
            token = environ.get(env_var_name, "")
            library = Library(namespace=namespace, name=library_name, silent=silent)
            event = self.activate(namespace, token, library)
            self.nagger.on_load(event)
            return event
        except ValidationError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.debug("poke(%s) failed; going inert: %s", namespace, exc, exc_info=True)
            self.registry.mark_errored()
            return None

    # ------------------------------------------------------------------ #
    def run_exit_hook(self) -> None:
        try:
            self.nagger.on_load_store.touch()
            self.nagger.at_exit_store.touch()
            self.nagger.at_exit()
        except Exception as exc:  # noqa: BLE001
            logger.debug("at-exit hook failed: %s", exc, exc_info=True)

    def register_exit_hook(self) -> bool:
        """
        Install the exit hook once per service. Returns True when newly installed.

        Both lockfiles are touched right away so they exist as early as possible.
        """
        with self._exit_hook_lock:
            if self._exit_hook_installed:
                return False
            self.nagger.on_load_store.touch()
            self.nagger.at_exit_store.touch()
            atexit.register(self.run_exit_hook)
            self._exit_hook_installed = True
            return True


# Process-wide default service
activation_service = ActivationService()
