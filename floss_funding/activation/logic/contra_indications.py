"""
activation/logic/contra_indications.py

Environment checks that decide whether floss_funding should stay quiet.

- poke_contraindicated(): skip load-time reminders (CI, no TTY, silenced,
  errored, broken working directory).
- at_exit_contraindicated(): skip exit-time reminders; additionally honors
  the global silence switch, every library's own silent preference, and an
  interpreter exiting because of an uncaught exception.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Mapping, Optional, TextIO

from floss_funding.core.common.registry import NamespaceRegistry, registry as default_registry
from floss_funding.core.config.config_service import silent_requested

logger = logging.getLogger(__name__)


def exiting_on_error() -> bool:
    """True once the interpreter has reported an uncaught exception."""
    return getattr(sys, "last_value", None) is not None or getattr(sys, "last_exc", None) is not None


def _is_tty(stream: TextIO) -> bool:
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError, OSError):
        return False


class ContraIndications:
    def __init__(
        self,
        registry: Optional[NamespaceRegistry] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
        stream_provider: Callable[[], TextIO] = lambda: sys.stdout,
    ) -> None:
        self._registry = registry or default_registry
        self._environ = environ
        self._stream_provider = stream_provider

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def _ci(self) -> bool:
        return self.environ.get("CI", "").strip().casefold() == "true"

    def poke_contraindicated(self) -> bool:
        if self._registry.errored or self._registry.silenced:
            return True
        if self._ci():
            return True
        try:
            os.getcwd()
        except OSError:
            return True
        return not _is_tty(self._stream_provider())

    def at_exit_contraindicated(self) -> bool:
        if self._registry.errored or self._registry.silenced:
            return True
        if exiting_on_error():
            return True
        if silent_requested(dict(self.environ)):
            return True
        if not _is_tty(self._stream_provider()):
            return True
        for library in self._registry.libraries():
            if library.silence_requested():
                logger.debug("at-exit silenced by %s", library.key)
                return True
        return False
