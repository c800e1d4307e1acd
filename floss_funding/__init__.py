"""
floss_funding
=============

Politely ask the users of a library for voluntary financial support, without
ever breaking their program.

A library opts in with one explicit call at import time::

    import floss_funding
    floss_funding.poke("Acme::Widgets", library_name="acme-widgets")

The token is read from the environment variable derived from the namespace
(here ``FLOSS_FUNDING_ACME__WIDGETS``).
"""

from __future__ import annotations

from typing import Mapping, Optional

from floss_funding.activation.logic.activation_service import ActivationService, activation_service
from floss_funding.activation.logic.classifier import (
    BUSINESS_IS_NOT_GOOD_YET,
    FREE_AS_IN_BEER,
    NOT_FINANCIALLY_SUPPORTING,
    ActivationClassifier,
    opt_out_marker,
)
from floss_funding.activation.logic.env_key_name import EnvKeyNameDeriver, env_key_name_deriver
from floss_funding.activation.models.activation_event import ActivationEvent
from floss_funding.activation.models.activation_state import ActivationState
from floss_funding.activation.models.library import Library, SilentFlag
from floss_funding.core.common.registry import NamespaceRegistry, registry
from floss_funding.core.exceptions.errors import (
    DecryptionFailure,
    FlossFundingError,
    PersistenceFailure,
    ValidationError,
)
from floss_funding.core.logging.debug_logger import configure_debug_logging

__version__ = "1.0.0"

__all__ = [
    "poke",
    "env_variable_name",
    "register_exit_hook",
    "ActivationClassifier",
    "ActivationEvent",
    "ActivationService",
    "ActivationState",
    "EnvKeyNameDeriver",
    "Library",
    "NamespaceRegistry",
    "registry",
    "FREE_AS_IN_BEER",
    "BUSINESS_IS_NOT_GOOD_YET",
    "NOT_FINANCIALLY_SUPPORTING",
    "opt_out_marker",
    "FlossFundingError",
    "ValidationError",
    "DecryptionFailure",
    "PersistenceFailure",
]

configure_debug_logging()


def env_variable_name(namespace: str) -> str:
    """Name of the environment variable holding *namespace*'s activation token."""
    return env_key_name_deriver.derive(namespace)


def poke(
    namespace: str,
    *,
    library_name: Optional[str] = None,
    silent: SilentFlag = None,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[ActivationEvent]:
    """Register a library, classify its token and maybe show a one-line reminder."""
    event = activation_service.poke(namespace, library_name=library_name, silent=silent, env=env)
    if event is not None:
        register_exit_hook()
    return event


def register_exit_hook() -> bool:
    return activation_service.register_exit_hook()
