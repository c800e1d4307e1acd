"""
Immutable record of one classification outcome for one library.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from floss_funding.activation.models.activation_state import ActivationState
from floss_funding.activation.models.library import Library, SilentFlag
from floss_funding.core.exceptions.errors import FlossFundingError
from floss_funding.core.helpers.date_time_helper import to_utc_iso, utc_now


@dataclass(frozen=True)
class ActivationEvent:
    library: Library
    activation_key: str
    state: ActivationState
    occurred_at: datetime = field(default_factory=utc_now)
    silent: SilentFlag = None

    def __post_init__(self) -> None:
        if not isinstance(self.state, ActivationState):
            raise FlossFundingError(
                f"{self.state!r} ({type(self.state).__name__}) must be one of "
                f"{[s.value for s in ActivationState]}"
            )
        if not (self.silent is None or isinstance(self.silent, bool) or callable(self.silent)):
            raise FlossFundingError("silent must be None, a bool, or callable")

    @property
    def namespace(self) -> str:
        return self.library.namespace

    def to_dict(self) -> Dict[str, Any]:
        return {
            "library": self.library.key,
            "namespace": self.library.namespace,
            "state": self.state.value,
            "occurred_at": to_utc_iso(self.occurred_at),
        }
