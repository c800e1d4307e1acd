"""
Namespace: groups the activation events of every library sharing one
namespace string.

The state is computed once from (name, token); a different token needs a
new Namespace. Only the event list changes afterwards, and it only grows.
"""
from __future__ import annotations

from datetime import datetime
from threading import RLock
from typing import List, Optional

from floss_funding.activation.logic.classifier import ActivationClassifier
from floss_funding.activation.logic.env_key_name import EnvKeyNameDeriver, env_key_name_deriver
from floss_funding.activation.models.activation_event import ActivationEvent
from floss_funding.activation.models.activation_state import ActivationState
from floss_funding.core.exceptions.errors import FlossFundingError
from floss_funding.core.helpers.date_time_helper import utc_now


class Namespace:
    def __init__(
        self,
        name: str,
        env_var_name: str,
        activation_key: str,
        state: ActivationState,
        activation_events: Optional[List[ActivationEvent]] = None,
    ) -> None:
        if not isinstance(name, str):
            raise FlossFundingError("name must be a str")
        self._name = name
        self._env_var_name = env_var_name
        self._activation_key = activation_key
        self._state = state
        self._events: List[ActivationEvent] = []
        self._lock = RLock()
        for event in activation_events or []:
            self.add_event(event)

    @classmethod
    def build(
        cls,
        name: str,
        activation_key: str,
        *,
        classifier: ActivationClassifier,
        deriver: Optional[EnvKeyNameDeriver] = None,
        now: Optional[datetime] = None,
    ) -> "Namespace":
        """Derive the env variable name and classify *activation_key* once."""
        env_var_name = (deriver or env_key_name_deriver).derive(name)
        state = classifier.classify(name, activation_key, now or utc_now())
        return cls(name, env_var_name, activation_key or "", state)

    # ------------------------------------------------------------------ #
    @property
    def name(self) -> str:
        return self._name

    @property
    def env_var_name(self) -> str:
        return self._env_var_name

    @property
    def activation_key(self) -> str:
        return self._activation_key

    @property
    def state(self) -> ActivationState:
        return self._state

    @property
    def activation_events(self) -> List[ActivationEvent]:
        with self._lock:
            return list(self._events)

    def add_event(self, event: ActivationEvent) -> None:
        if not isinstance(event, ActivationEvent):
            raise FlossFundingError("activation_events must contain only ActivationEvent instances")
        with self._lock:
            self._events.append(event)

    def has_state(self, state: ActivationState) -> bool:
        return any(e.state is state for e in self.activation_events)

    def with_state(self, state: ActivationState) -> List[ActivationEvent]:
        return [e for e in self.activation_events if e.state is state]

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Namespace(name={self._name!r}, state={self._state.value!r})"
