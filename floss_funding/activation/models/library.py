"""
Library reference supplied by an explicit registration call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from floss_funding.activation.logic.env_key_name import NAMESPACE_DELIMITER

SilentFlag = Optional[Union[bool, Callable[[], object]]]


@dataclass(frozen=True)
class Library:
    """
    A library that asked floss_funding to look after its reminders.

    Attributes:
        namespace (str): Hierarchical namespace, e.g. "Acme::Widgets".
        name (str | None): Declared distribution name, e.g. "acme-widgets".
        silent (bool | callable | None): Per-library silence preference;
            a callable is evaluated only at exit time.
    """

    namespace: str
    name: Optional[str] = None
    silent: SilentFlag = None

    @property
    def key(self) -> str:
        """Lockfile key: the declared name, else the namespace with '::' turned into '__'."""
        if self.name:
            return self.name
        return self.namespace.replace(NAMESPACE_DELIMITER, "__")

    def silence_requested(self) -> bool:
        """Evaluate the silent flag; a raising callable counts as a request for silence."""
        value = self.silent
        if value is None:
            return False
        if callable(value):
            try:
                return bool(value())
            except Exception:  # noqa: BLE001
                return True
        return bool(value)
