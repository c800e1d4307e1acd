"""Small in-memory doubles shared by the activation tests."""
from __future__ import annotations

import io
from typing import Dict, List, Tuple

from floss_funding.activation.models.activation_event import ActivationEvent
from floss_funding.activation.models.library import Library
from floss_funding.core.contracts.nagging import NagStore


class TtyStream(io.StringIO):
    def __init__(self, tty: bool = True) -> None:
        super().__init__()
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


class MemoryNagStore(NagStore):
    def __init__(self) -> None:
        self.nags: Dict[str, ActivationEvent] = {}
        self.touches = 0
        self.rotations = 0
        self.calls: List[Tuple[str, str]] = []

    def check(self, library: Library) -> bool:
        self.calls.append(("check", library.key))
        return library.key in self.nags

    def record(self, library: Library, event: ActivationEvent) -> None:
        self.calls.append(("record", library.key))
        self.nags.setdefault(library.key, event)

    def rotate(self) -> bool:
        self.rotations += 1
        return False

    def touch(self) -> None:
        self.touches += 1
