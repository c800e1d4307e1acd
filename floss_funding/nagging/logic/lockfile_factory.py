"""
Lazily constructed per-process lockfile singletons, one per type.

No lock guards first construction: a race may build an instance twice,
which is harmless because every access re-validates the persisted state.
With ``[Lockfile] strict = true`` the fcntl-guarded variants are used.
"""

from __future__ import annotations

from typing import Optional

from floss_funding.core.config.config_service import config_service
from floss_funding.nagging.logic.lockfile import AtExitLockfile, OnLoadLockfile

_on_load: Optional[OnLoadLockfile] = None
_at_exit: Optional[AtExitLockfile] = None


def on_load_lockfile() -> OnLoadLockfile:
    global _on_load
    if _on_load is None:
        if config_service.lockfile.strict:
            from floss_funding.nagging.logic.locking_lockfile import LockingOnLoadLockfile  # POSIX only

            _on_load = LockingOnLoadLockfile()
        else:
            _on_load = OnLoadLockfile()
    return _on_load


def at_exit_lockfile() -> AtExitLockfile:
    global _at_exit
    if _at_exit is None:
        if config_service.lockfile.strict:
            from floss_funding.nagging.logic.locking_lockfile import LockingAtExitLockfile  # POSIX only

            _at_exit = LockingAtExitLockfile()
        else:
            _at_exit = AtExitLockfile()
    return _at_exit


def reset_lockfiles() -> None:
    global _on_load, _at_exit
    _on_load = None
    _at_exit = None
