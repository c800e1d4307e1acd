"""
nagging/logic/locking_lockfile.py

Stricter NagStore backend: the read-modify-write cycle of a NagLockfile runs
under an exclusive ``fcntl.flock`` on a sidecar "<lockfile>.flock" file, so
racing processes cannot both record the same first nag. POSIX only.
"""

from __future__ import annotations

import contextlib
import fcntl
import logging
from pathlib import Path
from typing import Iterator

from floss_funding.nagging.logic.lockfile import AtExitLockfile, OnLoadLockfile

logger = logging.getLogger(__name__)


class LockingMixin:
    """Overrides NagLockfile._transaction with an exclusive advisory lock."""

    lock_type: str

    @contextlib.contextmanager
    def _transaction(self, path: Path) -> Iterator[None]:
        guard = path.with_name(path.name + ".flock")
        guard.parent.mkdir(parents=True, exist_ok=True)
        with open(guard, "w") as fh:
            fcntl.flock(fh, fcntl.LOCK_EX)
            logger.debug("%s lockfile: acquired %s", self.lock_type, guard)
            try:
                yield
            finally:
                fcntl.flock(fh, fcntl.LOCK_UN)


class LockingOnLoadLockfile(LockingMixin, OnLoadLockfile):
    pass


class LockingAtExitLockfile(LockingMixin, AtExitLockfile):
    pass

