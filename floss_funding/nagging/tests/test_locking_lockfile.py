"""The fcntl-guarded lockfile variant and the lazy per-process singletons."""
from __future__ import annotations

import threading
from pathlib import Path

import pytest

from floss_funding.activation.models.activation_event import ActivationEvent
from floss_funding.activation.models.activation_state import ActivationState
from floss_funding.activation.models.library import Library

fcntl = pytest.importorskip("fcntl")

from floss_funding.nagging.logic import lockfile_factory  # noqa: E402
from floss_funding.nagging.logic.lockfile import OnLoadLockfile  # noqa: E402
from floss_funding.nagging.logic.locking_lockfile import (  # noqa: E402
    LockingAtExitLockfile,
    LockingOnLoadLockfile,
)


def test_locking_variant_records_and_leaves_guard_file(tmp_path: Path) -> None:
    lockfile = LockingOnLoadLockfile(tmp_path, environ={})
    library = Library("Acme")
    lockfile.record_nag(library, ActivationEvent(library, "", ActivationState.UNACTIVATED))

    assert lockfile.nagged(library)
    assert (tmp_path / ".floss_funding.on_load.lock.flock").exists()
    assert LockingAtExitLockfile(tmp_path, environ={}).lock_type == "at_exit"


def test_concurrent_writers_keep_every_nag(tmp_path: Path) -> None:
    def worker(n: int) -> None:
        store = LockingOnLoadLockfile(tmp_path, environ={})
        for i in range(10):
            library = Library(f"Lib{n}x{i}")
            store.record_nag(library, ActivationEvent(library, "", ActivationState.UNACTIVATED))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(OnLoadLockfile(tmp_path, environ={}).nags()) == 40


def test_factory_returns_singletons(monkeypatch: pytest.MonkeyPatch) -> None:
    lockfile_factory.reset_lockfiles()
    try:
        assert lockfile_factory.on_load_lockfile() is lockfile_factory.on_load_lockfile()
        assert lockfile_factory.at_exit_lockfile().lock_type == "at_exit"

        lockfile_factory.reset_lockfiles()
        monkeypatch.setattr(lockfile_factory.config_service.lockfile, "strict", True)
        assert isinstance(lockfile_factory.on_load_lockfile(), LockingOnLoadLockfile)
        assert isinstance(lockfile_factory.at_exit_lockfile(), LockingAtExitLockfile)
    finally:
        lockfile_factory.reset_lockfiles()
