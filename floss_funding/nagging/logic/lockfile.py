"""
nagging/logic/lockfile.py
=========================

Cross-process nag throttle persisted as one YAML file per lockfile type.

Behavior:
- Path defaults to <project_root>/<type filename>; an env override must end
  in ".lock" (absolute used as is, relative resolved against the root).
- No project root -> no persistence; every library counts as "not nagged".
- A broken or foreign file is replaced by a fresh record (self-healing).
- When the record is older than its max age (clamped to 600..604800 s) it is
  deleted and recreated, so reminders can recur after a cooldown.
- Every write replaces the whole file (temp file + os.replace). There is no
  lock around read-modify-write: racing processes may both nag once, but the
  file is never left half-written.
- Nothing here raises; failures are logged at DEBUG and degrade to "allow".
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterator, Mapping, Optional

import yaml

from floss_funding.activation.logic.env_key_name import env_key_name_deriver
from floss_funding.activation.models.activation_event import ActivationEvent
from floss_funding.activation.models.library import Library
from floss_funding.core.common.project_root import ProjectRoot
from floss_funding.core.config.config_service import (
    MAX_LOCKFILE_AGE,
    MIN_LOCKFILE_AGE,
    ConfigService,
    config_service,
)
from floss_funding.core.contracts.nagging import NagStore
from floss_funding.core.exceptions.errors import PersistenceFailure
from floss_funding.core.helpers.date_time_helper import utc_now
from floss_funding.nagging.models.lockfile_record import LockfileRecord, NagRecord

logger = logging.getLogger(__name__)

_UNSET = object()


def clamp_max_age(value: int) -> int:
    return max(MIN_LOCKFILE_AGE, min(MAX_LOCKFILE_AGE, value))


def write_text_atomic(path: Path, text: str) -> None:
    """Write text atomically: temp file in the same directory, then os.replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=path.name, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, str(path))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


class NagLockfile(NagStore):
    """
    Base class; subclasses pin ``lock_type`` and the env variable names.

    Args:
        root: Project root directory. Omitted: the cached discovered root.
            None: no persistence at all.
        environ: Environment mapping (defaults to os.environ).
        clock: Callable returning an aware UTC datetime.
        config: ConfigService providing default filenames and max ages.
    """

    lock_type: str = ""
    path_env_var: str = ""
    max_age_env_var: str = ""

    def __init__(
        self,
        root: object = _UNSET,
        *,
        environ: Optional[Mapping[str, str]] = None,
        clock: Callable[[], datetime] = utc_now,
        config: Optional[ConfigService] = None,
    ) -> None:
        self._root_override = root
        self._environ = environ
        self._clock = clock
        self._config = config or config_service
        self._record: Optional[LockfileRecord] = None

    # ------------------------------------------------------------------ #
    #  Configuration
    # ------------------------------------------------------------------ #
    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def _default_filename(self) -> str:
        return getattr(self._config.lockfile, f"{self.lock_type}_filename")

    def _default_max_age(self) -> int:
        return int(getattr(self._config.lockfile, f"{self.lock_type}_max_age"))

    def project_root(self) -> Optional[Path]:
        if self._root_override is _UNSET:
            return ProjectRoot.path()
        return Path(self._root_override) if self._root_override is not None else None

    def max_age_seconds(self, raw: Optional[str] = None) -> int:
        """Lifetime in seconds from *raw* (or the env variable), clamped to [600, 604800]."""
        if raw is None:
            raw = self.environ.get(self.max_age_env_var)
        try:
            value = int(str(raw).strip()) if raw is not None else self._default_max_age()
        except (TypeError, ValueError):
            value = self._default_max_age()
        return clamp_max_age(value)

    def resolve_path(self) -> Optional[Path]:
        root = self.project_root()
        if root is None:
            logger.debug("%s lockfile: no project root; skipping persistence", self.lock_type)
            return None

        override = (self.environ.get(self.path_env_var) or "").strip()
        if override:
            if override.endswith(".lock"):
                candidate = Path(override)
                chosen = candidate if candidate.is_absolute() else (root / candidate)
                logger.debug("%s lockfile: env override %r => %s", self.lock_type, override, chosen)
                return chosen
            logger.debug("%s lockfile: ignoring invalid override %r", self.lock_type, override)
        return root / self._default_filename()

    # ------------------------------------------------------------------ #
    #  Persistence
    # ------------------------------------------------------------------ #
    def _fresh(self) -> LockfileRecord:
        return LockfileRecord.fresh(self.lock_type, self._clock())

    def _read(self, path: Path) -> LockfileRecord:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return self._fresh()
        except OSError as exc:
            raise PersistenceFailure(f"cannot read {path}: {exc}") from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise PersistenceFailure(f"cannot parse {path}: {exc}") from exc
        return LockfileRecord.from_dict(data, self.lock_type)

    def _persist(self, path: Path, record: LockfileRecord) -> None:
        text = yaml.safe_dump(record.to_dict(), default_flow_style=False, sort_keys=False)
        try:
            write_text_atomic(path, text)
        except OSError as exc:
            raise PersistenceFailure(f"cannot write {path}: {exc}") from exc

    @contextlib.contextmanager
    def _transaction(self, path: Path) -> Iterator[None]:
        """Hook around read-modify-write; the relaxed default takes no lock."""
        yield

    def load_or_initialize(self) -> Optional[LockfileRecord]:
        """Re-read the file; anything unreadable or malformed becomes a fresh record."""
        path = self.resolve_path()
        if path is None:
            return None
        try:
            self._record = self._read(path)
        except PersistenceFailure as exc:
            logger.debug("%s lockfile: resetting unusable payload (%s)", self.lock_type, exc)
            self._record = self._fresh()
        return self._record

    def _rotate_record(self, path: Path, record: LockfileRecord) -> LockfileRecord:
        now = self._clock()
        max_age = self.max_age_seconds()
        if record.age_seconds(now) <= max_age:
            return record
        logger.debug(
            "%s lockfile: rotating (age=%ss > max_age=%ss)",
            self.lock_type, int(record.age_seconds(now)), max_age,
        )
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise PersistenceFailure(f"cannot delete {path}: {exc}") from exc
        fresh = self._fresh()
        self._persist(path, fresh)
        return fresh

    def _current(self, path: Path) -> LockfileRecord:
        record = self.load_or_initialize() or self._fresh()
        self._record = self._rotate_record(path, record)
        return self._record

    # ------------------------------------------------------------------ #
    #  Public API
    # ------------------------------------------------------------------ #
    def rotate_if_expired(self) -> bool:
        path = self.resolve_path()
        if path is None:
            return False
        try:
            with self._transaction(path):
                before = self.load_or_initialize() or self._fresh()
                after = self._rotate_record(path, before)
                self._record = after
                return after is not before
        except Exception as exc:  # noqa: BLE001
            logger.debug("%s lockfile: rotate failed: %s", self.lock_type, exc)
            return False

    def nagged(self, library: Library) -> bool:
        path = self.resolve_path()
        if path is None:
            return False
        try:
            with self._transaction(path):
                return library.key in self._current(path).nags
        except Exception as exc:  # noqa: BLE001
            logger.debug("%s lockfile: nagged? failed for %s: %s", self.lock_type, library.key, exc)
            return False

    def record_nag(self, library: Library, event: ActivationEvent) -> None:
        path = self.resolve_path()
        if path is None:
            return
        try:
            with self._transaction(path):
                record = self._current(path)
                if library.key in record.nags:
                    return
                env_variable_name = self._env_variable_name(library)
                record.nags[library.key] = NagRecord(
                    namespace=library.namespace,
                    env_variable_name=env_variable_name,
                    state=event.state.value,
                    pid=os.getpid(),
                    at=self._clock(),
                )
                self._persist(path, record)
                logger.debug("%s lockfile: recorded nag for %s", self.lock_type, library.key)
        except Exception as exc:  # noqa: BLE001
            logger.debug("%s lockfile: record_nag failed for %s: %s", self.lock_type, library.key, exc)

    def touch(self) -> None:
        path = self.resolve_path()
        if path is None:
            return
        try:
            with self._transaction(path):
                self._persist(path, self._current(path))
        except Exception as exc:  # noqa: BLE001
            logger.debug("%s lockfile: touch failed: %s", self.lock_type, exc)

    def nags(self) -> Dict[str, NagRecord]:
        """Snapshot of the persisted nags (empty without persistence)."""
        record = self.load_or_initialize()
        return dict(record.nags) if record else {}

    @staticmethod
    def _env_variable_name(library: Library) -> str:
        try:
            return env_key_name_deriver.derive(library.namespace)
        except ValueError:
            return ""

    # ---------- NagStore contract ---------------------------------------
    def check(self, library: Library) -> bool:
        return self.nagged(library)

    def record(self, library: Library, event: ActivationEvent) -> None:
        self.record_nag(library, event)

    def rotate(self) -> bool:
        return self.rotate_if_expired()


class OnLoadLockfile(NagLockfile):
    """Short-lived throttle for the one-line load-time reminder."""

    lock_type = "on_load"
    path_env_var = "FLOSS_CFG_FUNDING_ON_LOAD_LOCK"
    max_age_env_var = "FLOSS_CFG_FUNDING_ON_LOAD_SEC_PER_NAG_MAX"


class AtExitLockfile(NagLockfile):
    """Longer-lived throttle for the reminder printed when the process exits."""

    lock_type = "at_exit"
    path_env_var = "FLOSS_CFG_FUNDING_AT_EXIT_LOCK"
    max_age_env_var = "FLOSS_CFG_FUNDING_AT_EXIT_SEC_PER_NAG_MAX"

