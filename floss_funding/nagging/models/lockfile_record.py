"""
Data model of a nag lockfile.

Persisted shape (YAML):

    created:
      pid: 1234
      at: "2026-01-01T00:00:00+00:00"
      type: on_load
    nags:
      acme-widgets:
        namespace: Acme::Widgets
        env_variable_name: FLOSS_FUNDING_ACME__WIDGETS
        state: unactivated
        pid: 1234
        at: "2026-01-01T00:00:00+00:00"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from floss_funding.core.exceptions.errors import PersistenceFailure
from floss_funding.core.helpers.date_time_helper import parse_utc_iso, to_utc_iso, utc_now

LOCKFILE_TYPES = ("on_load", "at_exit")
STATE_VALUES = ("activated", "unactivated", "invalid")


@dataclass(frozen=True)
class CreatedInfo:
    pid: int
    at: datetime
    type: str

    @classmethod
    def fresh(cls, lock_type: str, now: Optional[datetime] = None) -> "CreatedInfo":
        return cls(pid=os.getpid(), at=now or utc_now(), type=lock_type)

    def to_dict(self) -> Dict[str, Any]:
        return {"pid": self.pid, "at": to_utc_iso(self.at), "type": self.type}

    @classmethod
    def from_dict(cls, data: Any) -> "CreatedInfo":
        if not isinstance(data, dict):
            raise PersistenceFailure("'created' must be a mapping")
        pid = data.get("pid")
        at = parse_utc_iso(data.get("at"))
        lock_type = data.get("type")
        if not isinstance(pid, int) or isinstance(pid, bool):
            raise PersistenceFailure("'created.pid' must be an integer")
        if at is None:
            raise PersistenceFailure("'created.at' must be an ISO8601 timestamp")
        if lock_type not in LOCKFILE_TYPES:
            raise PersistenceFailure(f"'created.type' must be one of {LOCKFILE_TYPES}")
        return cls(pid=pid, at=at, type=lock_type)


@dataclass(frozen=True)
class NagRecord:
    namespace: str
    env_variable_name: str
    state: str
    pid: int
    at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "namespace": self.namespace,
            "env_variable_name": self.env_variable_name,
            "state": self.state,
            "pid": self.pid,
            "at": to_utc_iso(self.at),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "NagRecord":
        if not isinstance(data, dict):
            raise PersistenceFailure("nag entry must be a mapping")
        at = parse_utc_iso(data.get("at"))
        pid = data.get("pid")
        state = data.get("state")
        if at is None or not isinstance(pid, int) or state not in STATE_VALUES:
            raise PersistenceFailure("nag entry is malformed")
        return cls(
            namespace=str(data.get("namespace", "")),
            env_variable_name=str(data.get("env_variable_name", "")),
            state=state,
            pid=pid,
            at=at,
        )


@dataclass
class LockfileRecord:
    created: CreatedInfo
    nags: Dict[str, NagRecord] = field(default_factory=dict)

    @classmethod
    def fresh(cls, lock_type: str, now: Optional[datetime] = None) -> "LockfileRecord":
        return cls(created=CreatedInfo.fresh(lock_type, now))

    def age_seconds(self, now: datetime) -> float:
        return (now - self.created.at).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created": self.created.to_dict(),
            "nags": {key: rec.to_dict() for key, rec in self.nags.items()},
        }

    @classmethod
    def from_dict(cls, data: Any, expected_type: str) -> "LockfileRecord":
        """Parse a loaded YAML document; raises PersistenceFailure on any structural problem."""
        if not isinstance(data, dict):
            raise PersistenceFailure("lockfile root must be a mapping")
        created = CreatedInfo.from_dict(data.get("created"))
        if created.type != expected_type:
            raise PersistenceFailure(f"lockfile type {created.type!r} != {expected_type!r}")
        raw_nags = data.get("nags") or {}
        if not isinstance(raw_nags, dict):
            raise PersistenceFailure("'nags' must be a mapping")
        nags = {str(key): NagRecord.from_dict(value) for key, value in raw_nags.items()}
        return cls(created=created, nags=nags)
