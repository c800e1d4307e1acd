"""Typed, layered configuration loader with precedence handling."""
from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
#  Literal environment switches
# --------------------------------------------------------------------------- #

ENV_PREFIX_VAR = "FLOSS_CFG_FUND_ENV_PREFIX"
SILENT_VAR = "FLOSS_CFG_FUND_SILENT"
SILENT_SENTINEL = "CATHEDRAL_OR_BAZAAR"
DEBUG_VAR = "FLOSS_CFG_FUNDING_DEBUG"
LOGFILE_VAR = "FLOSS_CFG_FUNDING_LOGFILE"

DEFAULT_ENV_PREFIX = "FLOSS_FUNDING_"

# Bounds shared by every lockfile type.
MIN_LOCKFILE_AGE = 600
MAX_LOCKFILE_AGE = 604800

_OVERLAY_PREFIX = "FLOSS_FUNDING_"


_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "General": {
        "env_prefix": DEFAULT_ENV_PREFIX,
        "debug": "false",
        "logfile": "",
    },
    "Lockfile": {
        "on_load_filename": ".floss_funding.on_load.lock",
        "on_load_max_age": "2400",
        "at_exit_filename": ".floss_funding.at_exit.lock",
        "at_exit_max_age": "86400",
        "strict": "false",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class GeneralConfig:
    env_prefix: str = DEFAULT_ENV_PREFIX
    debug: bool = False
    logfile: str = ""


@dataclass
class LockfileConfig:
    on_load_filename: str = ".floss_funding.on_load.lock"
    on_load_max_age: int = 2400
    at_exit_filename: str = ".floss_funding.at_exit.lock"
    at_exit_max_age: int = 86400
    strict: bool = False


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


def _cp_to_dict(cp: configparser.ConfigParser) -> Dict[str, Dict[str, Any]]:
    data: Dict[str, Dict[str, Any]] = {}
    for section in cp.sections():
        data[section] = {k: v for k, v in cp.items(section)}
    return data


def _cast(value: Any, typ: Any) -> Any:
    if typ in (bool, "bool"):
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if typ in (int, "int"):
        return int(value)
    if typ in (str, "str"):
        return str(value)
    return typ(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    kwargs = {}
    for field in fields(cls):
        val = data.get(field.name, field.default)
        try:
            kwargs[field.name] = _cast(val, field.type)
        except (TypeError, ValueError):
            kwargs[field.name] = field.default
    return cls(**kwargs)


def _env_overlays(environ: Dict[str, str]) -> Dict[str, Dict[str, Any]]:
    """Collect FLOSS_FUNDING_<SECTION>__<KEY> variables.

    Per-namespace activation variables share the prefix but never carry a
    known section name, so they are ignored here.
    """
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in environ.items():
        if not env_key.startswith(_OVERLAY_PREFIX):
            continue
        remainder = env_key[len(_OVERLAY_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.title()
        if section not in _DEFAULTS:
            continue
        result.setdefault(section, {})[key.lower()] = value
    return result


def _literal_overlays(environ: Dict[str, str]) -> Dict[str, Dict[str, Any]]:
    general: Dict[str, Any] = {}
    # An empty prefix is meaningful: it means "no prefix at all".
    if ENV_PREFIX_VAR in environ:
        general["env_prefix"] = environ[ENV_PREFIX_VAR]
    if environ.get(DEBUG_VAR):
        general["debug"] = environ[DEBUG_VAR]
    if environ.get(LOGFILE_VAR):
        general["logfile"] = environ[LOGFILE_VAR]
    return {"General": general} if general else {}


def _user_config_path(environ: Dict[str, str]) -> Optional[Path]:
    try:
        if os.name == "nt":
            appdata = environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
            return Path(appdata) / "floss_funding" / "config.ini"
        base = environ.get("XDG_CONFIG_HOME") or (Path.home() / ".config")
        return Path(base) / "floss_funding" / "config.ini"
    except (KeyError, RuntimeError):
        # no resolvable home directory
        return None


def _read_user_ini(path: Path) -> Optional[Dict[str, Dict[str, Any]]]:
    """Parse the user ini without interpolation; None when absent or unusable."""
    cp = configparser.ConfigParser(interpolation=None)
    try:
        if not path.is_file():
            return None
        cp.read(path, encoding="utf-8")
        return _cp_to_dict(cp)
    except (configparser.Error, OSError, UnicodeDecodeError) as exc:
        logger.debug("Ignoring unreadable user config %s: %s", path, exc)
        return None


def silent_requested(environ: Optional[Dict[str, str]] = None) -> bool:
    """True when the process-wide silence switch holds the documented sentinel."""
    env = os.environ if environ is None else environ
    value = env.get(SILENT_VAR, "")
    return value.strip().casefold() == SILENT_SENTINEL.casefold()


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety."""

    def __init__(self, environ: Optional[Dict[str, str]] = None) -> None:
        self._lock = RLock()
        self._environ = environ
        self.reload()

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            environ = dict(os.environ if self._environ is None else self._environ)
            merged: Dict[str, Dict[str, Any]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS, "code", "embedded", sources)

            # Layer 1: user overrides
            user_ini = _user_config_path(environ)
            user_layer = _read_user_ini(user_ini) if user_ini is not None else None
            if user_layer:
                _apply(merged, user_layer, "user", str(user_ini), sources)

            # Layer 2: environment overlays
            _apply(merged, _env_overlays(environ), "env", "os.environ", sources)

            # Layer 3: dedicated literal switches
            _apply(merged, _literal_overlays(environ), "env-literal", "os.environ", sources)

            self._sources = sources
            self._silent = silent_requested(environ)

            self.general = _build_dataclass(GeneralConfig, merged.get("General", {}))
            self.lockfile = _build_dataclass(LockfileConfig, merged.get("Lockfile", {}))

    # ------------------------------------------------------------------ #
    @property
    def silent(self) -> bool:
        return self._silent

    @property
    def debug(self) -> bool:
        return self.general.debug

    @property
    def env_prefix(self) -> str:
        return self.general.env_prefix

    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        return self._sources.get((section, key))


# Global singleton
config_service = ConfigService()
