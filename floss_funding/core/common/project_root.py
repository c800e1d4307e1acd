"""
core/common/project_root.py

Discovers and caches the consumer project's root directory.

Strategy: walk upwards from the working directory and keep the OUTERMOST
directory holding a packaging indicator (pyproject.toml, setup.py,
setup.cfg). floss_funding's own source checkout is never treated as a
consumer project.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from threading import RLock
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

ROOT_INDICATORS: Sequence[str] = ("pyproject.toml", "setup.py", "setup.cfg")

# Directory that contains the floss_funding package itself.
FLOSS_FUNDING_HOME = Path(__file__).resolve().parents[3]


def find_project_root(start: Optional[Path] = None) -> Optional[Path]:
    """Return the outermost ancestor of *start* carrying a root indicator, or None."""
    try:
        here = Path(start) if start is not None else Path(os.getcwd())
        here = here.resolve()
    except OSError:
        logger.debug("find_project_root: working directory unavailable")
        return None

    found: Optional[Path] = None
    for candidate in (here, *here.parents):
        if any((candidate / name).is_file() for name in ROOT_INDICATORS):
            found = candidate

    if found is not None and found == FLOSS_FUNDING_HOME:
        logger.debug("find_project_root: ignoring floss_funding's own checkout at %s", found)
        return None
    return found


class ProjectRoot:
    """Process-wide cache around :func:`find_project_root`."""

    _lock = RLock()
    _path: Optional[Path] = None
    _discovered = False

    @classmethod
    def path(cls) -> Optional[Path]:
        with cls._lock:
            if not cls._discovered:
                cls._path = find_project_root()
                cls._discovered = True
                logger.debug("ProjectRoot discovered: %s", cls._path)
            return cls._path

    @classmethod
    def reset(cls) -> None:
        """Forget the cached root (tests, or after a chdir)."""
        with cls._lock:
            cls._path = None
            cls._discovered = False
