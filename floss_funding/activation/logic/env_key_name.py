"""
activation/logic/env_key_name.py

Turns a hierarchical namespace ("Acme::Widgets") into the name of the
environment variable holding its activation token
("FLOSS_FUNDING_ACME__WIDGETS").

Segments are restricted to uppercase letters, lowercase letters and decimal
digits (Unicode categories Lu, Ll, Nd), 1..256 characters each.
"""

from __future__ import annotations

import unicodedata
from threading import RLock
from typing import Dict, Optional

from floss_funding.core.config.config_service import config_service
from floss_funding.core.exceptions.errors import ValidationError

NAMESPACE_DELIMITER = "::"
SEGMENT_JOINER = "__"
SEPARATOR = "_"
MAX_SEGMENT_LENGTH = 256

_ALLOWED_CATEGORIES = frozenset({"Lu", "Ll", "Nd"})


def to_under_bar(segment: str) -> str:
    """
    Convert one namespace segment to its uppercased, underscored form.

    A separator is inserted wherever an uppercase run begins ("AcmeHTTPClient"
    -> "ACME_HTTPCLIENT"); a leading separator is dropped.
    """
    if not isinstance(segment, str) or not 0 < len(segment) <= MAX_SEGMENT_LENGTH:
        raise ValidationError(
            f"Invalid namespace segment {str(segment)[:MAX_SEGMENT_LENGTH]!r}: "
            f"must be 1..{MAX_SEGMENT_LENGTH} letters or digits"
        )

    out = []
    prev_upper = False
    for ch in segment:
        category = unicodedata.category(ch)
        if category not in _ALLOWED_CATEGORIES:
            raise ValidationError(
                f"Invalid namespace segment {segment!r}: {ch!r} is not a letter or digit"
            )
        is_upper = category == "Lu"
        if is_upper and not prev_upper:
            out.append(SEPARATOR)
        out.append(ch)
        prev_upper = is_upper

    underscored = "".join(out)
    if underscored.startswith(SEPARATOR):
        underscored = underscored[len(SEPARATOR):]
    return underscored.upper()


class EnvKeyNameDeriver:
    """
    Memoizing namespace -> env variable name converter.

    The cache is keyed by namespace only. After changing the prefix call
    :meth:`reset_cache`; until then previously derived names are returned
    unchanged.
    """

    def __init__(self, prefix: Optional[str] = None) -> None:
        self._prefix = config_service.env_prefix if prefix is None else prefix
        self._cache: Dict[str, str] = {}
        self._lock = RLock()

    @property
    def prefix(self) -> str:
        return self._prefix

    def set_prefix(self, prefix: str) -> None:
        self._prefix = prefix

    def reset_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def derive(self, namespace: str) -> str:
        if not isinstance(namespace, str):
            raise ValidationError(f"namespace must be a str, but is {type(namespace).__name__}")

        with self._lock:
            cached = self._cache.get(namespace)
            if cached is not None:
                return cached

            parts = namespace.split(NAMESPACE_DELIMITER)
            env_name = SEGMENT_JOINER.join(to_under_bar(p) for p in parts)
            result = f"{self._prefix}{env_name}".upper()
            self._cache[namespace] = result
            return result


# Shared instance used by the poke flow.
env_key_name_deriver = EnvKeyNameDeriver()
