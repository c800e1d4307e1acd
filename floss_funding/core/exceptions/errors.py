"""floss_funding exceptions.

Only ValidationError is meant to reach integrators; the others are folded
into classification results or swallowed at the lockfile boundary.
"""
from __future__ import annotations


class FlossFundingError(Exception):
    """Base exception for floss_funding."""


class ValidationError(FlossFundingError, ValueError):
    """Raised when a namespace segment contains disallowed characters or is too long."""


class DecryptionFailure(FlossFundingError):
    """Raised when a well-formed hex token cannot be decrypted into text."""


class PersistenceFailure(FlossFundingError):
    """Raised when a lockfile cannot be read, parsed or written."""
