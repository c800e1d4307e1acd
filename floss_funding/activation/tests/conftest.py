"""Shared fixtures for the activation tests."""
from __future__ import annotations

import sys

import pytest


@pytest.fixture(autouse=True)
def no_pending_uncaught_exception(monkeypatch: pytest.MonkeyPatch) -> None:
    # pytest records failures of earlier tests in sys.last_value
    monkeypatch.delattr(sys, "last_value", raising=False)
    monkeypatch.delattr(sys, "last_exc", raising=False)
