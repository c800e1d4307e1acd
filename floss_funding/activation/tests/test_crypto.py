"""Tests for namespace-keyed token decryption."""
from __future__ import annotations

import hashlib

import pytest

from floss_funding.activation.logic.crypto import CryptoDecryptor, namespace_key
from floss_funding.activation.tests.token_helpers import issue_token
from floss_funding.core.exceptions.errors import DecryptionFailure


def test_key_is_md5_hexdigest_bytes() -> None:
    key = namespace_key("Acme::Widgets")
    assert key == hashlib.md5(b"Acme::Widgets").hexdigest().encode("ascii")
    assert len(key) == 32


def test_same_namespace_same_key() -> None:
    assert namespace_key("Acme") == namespace_key("Acme")
    assert namespace_key("Acme") != namespace_key("Acme::Widgets")


def test_decrypts_issued_token() -> None:
    token = issue_token("gamma", "Acme::Widgets")
    assert len(token) == 64
    assert CryptoDecryptor().decrypt(token, "Acme::Widgets") == "gamma"


def test_uppercase_hex_is_accepted() -> None:
    token = issue_token("beta", "Acme").upper()
    assert CryptoDecryptor().decrypt(token, "Acme") == "beta"


def test_empty_input_yields_sentinel() -> None:
    assert CryptoDecryptor().decrypt("", "Acme") is None


def test_malformed_hex_raises_value_error() -> None:
    with pytest.raises(ValueError):
        CryptoDecryptor().decrypt("zz" * 32, "Acme")


def test_wrong_namespace_does_not_yield_the_word() -> None:
    token = issue_token("gamma", "Acme::Widgets")
    try:
        result = CryptoDecryptor().decrypt(token, "Other::Lib")
    except DecryptionFailure:
        result = None
    assert result != "gamma"


def test_partial_block_raises_decryption_failure() -> None:
    with pytest.raises(DecryptionFailure):
        CryptoDecryptor().decrypt("ab" * 10, "Acme")
