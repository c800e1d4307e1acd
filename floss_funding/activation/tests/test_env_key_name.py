"""Tests for namespace -> env variable name derivation."""
from __future__ import annotations

import pytest

from floss_funding.activation.logic.env_key_name import EnvKeyNameDeriver, to_under_bar
from floss_funding.core.exceptions.errors import ValidationError


def test_acme_widgets_v2_with_prefix() -> None:
    deriver = EnvKeyNameDeriver(prefix="FLOSS_FUNDING_")
    assert deriver.derive("Acme::Widgets::V2") == "FLOSS_FUNDING_ACME__WIDGETS__V2"


def test_camel_case_segments_get_separators() -> None:
    assert to_under_bar("MyLibrary") == "MY_LIBRARY"
    assert to_under_bar("lowercase") == "LOWERCASE"
    assert to_under_bar("Widget2Go") == "WIDGET2_GO"


def test_uppercase_run_is_one_word() -> None:
    assert to_under_bar("HTTPClient") == "HTTPCLIENT"
    assert to_under_bar("AcmeHTTP") == "ACME_HTTP"


def test_empty_prefix() -> None:
    assert EnvKeyNameDeriver(prefix="").derive("Acme::Widgets") == "ACME__WIDGETS"


def test_repeated_calls_are_identical() -> None:
    deriver = EnvKeyNameDeriver(prefix="P_")
    first = deriver.derive("Acme::Widgets")
    assert deriver.derive("Acme::Widgets") == first == "P_ACME__WIDGETS"


def test_prefix_change_needs_cache_reset() -> None:
    deriver = EnvKeyNameDeriver(prefix="OLD_")
    assert deriver.derive("Acme") == "OLD_ACME"

    deriver.set_prefix("NEW_")
    assert deriver.derive("Acme") == "OLD_ACME"

    deriver.reset_cache()
    assert deriver.derive("Acme") == "NEW_ACME"


@pytest.mark.parametrize(
    "namespace",
    ["Acme::Wid-gets", "Acme::", "::Acme", "Acme Widgets", "Acme::Wid_gets", "A" * 257],
)
def test_invalid_segments_raise(namespace: str) -> None:
    with pytest.raises(ValidationError):
        EnvKeyNameDeriver(prefix="X_").derive(namespace)


def test_segment_of_256_characters_is_accepted() -> None:
    name = EnvKeyNameDeriver(prefix="").derive("a" * 256)
    assert name == "A" * 256


def test_non_string_namespace_raises() -> None:
    with pytest.raises(ValidationError):
        EnvKeyNameDeriver(prefix="X_").derive(42)  # type: ignore[arg-type]


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        to_under_bar("bad!")
