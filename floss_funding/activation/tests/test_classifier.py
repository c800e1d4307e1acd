"""Tests for ActivationClassifier state transitions."""
from __future__ import annotations

import pytest

from floss_funding.activation.logic.classifier import (
    BUSINESS_IS_NOT_GOOD_YET,
    FREE_AS_IN_BEER,
    ActivationClassifier,
    opt_out_marker,
)
from floss_funding.activation.logic.word_window import WordWindowProvider
from floss_funding.activation.models.activation_state import ActivationState
from floss_funding.activation.tests.token_helpers import issue_token, month_after_epoch

NS = "Acme::Widgets"
CORPUS = ["alpha", "beta", "gamma", "delta"]


@pytest.fixture
def classifier() -> ActivationClassifier:
    return ActivationClassifier(window=WordWindowProvider(CORPUS))


def test_empty_token_is_unactivated(classifier: ActivationClassifier) -> None:
    assert classifier.classify(NS, "", month_after_epoch(3)) is ActivationState.UNACTIVATED
    assert classifier.classify(NS, None, month_after_epoch(3)) is ActivationState.UNACTIVATED


@pytest.mark.parametrize("offset", [-10, 0, 1, 50])
def test_unpaid_markers_activate_regardless_of_window(classifier: ActivationClassifier, offset: int) -> None:
    now = month_after_epoch(offset)
    for marker in (FREE_AS_IN_BEER, BUSINESS_IS_NOT_GOOD_YET, opt_out_marker(NS)):
        assert classifier.classify(NS, marker, now) is ActivationState.ACTIVATED


def test_opt_out_marker_is_namespace_specific(classifier: ActivationClassifier) -> None:
    token = opt_out_marker("Other::Lib")
    assert token == "Not-financially-supporting-Other::Lib"
    assert classifier.classify(NS, token, month_after_epoch(3)) is ActivationState.INVALID


@pytest.mark.parametrize("token", ["nope", "ab" * 31, "ab" * 33, "g" * 64, " " + "a" * 63])
def test_non_hex_or_wrong_length_is_invalid(classifier: ActivationClassifier, token: str) -> None:
    assert classifier.classify(NS, token, month_after_epoch(3)) is ActivationState.INVALID


def test_hex_token_for_unlocked_word_activates(classifier: ActivationClassifier) -> None:
    token = issue_token("gamma", NS)
    assert classifier.classify(NS, token, month_after_epoch(3)) is ActivationState.ACTIVATED


def test_word_from_the_future_is_unactivated(classifier: ActivationClassifier) -> None:
    token = issue_token("gamma", NS)
    assert classifier.classify(NS, token, month_after_epoch(1)) is ActivationState.UNACTIVATED


def test_unknown_word_is_unactivated_not_invalid(classifier: ActivationClassifier) -> None:
    token = issue_token("not-a-word", NS)
    assert classifier.classify(NS, token, month_after_epoch(3)) is ActivationState.UNACTIVATED


def test_undecryptable_hex_is_unactivated(classifier: ActivationClassifier) -> None:
    assert classifier.classify(NS, "0" * 64, month_after_epoch(3)) is ActivationState.UNACTIVATED


def test_token_for_another_namespace_is_unactivated(classifier: ActivationClassifier) -> None:
    token = issue_token("alpha", "Other::Lib")
    assert classifier.classify(NS, token, month_after_epoch(3)) is ActivationState.UNACTIVATED


def test_hex_mismatch_state_is_configurable() -> None:
    strict = ActivationClassifier(
        window=WordWindowProvider(CORPUS), hex_mismatch_state=ActivationState.INVALID
    )
    token = issue_token("gamma", NS)
    assert strict.classify(NS, token, month_after_epoch(1)) is ActivationState.INVALID
    assert strict.classify(NS, token, month_after_epoch(3)) is ActivationState.ACTIVATED


def test_end_to_end_with_shipped_corpus() -> None:
    classifier = ActivationClassifier(window=WordWindowProvider())
    token = issue_token("gamma", NS)
    assert classifier.classify(NS, token, month_after_epoch(3)) is ActivationState.ACTIVATED
    assert classifier.classify(NS, token, month_after_epoch(1)) is ActivationState.UNACTIVATED


def test_classification_is_pure(classifier: ActivationClassifier) -> None:
    token = issue_token("beta", NS)
    now = month_after_epoch(2)
    results = {classifier.classify(NS, token, now) for _ in range(5)}
    assert results == {ActivationState.ACTIVATED}


def test_unreadable_corpus_degrades_to_unactivated(tmp_path) -> None:
    corpus = tmp_path / "broken.txt"
    corpus.write_bytes(b"\xff\xfe\xfd\n")
    classifier = ActivationClassifier(window=WordWindowProvider(path=corpus))
    assert classifier.classify(NS, issue_token("alpha", NS), month_after_epoch(3)) is ActivationState.UNACTIVATED
