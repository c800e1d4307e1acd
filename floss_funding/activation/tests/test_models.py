"""Tests for Library, ActivationEvent and Namespace."""
from __future__ import annotations

import dataclasses

import pytest

from floss_funding.activation.logic.classifier import FREE_AS_IN_BEER, ActivationClassifier
from floss_funding.activation.logic.env_key_name import EnvKeyNameDeriver
from floss_funding.activation.logic.word_window import WordWindowProvider
from floss_funding.activation.models.activation_event import ActivationEvent
from floss_funding.activation.models.activation_state import ActivationState
from floss_funding.activation.models.library import Library
from floss_funding.activation.models.namespace import Namespace
from floss_funding.activation.tests.token_helpers import issue_token, month_after_epoch
from floss_funding.core.exceptions.errors import FlossFundingError


def test_state_str_is_its_value() -> None:
    assert str(ActivationState.INVALID) == "invalid"


def test_library_key_prefers_declared_name() -> None:
    assert Library("Acme::Widgets", name="acme-widgets").key == "acme-widgets"
    assert Library("Acme::Widgets").key == "Acme__Widgets"


def test_library_silence_flags() -> None:
    assert not Library("Acme").silence_requested()
    assert Library("Acme", silent=True).silence_requested()
    assert not Library("Acme", silent=lambda: False).silence_requested()
    assert Library("Acme", silent=lambda: 1).silence_requested()

    def boom() -> bool:
        raise RuntimeError("nope")

    assert Library("Acme", silent=boom).silence_requested()


def test_activation_event_is_immutable() -> None:
    event = ActivationEvent(Library("Acme"), "", ActivationState.UNACTIVATED)
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.state = ActivationState.ACTIVATED  # type: ignore[misc]


def test_activation_event_validates_state_and_silent() -> None:
    with pytest.raises(FlossFundingError):
        ActivationEvent(Library("Acme"), "", "activated")  # type: ignore[arg-type]
    with pytest.raises(FlossFundingError):
        ActivationEvent(Library("Acme"), "", ActivationState.ACTIVATED, silent="yes")  # type: ignore[arg-type]


def test_activation_event_to_dict() -> None:
    now = month_after_epoch(2)
    event = ActivationEvent(Library("Acme::Widgets", name="acme"), "x", ActivationState.INVALID, occurred_at=now)
    data = event.to_dict()
    assert data["library"] == "acme"
    assert data["namespace"] == "Acme::Widgets"
    assert data["state"] == "invalid"
    assert data["occurred_at"].startswith(f"{now.year:04d}-{now.month:02d}-15T12:00:00")


def _classifier() -> ActivationClassifier:
    return ActivationClassifier(window=WordWindowProvider(["alpha", "beta", "gamma"]))


def test_namespace_build_computes_env_name_and_state() -> None:
    ns = Namespace.build(
        "Acme::Widgets",
        issue_token("gamma", "Acme::Widgets"),
        classifier=_classifier(),
        deriver=EnvKeyNameDeriver(prefix="FLOSS_FUNDING_"),
        now=month_after_epoch(3),
    )
    assert ns.name == "Acme::Widgets"
    assert str(ns) == "Acme::Widgets"
    assert ns.env_var_name == "FLOSS_FUNDING_ACME__WIDGETS"
    assert ns.state is ActivationState.ACTIVATED
    assert ns.activation_events == []


def test_namespace_events_only_grow() -> None:
    ns = Namespace.build(
        "Acme", FREE_AS_IN_BEER, classifier=_classifier(), deriver=EnvKeyNameDeriver(prefix="")
    )
    first = ActivationEvent(Library("Acme", name="a"), FREE_AS_IN_BEER, ns.state)
    second = ActivationEvent(Library("Acme", name="b"), FREE_AS_IN_BEER, ns.state)
    ns.add_event(first)
    ns.add_event(second)

    snapshot = ns.activation_events
    snapshot.clear()
    assert ns.activation_events == [first, second]
    assert ns.has_state(ActivationState.ACTIVATED)
    assert not ns.has_state(ActivationState.INVALID)
    assert ns.with_state(ActivationState.ACTIVATED) == [first, second]


def test_namespace_rejects_foreign_events() -> None:
    ns = Namespace("Acme", "ACME", "", ActivationState.UNACTIVATED)
    with pytest.raises(FlossFundingError):
        ns.add_event("not an event")  # type: ignore[arg-type]
