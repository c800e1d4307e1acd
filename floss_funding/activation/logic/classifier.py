"""
activation/logic/classifier.py

Deterministic classification of an activation token into
activated / unactivated / invalid.

Priority order:
1. empty token                       -> UNACTIVATED
2. unpaid marker                     -> ACTIVATED (no payment implied)
3. not exactly 64 hex characters     -> INVALID
4. decrypts to a currently unlocked word -> ACTIVATED, otherwise UNACTIVATED
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import FrozenSet, Optional

from floss_funding.activation.logic.crypto import CryptoDecryptor
from floss_funding.activation.logic.word_window import WordWindowProvider, word_window
from floss_funding.activation.models.activation_state import ActivationState
from floss_funding.core.exceptions.errors import DecryptionFailure

logger = logging.getLogger(__name__)

FREE_AS_IN_BEER = "Free-as-in-beer"
BUSINESS_IS_NOT_GOOD_YET = "Business-is-not-good-yet"
NOT_FINANCIALLY_SUPPORTING = "Not-financially-supporting"

TOKEN_BYTES = 32
HEX_TOKEN_LENGTH = TOKEN_BYTES * 2
HEX_TOKEN_RULE = re.compile(r"\A[0-9a-fA-F]{%d}\Z" % HEX_TOKEN_LENGTH)

UNPAID_LITERALS: FrozenSet[str] = frozenset({FREE_AS_IN_BEER, BUSINESS_IS_NOT_GOOD_YET})


def opt_out_marker(namespace: str) -> str:
    """Per-namespace opt-out token, e.g. 'Not-financially-supporting-Acme::Widgets'."""
    return f"{NOT_FINANCIALLY_SUPPORTING}-{namespace}"


def is_unpaid_marker(token: str, namespace: str) -> bool:
    if not token:
        return False
    return token in UNPAID_LITERALS or token == opt_out_marker(namespace)


class ActivationClassifier:
    """
    Args:
        decryptor: Namespace-keyed token decryptor.
        window: Word whitelist provider.
        hex_mismatch_state: State for hex-shaped tokens that do not decrypt
            to an unlocked word. UNACTIVATED keeps them apart from
            structurally malformed tokens, which get a different hint.
    """

    def __init__(
        self,
        decryptor: Optional[CryptoDecryptor] = None,
        window: Optional[WordWindowProvider] = None,
        *,
        hex_mismatch_state: ActivationState = ActivationState.UNACTIVATED,
    ) -> None:
        self.decryptor = decryptor or CryptoDecryptor()
        self.window = window or word_window
        self.hex_mismatch_state = hex_mismatch_state

    def classify(self, namespace: str, token: Optional[str], now: datetime) -> ActivationState:
        if not token:
            return ActivationState.UNACTIVATED

        if is_unpaid_marker(token, namespace):
            return ActivationState.ACTIVATED

        if not HEX_TOKEN_RULE.match(token):
            return ActivationState.INVALID

        try:
            plain_text = self.decryptor.decrypt(token, namespace)
        except (ValueError, DecryptionFailure) as exc:
            logger.debug("Token for %s did not decrypt: %s", namespace, exc)
            return self.hex_mismatch_state

        if plain_text is not None and self.window.contains(now, plain_text):
            return ActivationState.ACTIVATED
        return self.hex_mismatch_state
