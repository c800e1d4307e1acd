"""
activation/logic/word_window.py

Time-indexed whitelist of plaintext activation words.

Every calendar month after EPOCH_MONTH unlocks one more word of the corpus.
The list only grows, so a token that was valid once stays valid, while a
token encoding a word "from the future" is rejected until its month comes.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from threading import RLock
from typing import Dict, FrozenSet, List, Optional, Sequence

from floss_funding.core.helpers.date_time_helper import month_index, month_index_of

logger = logging.getLogger(__name__)

# Never change this after release: it shifts which words are unlocked.
EPOCH_MONTH = month_index(2025, 7)

BASE_WORDS_PATH = Path(__file__).resolve().parent.parent / "resources" / "base.txt"


class WordWindowProvider:
    """
    Args:
        corpus: Optional pre-loaded word list (tests). When omitted the
            corpus is read lazily from *path* on first use.
        path: Corpus file, one word per line.
        epoch_month: Month index at which the window is empty.
    """

    def __init__(
        self,
        corpus: Optional[Sequence[str]] = None,
        *,
        path: Path = BASE_WORDS_PATH,
        epoch_month: int = EPOCH_MONTH,
    ) -> None:
        self._path = path
        self._epoch_month = epoch_month
        self._corpus: Optional[tuple] = tuple(corpus) if corpus is not None else None
        self._sets: Dict[int, FrozenSet[str]] = {}
        self._lock = RLock()

    @property
    def epoch_month(self) -> int:
        return self._epoch_month

    # ------------------------------------------------------------------ #
    def _load(self) -> tuple:
        with self._lock:
            if self._corpus is None:
                try:
                    with self._path.open("r", encoding="utf-8") as fh:
                        words = [line.strip() for line in fh]
                    self._corpus = tuple(w for w in words if w)
                except (OSError, UnicodeDecodeError) as exc:
                    logger.debug("Word corpus unreadable at %s: %s", self._path, exc)
                    self._corpus = ()
            return self._corpus

    @property
    def corpus(self) -> tuple:
        return self._load()

    # ------------------------------------------------------------------ #
    def valid_count(self, now: datetime) -> int:
        """Months elapsed since the epoch; zero or negative means nothing is unlocked."""
        return month_index_of(now) - self._epoch_month

    def words(self, n: int) -> List[str]:
        """The first *n* corpus words, clamped to the corpus length."""
        if n <= 0:
            return []
        return list(self._load()[:n])

    def _word_set(self, n: int) -> FrozenSet[str]:
        corpus = self._load()
        n = max(0, min(n, len(corpus)))
        with self._lock:
            cached = self._sets.get(n)
            if cached is None:
                cached = frozenset(corpus[:n])
                self._sets[n] = cached
            return cached

    def contains(self, now: datetime, word: Optional[str]) -> bool:
        if not word:
            return False
        return word in self._word_set(self.valid_count(now))


# Shared instance used by the poke flow.
word_window = WordWindowProvider()
