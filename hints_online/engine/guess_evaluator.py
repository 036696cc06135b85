"""
Guess evaluator.
Normalises a typed guess and compares it with the active secret word, and keeps
the bounded set of guess ids already handed to the scoring logic.
"""
from __future__ import annotations

import re
import unicodedata
from enum import Enum
from typing import Set

_NON_ALNUM = re.compile(r"[^a-z0-9]")

# Below this length the secret word must be guessed exactly
MIN_SUBSTRING_SECRET_LEN = 4


class MatchOutcome(str, Enum):
    MATCH = "match"
    NO_MATCH = "no_match"


def normalize_text(text: str) -> str:
    """Lowercase, strip accents (NFD + drop combining marks) and keep only [a-z0-9]."""
    decomposed = unicodedata.normalize("NFD", (text or "").lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("", stripped).strip()


def evaluate(guess_text: str, secret_word: str) -> MatchOutcome:
    """
    MATCH when the normalised guess equals the normalised secret word, or when the
    secret word is longer than 3 characters and appears inside the guess
    ("ik denk fiets is het" for "fiets").
    """
    target = normalize_text(secret_word)
    if not target:
        return MatchOutcome.NO_MATCH
    guess = normalize_text(guess_text)
    if guess == target:
        return MatchOutcome.MATCH
    if len(target) >= MIN_SUBSTRING_SECRET_LEN and target in guess:
        return MatchOutcome.MATCH
    return MatchOutcome.NO_MATCH


class SeenGuessIds:
    """Bounded memory of processed guess ids; wiped entirely once full."""

    def __init__(self, capacity: int = 100) -> None:
        self.capacity = max(1, capacity)
        self._ids: Set[str] = set()

    def check_and_add(self, guess_id: str) -> bool:
        """Return True the first time an id is seen, False for a resend."""
        if guess_id in self._ids:
            return False
        if len(self._ids) >= self.capacity:
            self._ids.clear()
        self._ids.add(guess_id)
        return True

    def __contains__(self, guess_id: object) -> bool:
        return guess_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
