# fereai/agent/intent.py
"""
Fuzzy summary-intent detection.

A prompt is compared against a fixed set of reference phrases. Each phrase
gets a combined score of normalized Levenshtein similarity and word-set
Jaccard similarity:

    score = 0.5 * edit_similarity + 0.7 * word_similarity

The weights sum to 1.2, so an exact match scores 1.2. The score is compared
against the threshold as-is.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from rapidfuzz.distance import Levenshtein

log = logging.getLogger(__name__)

EDIT_WEIGHT = 0.5
WORD_WEIGHT = 0.7
DEFAULT_THRESHOLD = 0.6

_WS = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    return _WS.sub(" ", text.lower().strip())


def word_similarity(a: str, b: str) -> float:
    """Jaccard coefficient over space-separated words (0.0 when both are empty)."""
    set_a = set(normalize_text(a).split())
    set_b = set(normalize_text(b).split())
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def edit_similarity(a: str, b: str) -> float:
    """1 - levenshtein(a, b) / max(len(a), len(b))."""
    return Levenshtein.normalized_similarity(normalize_text(a), normalize_text(b))


def combined_score(prompt: str, phrase: str) -> float:
    return EDIT_WEIGHT * edit_similarity(prompt, phrase) + WORD_WEIGHT * word_similarity(prompt, phrase)


def classify(prompt: str, phrases: Iterable[str], threshold: float = DEFAULT_THRESHOLD) -> bool:
    """True iff any phrase scores >= threshold against the prompt."""
    return any(combined_score(prompt, phrase) >= threshold for phrase in phrases)


class SummaryIntentClassifier:
    """
    Binds a non-empty phrase set and a threshold.

    Stateless across calls; every verdict is recomputed from the prompt.
    """

    def __init__(self, phrases: Sequence[str], threshold: float = DEFAULT_THRESHOLD):
        phrases = tuple(phrases)
        if not phrases:
            raise ValueError("phrase set cannot be empty")
        self.phrases = phrases
        self.threshold = threshold

    def score(self, prompt: str) -> float:
        """Best combined score over all phrases."""
        return max(combined_score(prompt, p) for p in self.phrases)

    def classify(self, prompt: str) -> bool:
        verdict = classify(prompt, self.phrases, self.threshold)
        log.debug("summary intent=%s prompt=%r", verdict, prompt[:100])
        return verdict
