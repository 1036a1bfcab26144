"""
Rule-based review moderation.

Decides whether a submitted review is published straight away or held for an
admin. A keyword and repetition heuristic: deterministic, no external calls.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import BANNED_WORDS, MAX_REVIEW_LENGTH, MIN_REVIEW_LENGTH, POSITIVE_WORDS

SENTIMENT_POSITIVE = "positive"
SENTIMENT_NEUTRAL = "neutral"

APPROVED_REASON = "Content is appropriate"


@dataclass(frozen=True)
class ModerationResult:
    approved: bool
    reason: str
    confidence: int
    sentiment: str = SENTIMENT_NEUTRAL


class ContentFilter:
    """
    Classifies review text as approved or pending.

    The word lists are fixed at construction; `classify` has no side effects,
    so a single instance can be shared between requests.
    """

    def __init__(self, banned_words: Iterable[str] = BANNED_WORDS,
                 positive_words: Iterable[str] = POSITIVE_WORDS,
                 min_length: int = MIN_REVIEW_LENGTH,
                 max_length: int = MAX_REVIEW_LENGTH):
        self.banned_words = tuple(w.lower() for w in banned_words)
        self.positive_words = tuple(w.lower() for w in positive_words)
        self.min_length = min_length
        self.max_length = max_length

    @staticmethod
    def _count_matches(lowered: str, words: tuple) -> int:
        # each list entry counts once, however often it occurs
        return sum(1 for word in words if word in lowered)

    def classify(self, text: Optional[str]) -> ModerationResult:
        text = text or ""
        lowered = text.lower()
        banned = self._count_matches(lowered, self.banned_words)
        positive = self._count_matches(lowered, self.positive_words)

        if len(text) < self.min_length:
            return ModerationResult(
                False, f"Review too short - minimum {self.min_length} characters required", 100)

        if len(text) > self.max_length:
            return ModerationResult(
                False, f"Review too long - maximum {self.max_length} characters allowed", 100)

        if banned > 2:
            return ModerationResult(False, "Inappropriate language or spam content detected", 95)

        if banned > 0 and positive == 0:
            return ModerationResult(False, "Potentially inappropriate content detected", 75)

        # uniqueness is case-sensitive: "Vote vote" is two distinct words
        words = text.split()
        if len(words) > 5 and len(set(words)) / len(words) < 0.5:
            return ModerationResult(False, "Repetitive content appears to be spam", 80)

        sentiment = SENTIMENT_POSITIVE if positive > banned else SENTIMENT_NEUTRAL
        return ModerationResult(True, APPROVED_REASON, 90, sentiment)


default_filter = ContentFilter()


def classify(text: Optional[str]) -> ModerationResult:
    return default_filter.classify(text)
