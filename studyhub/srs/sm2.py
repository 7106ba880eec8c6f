"""SM-2 spaced repetition scheduler for flashcards.

Reference: https://super-memory.com/english/ol/sm2.htm

Key concepts:
- Quality (q): self-assessed recall from 0 (total failure) to 5 (perfect).
- Ease factor (EF): multiplier for interval growth, never below 1.3.
- Interval: days until the next review.

Every review is a pure transition from one ReviewState to the next; callers
persist the result.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol, TypeVar

from studyhub.config import as_naive_utc, utcnow
from studyhub.errors import InvalidInputError, InvalidQualityError

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3  # q < 3 is a failed recall

# Fixed intervals for the first two successful reviews (days)
FIRST_INTERVAL = 1
SECOND_INTERVAL = 6

# Confidence (1-5) on a correct answer -> recall quality
CONFIDENCE_TO_QUALITY = {
    1: 3,
    2: 3,
    3: 4,
    4: 5,
    5: 5,
}
INCORRECT_QUALITY = 0


@dataclass(frozen=True)
class ReviewState:
    """The scheduling state of a flashcard."""

    interval: int = 0  # Days until next review
    ease_factor: float = DEFAULT_EASE_FACTOR
    review_count: int = 0  # Reviews so far, failures included
    next_review: datetime | None = None  # None means never reviewed
    last_reviewed: datetime | None = None


@dataclass(frozen=True)
class ReviewSchedule:
    """The result of applying one review to a card."""

    interval: int
    ease_factor: float
    review_count: int
    next_review: datetime
    reviewed_at: datetime

    def to_state(self) -> ReviewState:
        return ReviewState(
            interval=self.interval,
            ease_factor=self.ease_factor,
            review_count=self.review_count,
            next_review=self.next_review,
            last_reviewed=self.reviewed_at,
        )


class Schedulable(Protocol):
    next_review: datetime | None


CardT = TypeVar("CardT", bound=Schedulable)


def update_ease_factor(ease_factor: float, quality: int) -> float:
    """EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at 1.3."""
    miss = MAX_QUALITY - quality
    return max(MIN_EASE_FACTOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def next_review(
    quality: int,
    state: ReviewState,
    now: datetime | None = None,
) -> ReviewSchedule:
    """Apply a review of the given quality to a card's state.

    Args:
        quality: Recall quality, an integer 0-5.
        state: Current card state.
        now: When the review happened (defaults to now).

    Returns:
        ReviewSchedule with the new interval, ease factor and due date.

    Raises:
        InvalidQualityError: ``quality`` is not an integer in 0-5.
    """
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQualityError(f"Quality must be an integer, got {quality!r}")
    if quality < MIN_QUALITY or quality > MAX_QUALITY:
        raise InvalidQualityError(f"Quality must be between 0 and 5, got {quality}")

    now = now or utcnow()

    # A failure still moves the ease factor
    ease_factor = update_ease_factor(state.ease_factor, quality)

    if quality < PASSING_QUALITY:
        interval = FIRST_INTERVAL
    elif state.review_count == 0:
        interval = FIRST_INTERVAL
    elif state.review_count == 1:
        interval = SECOND_INTERVAL
    else:
        interval = _round_half_up(state.interval * ease_factor)

    return ReviewSchedule(
        interval=interval,
        ease_factor=ease_factor,
        review_count=state.review_count + 1,
        next_review=now + timedelta(days=interval),
        reviewed_at=now,
    )


def quality_from_answer(correct: bool, confidence: int) -> int:
    """Map an answer and the learner's confidence (1-5) to a recall quality.

    Incorrect answers are always quality 0, whatever the stated confidence.
    """
    if not correct:
        return INCORRECT_QUALITY
    try:
        return CONFIDENCE_TO_QUALITY[confidence]
    except KeyError:
        raise InvalidInputError(f"Confidence must be between 1 and 5, got {confidence}") from None


def is_due(state: Schedulable, now: datetime | None = None) -> bool:
    """A card is due if it has never been reviewed or its review time has passed.

    Aware datetimes are compared in UTC.
    """
    if state.next_review is None:
        return True
    return as_naive_utc(now or utcnow()) >= as_naive_utc(state.next_review)


def due_cards(cards: Iterable[CardT], now: datetime | None = None) -> list[CardT]:
    """Return the due cards, oldest due first; never-reviewed cards lead."""
    now = now or utcnow()
    due = [card for card in cards if is_due(card, now)]
    due.sort(key=lambda card: as_naive_utc(card.next_review) if card.next_review else datetime.min)
    return due
