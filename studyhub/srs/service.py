"""Persistence glue between the SM-2 scheduler and the flashcard tables.

Loads a card, applies a review through the scheduler, writes the new state
back and records a review log entry.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.config import as_naive_utc, settings, utcnow
from studyhub.models.flashcard import Flashcard
from studyhub.models.review_log import ReviewLog
from studyhub.srs.sm2 import ReviewSchedule, next_review

logger = logging.getLogger(__name__)


class FlashcardNotFoundError(LookupError):
    """No flashcard exists with the requested ID."""


@dataclass
class ReviewOutcome:
    card: Flashcard
    schedule: ReviewSchedule
    quality: int


async def create_flashcard(
    session: AsyncSession,
    front: str,
    back: str,
    deck: str = "default",
) -> Flashcard:
    """Create a never-reviewed card, due immediately."""
    card = Flashcard(
        deck=deck,
        front=front,
        back=back,
        interval=0,
        ease_factor=settings.default_ease_factor,
        review_count=0,
        next_review=None,
        last_reviewed=None,
    )
    session.add(card)
    await session.commit()
    await session.refresh(card)
    logger.info("Created flashcard %d in deck '%s'", card.id, deck)
    return card


async def review_flashcard(
    session: AsyncSession,
    card_id: int,
    quality: int,
    now: datetime | None = None,
) -> ReviewOutcome:
    """Apply a review of the given quality and persist the new schedule.

    Raises:
        FlashcardNotFoundError: No card with ``card_id``.
        InvalidQualityError: ``quality`` is outside 0-5.
    """
    card = await session.get(Flashcard, card_id)
    if card is None:
        raise FlashcardNotFoundError(f"Flashcard {card_id} not found")

    before = card.review_state()
    schedule = next_review(quality, before, now=as_naive_utc(now or utcnow()))
    card.apply_schedule(schedule)

    session.add(
        ReviewLog(
            card_id=card.id,
            quality=quality,
            interval_before=before.interval,
            interval_after=schedule.interval,
            ease_before=before.ease_factor,
            ease_after=schedule.ease_factor,
            reviewed_at=schedule.reviewed_at,
        )
    )
    await session.commit()

    logger.info(
        "Reviewed flashcard %d with quality %d: next in %d days (EF %.2f)",
        card.id,
        quality,
        schedule.interval,
        schedule.ease_factor,
    )
    return ReviewOutcome(card=card, schedule=schedule, quality=quality)


async def list_due_flashcards(
    session: AsyncSession,
    now: datetime | None = None,
    limit: int | None = None,
    deck: str | None = None,
) -> list[Flashcard]:
    """Fetch due cards, never-reviewed first, then the most overdue."""
    now = as_naive_utc(now or utcnow())
    limit = limit or settings.max_due_cards

    stmt = (
        select(Flashcard)
        .where(or_(Flashcard.next_review.is_(None), Flashcard.next_review <= now))
        .order_by(Flashcard.next_review.asc().nulls_first(), Flashcard.id.asc())
        .limit(limit)
    )
    if deck is not None:
        stmt = stmt.where(Flashcard.deck == deck)

    result = await session.execute(stmt)
    cards = list(result.scalars().all())
    logger.debug("Found %d due flashcards", len(cards))
    return cards
