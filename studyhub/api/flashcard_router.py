"""API routes for flashcards and their review schedule."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.api.schemas import (
    FlashcardCreateRequest,
    FlashcardResponse,
    ReviewRequest,
    ReviewResponse,
)
from studyhub.database import get_session
from studyhub.srs.service import (
    FlashcardNotFoundError,
    create_flashcard,
    list_due_flashcards,
    review_flashcard,
)
from studyhub.srs.sm2 import quality_from_answer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/flashcards", tags=["flashcards"])


@router.post("", response_model=FlashcardResponse, status_code=201)
async def flashcard_create(
    request: FlashcardCreateRequest,
    db: AsyncSession = Depends(get_session),
) -> FlashcardResponse:
    """Create a new flashcard, due immediately."""
    card = await create_flashcard(db, request.front, request.back, deck=request.deck)
    return FlashcardResponse.model_validate(card)


@router.get("/due", response_model=list[FlashcardResponse])
async def flashcards_due(
    deck: str | None = None,
    limit: int | None = None,
    db: AsyncSession = Depends(get_session),
) -> list[FlashcardResponse]:
    """List due flashcards, never-reviewed first, then most overdue."""
    cards = await list_due_flashcards(db, limit=limit, deck=deck)
    return [FlashcardResponse.model_validate(card) for card in cards]


@router.post("/{card_id}/review", response_model=ReviewResponse)
async def flashcard_review(
    card_id: int,
    request: ReviewRequest,
    db: AsyncSession = Depends(get_session),
) -> ReviewResponse:
    """Record a review and return the next schedule."""
    if request.quality is not None:
        quality = request.quality
    else:
        quality = quality_from_answer(bool(request.correct), request.confidence or 0)

    try:
        outcome = await review_flashcard(db, card_id, quality)
    except FlashcardNotFoundError:
        raise HTTPException(status_code=404, detail="Flashcard not found") from None

    return ReviewResponse(
        card_id=outcome.card.id,
        quality=outcome.quality,
        interval=outcome.schedule.interval,
        ease_factor=outcome.schedule.ease_factor,
        review_count=outcome.schedule.review_count,
        next_review=outcome.schedule.next_review,
    )
