"""Flashcard model carrying SM-2 scheduling state."""

from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyhub.models.base import Base, TimestampMixin
from studyhub.srs.sm2 import DEFAULT_EASE_FACTOR, ReviewSchedule, ReviewState


class Flashcard(Base, TimestampMixin):
    """A study card and its review schedule."""

    __tablename__ = "flashcards"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    deck: Mapped[str] = mapped_column(String(100), nullable=False, default="default")
    front: Mapped[str] = mapped_column(Text, nullable=False)
    back: Mapped[str] = mapped_column(Text, nullable=False)
    interval: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ease_factor: Mapped[float] = mapped_column(Float, nullable=False, default=DEFAULT_EASE_FACTOR)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    next_review: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)
    last_reviewed: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    review_logs: Mapped[list["ReviewLog"]] = relationship(back_populates="card")  # type: ignore[name-defined] # noqa: F821

    def review_state(self) -> ReviewState:
        return ReviewState(
            interval=self.interval,
            ease_factor=self.ease_factor,
            review_count=self.review_count,
            next_review=self.next_review,
            last_reviewed=self.last_reviewed,
        )

    def apply_schedule(self, schedule: ReviewSchedule) -> None:
        self.interval = schedule.interval
        self.ease_factor = schedule.ease_factor
        self.review_count = schedule.review_count
        self.next_review = schedule.next_review
        self.last_reviewed = schedule.reviewed_at
