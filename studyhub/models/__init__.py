"""SQLAlchemy ORM models for the StudyHub database."""

from studyhub.models.base import Base
from studyhub.models.flashcard import Flashcard
from studyhub.models.review_log import ReviewLog

__all__ = ["Base", "Flashcard", "ReviewLog"]
