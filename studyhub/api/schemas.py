"""Pydantic schemas for API request/response models."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from studyhub.config import as_naive_utc

# --- Analytics ---


class SampleRequest(BaseModel):
    """A numeric sample to summarize."""

    values: list[float]


class DescriptiveStatsResponse(BaseModel):
    count: int
    mean: float
    median: float
    mode: float
    std_dev: float
    variance: float
    min: float
    max: float
    range: float
    skewness: float
    kurtosis: float


class PairedSampleRequest(BaseModel):
    """Two index-aligned series."""

    x: list[float]
    y: list[float]


class CorrelationResponse(BaseModel):
    r: float
    n: int
    t_statistic: float | None
    p_value: float | None
    significance: str
    strength: str
    direction: str
    description: str


class RegressionResponse(BaseModel):
    slope: float
    intercept: float
    r_squared: float
    predictions: list[float]


class TrendRequest(BaseModel):
    values: list[float]
    window: int = 3


class TrendResponse(BaseModel):
    direction: str
    slope: float
    strength: str
    moving_average: list[float]


# --- Planner ---


class CourseContextModel(BaseModel):
    """A course's current grade state."""

    current_grade: float
    total_points: float = Field(ge=0)
    earned_points: float
    completed_weight: float = Field(default=0.0, ge=0, le=1)


class ImpactRequest(BaseModel):
    points_possible: float
    context: CourseContextModel


class GradeChangeRangeModel(BaseModel):
    min: float
    max: float


class ImpactResponse(BaseModel):
    impact_score: float
    priority: str  # low, medium, high
    grade_change_range: GradeChangeRangeModel
    explanation: str
    target_score_for: dict[str, float | None]


class AssignmentModel(BaseModel):
    id: str
    name: str
    points_possible: float
    due_at: datetime | None = None
    status: str = "pending"  # pending, completed, overdue

    @field_validator("due_at")
    @classmethod
    def due_at_as_utc(cls, value: datetime | None) -> datetime | None:
        return as_naive_utc(value) if value is not None else None


class ImpactBatchRequest(BaseModel):
    assignments: list[AssignmentModel]
    context: CourseContextModel


class AssignmentImpactResponse(BaseModel):
    assignment_id: str
    assignment_name: str
    due_at: datetime | None
    status: str
    impact: ImpactResponse


# --- Flashcards ---


class FlashcardCreateRequest(BaseModel):
    front: str = Field(min_length=1)
    back: str = Field(min_length=1)
    deck: str = "default"


class FlashcardResponse(BaseModel):
    """A flashcard with its scheduling state."""

    id: int
    deck: str
    front: str
    back: str
    interval: int
    ease_factor: float
    review_count: int
    next_review: datetime | None
    last_reviewed: datetime | None

    model_config = {"from_attributes": True}


class ReviewRequest(BaseModel):
    """Either an explicit quality or an answer with a confidence rating."""

    quality: int | None = None  # 0-5
    correct: bool | None = None
    confidence: int | None = None  # 1-5, required when correct is true

    @model_validator(mode="after")
    def check_quality_or_answer(self) -> "ReviewRequest":
        if self.quality is None and self.correct is None:
            raise ValueError("Provide either quality or correct")
        return self


class ReviewResponse(BaseModel):
    """Response after reviewing a flashcard."""

    card_id: int
    quality: int
    interval: int
    ease_factor: float
    review_count: int
    next_review: datetime
