"""Assignment impact calculator.

Estimates how much an upcoming assignment can move a course grade so the
planner can point students at high-impact work first.

The course's ``total_points`` already counts the assignment being scored:
only the numerator moves between earning nothing and earning full credit.

``earned_points <= total_points`` is the caller's responsibility and is not
checked here; inconsistent contexts produce grades above 100.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from studyhub.config import as_naive_utc
from studyhub.errors import InvalidAssignmentError

logger = logging.getLogger(__name__)

# Impact score boundaries (share of total course points)
HIGH_PRIORITY_THRESHOLD = 0.05
MEDIUM_PRIORITY_THRESHOLD = 0.02

# Minimum course percentage for each target letter grade
LETTER_GRADE_THRESHOLDS: dict[str, float] = {
    "A": 93.0,
    "B": 83.0,
    "C": 73.0,
}


class Priority(Enum):
    """How much attention an assignment deserves."""

    LOW = "low"  # <= 2% of the course
    MEDIUM = "medium"  # 2-5% of the course
    HIGH = "high"  # > 5% of the course


class AssignmentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class CourseGradeContext:
    """Snapshot of a course's grade state, built fresh by the caller."""

    current_grade: float  # Percentage, may exceed 100 with extra credit
    total_points: float
    earned_points: float
    completed_weight: float = 0.0  # Fraction of the course already graded, display only


@dataclass(frozen=True)
class GradeChangeRange:
    min: float  # Course grade with a zero on the assignment
    max: float  # Course grade with full credit


@dataclass(frozen=True)
class ImpactResult:
    """How a single assignment can affect the course grade."""

    impact_score: float  # 0-1 share of the course grade
    priority: Priority
    grade_change_range: GradeChangeRange
    explanation: str
    target_score_for: dict[str, float | None]  # Letter -> required percent, None if moot


@dataclass(frozen=True)
class Assignment:
    id: str
    name: str
    points_possible: float
    due_at: datetime | None = None
    status: AssignmentStatus = AssignmentStatus.PENDING


@dataclass(frozen=True)
class AssignmentImpact:
    assignment_id: str
    assignment_name: str
    due_at: datetime | None
    status: AssignmentStatus
    impact: ImpactResult


def priority_for(impact_score: float) -> Priority:
    if impact_score > HIGH_PRIORITY_THRESHOLD:
        return Priority.HIGH
    if impact_score > MEDIUM_PRIORITY_THRESHOLD:
        return Priority.MEDIUM
    return Priority.LOW


def calculate_impact(points_possible: float, context: CourseGradeContext) -> ImpactResult:
    """Calculate the impact of a single assignment on the course grade.

    Args:
        points_possible: The assignment's point value.
        context: The course's current grade state.

    Returns:
        ImpactResult with score, priority, grade range and target scores.

    Raises:
        InvalidAssignmentError: ``points_possible`` is negative.
    """
    if points_possible < 0:
        raise InvalidAssignmentError(f"points_possible must be >= 0, got {points_possible}")

    total = context.total_points
    earned = context.earned_points

    if total == 0:
        grade_range = GradeChangeRange(min=context.current_grade, max=context.current_grade)
        impact_score = 0.0
        weight = 0.0
    else:
        grade_range = GradeChangeRange(
            min=round(earned / total * 100, 2),
            max=round((earned + points_possible) / total * 100, 2),
        )
        impact_score = max(0.0, min(1.0, points_possible / total))
        weight = points_possible / total * 100

    priority = priority_for(impact_score)
    swing = abs(grade_range.max - grade_range.min)

    return ImpactResult(
        impact_score=impact_score,
        priority=priority,
        grade_change_range=grade_range,
        explanation=_explain(priority, weight, swing),
        target_score_for=_target_scores(points_possible, context),
    )


def _target_scores(points_possible: float, context: CourseGradeContext) -> dict[str, float | None]:
    """Score needed on this assignment, as a percent, for each letter grade."""
    targets: dict[str, float | None] = {}

    for letter, threshold in LETTER_GRADE_THRESHOLDS.items():
        if context.current_grade >= threshold:
            # Already there
            targets[letter] = None
            continue
        if points_possible == 0:
            # Nothing to earn here
            targets[letter] = None
            continue

        needed = threshold / 100 * context.total_points - context.earned_points
        required_percent = needed / points_possible * 100
        if required_percent > 100:
            targets[letter] = None
        else:
            targets[letter] = round(max(0.0, required_percent), 1)

    return targets


def _explain(priority: Priority, weight: float, swing: float) -> str:
    if priority is Priority.HIGH:
        return (
            f"High impact: This assignment is worth {weight:.1f}% of your grade "
            f"and could change it by up to {swing:.1f} percentage points."
        )
    if priority is Priority.MEDIUM:
        return (
            f"Medium impact: Worth {weight:.1f}% of your grade "
            f"with a potential {swing:.1f}pt change."
        )
    return (
        f"Low impact: Worth {weight:.1f}% of your grade, "
        f"a minimal effect on your final grade ({swing:.1f}pt max change)."
    )


def calculate_impacts_for_assignments(
    assignments: Iterable[Assignment],
    context: CourseGradeContext,
) -> list[AssignmentImpact]:
    """Calculate impact for several assignments, most important first.

    Ordered by impact score (high to low), then by due date (soonest first).
    Assignments without a due date come after dated ones of equal impact.
    Timezone-aware due dates are compared in UTC.
    """
    results = [
        AssignmentImpact(
            assignment_id=assignment.id,
            assignment_name=assignment.name,
            due_at=assignment.due_at,
            status=assignment.status,
            impact=calculate_impact(assignment.points_possible, context),
        )
        for assignment in assignments
    ]

    results.sort(
        key=lambda item: (
            -item.impact.impact_score,
            item.due_at is None,
            as_naive_utc(item.due_at) if item.due_at else datetime.min,
        )
    )

    logger.debug("Ranked %d assignments by impact", len(results))
    return results
