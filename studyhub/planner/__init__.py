"""Academic planning helpers."""

from studyhub.planner.impact import (
    Assignment,
    AssignmentImpact,
    CourseGradeContext,
    ImpactResult,
    Priority,
    calculate_impact,
    calculate_impacts_for_assignments,
)

__all__ = [
    "Assignment",
    "AssignmentImpact",
    "CourseGradeContext",
    "ImpactResult",
    "Priority",
    "calculate_impact",
    "calculate_impacts_for_assignments",
]
