"""API routes for assignment prioritization."""

from fastapi import APIRouter

from studyhub.api.schemas import (
    AssignmentImpactResponse,
    CourseContextModel,
    GradeChangeRangeModel,
    ImpactBatchRequest,
    ImpactRequest,
    ImpactResponse,
)
from studyhub.errors import InvalidAssignmentError
from studyhub.planner.impact import (
    Assignment,
    AssignmentStatus,
    CourseGradeContext,
    ImpactResult,
    calculate_impact,
    calculate_impacts_for_assignments,
)

router = APIRouter(prefix="/api/planner", tags=["planner"])


def _context(model: CourseContextModel) -> CourseGradeContext:
    return CourseGradeContext(
        current_grade=model.current_grade,
        total_points=model.total_points,
        earned_points=model.earned_points,
        completed_weight=model.completed_weight,
    )


def _impact_response(impact: ImpactResult) -> ImpactResponse:
    return ImpactResponse(
        impact_score=impact.impact_score,
        priority=impact.priority.value,
        grade_change_range=GradeChangeRangeModel(
            min=impact.grade_change_range.min,
            max=impact.grade_change_range.max,
        ),
        explanation=impact.explanation,
        target_score_for=impact.target_score_for,
    )


@router.post("/impact", response_model=ImpactResponse)
async def impact(request: ImpactRequest) -> ImpactResponse:
    """Score a single assignment against the course grade."""
    result = calculate_impact(request.points_possible, _context(request.context))
    return _impact_response(result)


@router.post("/impacts", response_model=list[AssignmentImpactResponse])
async def impacts(request: ImpactBatchRequest) -> list[AssignmentImpactResponse]:
    """Score and rank several assignments, most important first."""
    assignments = []
    for item in request.assignments:
        try:
            status = AssignmentStatus(item.status)
        except ValueError:
            raise InvalidAssignmentError(f"Unknown assignment status '{item.status}'") from None
        assignments.append(
            Assignment(
                id=item.id,
                name=item.name,
                points_possible=item.points_possible,
                due_at=item.due_at,
                status=status,
            )
        )

    ranked = calculate_impacts_for_assignments(assignments, _context(request.context))
    return [
        AssignmentImpactResponse(
            assignment_id=entry.assignment_id,
            assignment_name=entry.assignment_name,
            due_at=entry.due_at,
            status=entry.status.value,
            impact=_impact_response(entry.impact),
        )
        for entry in ranked
    ]
