"""Error taxonomy shared by the statistics, planner and scheduler modules.

Every error carries a short ``kind`` used by the HTTP and CLI layers to
report what went wrong without inspecting class names.
"""


class StudyHubError(Exception):
    """Base class for all computation errors."""

    kind = "error"


class InvalidInputError(StudyHubError, ValueError):
    """Input has the wrong shape or an out-of-range value."""

    kind = "invalid_input"


class LengthMismatchError(InvalidInputError):
    """Two index-aligned series have different lengths."""


class InvalidAssignmentError(InvalidInputError):
    """An assignment cannot be scored (e.g. negative points possible)."""


class InvalidQualityError(InvalidInputError):
    """A recall quality is not an integer in 0..5."""


class InsufficientDataError(StudyHubError, ValueError):
    """The sample is too small for the requested statistic."""

    kind = "insufficient_data"


class EmptyInputError(InsufficientDataError):
    """The sample is empty."""


class DegenerateInputError(StudyHubError, ArithmeticError):
    """Well-shaped input whose result is mathematically undefined."""

    kind = "degenerate_input"
