"""
Progress Rules

Pure functions for enrollment progress. No database access here; both the
lesson-completion path and the admin recalculation batch call these.
"""

from dataclasses import dataclass
from typing import Optional

from app.models.enums import EnrollmentStatus


COMPLETION_THRESHOLD = 100


@dataclass(frozen=True)
class ProgressEvaluation:
    """
    Outcome of evaluating an enrollment's progress.

    Attributes:
        progress: Completion percentage (0-100).
        completes: True when this evaluation moves the enrollment to COMPLETED.
    """
    progress: int
    completes: bool

    @property
    def new_status(self) -> Optional[EnrollmentStatus]:
        """The status to write, or None to leave it unchanged."""
        return EnrollmentStatus.COMPLETED if self.completes else None


def calculate_progress(completed: int, total: int) -> int:
    """
    Percentage of lessons completed, rounded half-up.

    Integer arithmetic keeps x.5 cases exact (1 of 8 lessons -> 13, not 12).

    Args:
        completed: Number of completed lessons.
        total: Number of lessons in the course.

    Returns:
        Completion percentage, 0 when the course has no lessons.
    """
    if total <= 0:
        return 0
    completed = max(0, min(completed, total))
    return (completed * 200 + total) // (2 * total)


def evaluate_progress(
    completed: int,
    total: int,
    current_status: EnrollmentStatus,
) -> ProgressEvaluation:
    """
    Compute progress and whether the enrollment should transition to COMPLETED.

    The transition fires only once: an enrollment that is already COMPLETED
    never completes again.
    """
    progress = calculate_progress(completed, total)
    completes = (
        progress >= COMPLETION_THRESHOLD
        and current_status != EnrollmentStatus.COMPLETED
    )
    return ProgressEvaluation(progress=progress, completes=completes)
