"""
Progress Rule Unit Tests

Tests for the pure percentage and completion rule.
"""

import pytest

from app.models.enums import EnrollmentStatus
from app.services.progress_rules import calculate_progress, evaluate_progress


class TestCalculateProgress:
    """Tests for calculate_progress."""

    @pytest.mark.parametrize(
        "completed,total,expected",
        [
            (0, 4, 0),
            (3, 4, 75),
            (4, 4, 100),
            (1, 3, 33),
            (2, 3, 67),
        ],
    )
    def test_percentage(self, completed, total, expected):
        assert calculate_progress(completed, total) == expected

    def test_course_without_lessons_is_zero(self):
        assert calculate_progress(0, 0) == 0
        assert calculate_progress(3, 0) == 0

    def test_half_rounds_up(self):
        """1/8 = 12.5% and 5/8 = 62.5% round up, not to even."""
        assert calculate_progress(1, 8) == 13
        assert calculate_progress(5, 8) == 63

    def test_never_exceeds_100(self):
        assert calculate_progress(5, 4) == 100


class TestEvaluateProgress:
    """Tests for evaluate_progress."""

    def test_partial_progress_does_not_complete(self):
        evaluation = evaluate_progress(3, 4, EnrollmentStatus.ACTIVE)

        assert evaluation.progress == 75
        assert evaluation.completes is False
        assert evaluation.new_status is None

    def test_full_progress_completes_active_enrollment(self):
        evaluation = evaluate_progress(4, 4, EnrollmentStatus.ACTIVE)

        assert evaluation.progress == 100
        assert evaluation.completes is True
        assert evaluation.new_status == EnrollmentStatus.COMPLETED

    def test_completed_enrollment_never_completes_again(self):
        evaluation = evaluate_progress(4, 4, EnrollmentStatus.COMPLETED)

        assert evaluation.progress == 100
        assert evaluation.completes is False

    def test_empty_course_never_completes(self):
        evaluation = evaluate_progress(0, 0, EnrollmentStatus.ACTIVE)

        assert evaluation.progress == 0
        assert evaluation.completes is False
