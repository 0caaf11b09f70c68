"""Performance bands and status badges shared by the exam pages."""
from enum import Enum
from typing import Optional

from school_portal.models.ui import Badge


class PerformanceBand(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    POOR = "poor"


class MarkStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    ABSENT = "absent"
    PENDING = "pending"


GOOD_PERCENTAGE = 75.0
WARNING_PERCENTAGE = 60.0

GOOD_PASS_RATE = 80.0
WARNING_PASS_RATE = 60.0

BAND_VARIANTS = {
    PerformanceBand.GOOD: "success",
    PerformanceBand.WARNING: "warning",
    PerformanceBand.POOR: "danger",
}

GRADE_COLORS = {
    "A+": "green-600",
    "A": "green-500",
    "B+": "blue-500",
    "B": "blue-400",
    "C": "yellow-500",
    "D": "orange-500",
    "F": "red-500",
}

EXAM_TYPE_COLORS = {
    "midterm": "blue-500",
    "final": "purple-500",
    "unit_test": "green-500",
    "quarterly": "yellow-500",
    "annual": "red-500",
}


def classify(percentage: float) -> PerformanceBand:
    """
    Band a percentage for display.

    - good: 75 and above
    - warning: 60 up to 75
    - poor: below 60
    """
    if percentage >= GOOD_PERCENTAGE:
        return PerformanceBand.GOOD
    if percentage >= WARNING_PERCENTAGE:
        return PerformanceBand.WARNING
    return PerformanceBand.POOR


def classify_pass_rate(pass_rate: float) -> PerformanceBand:
    """Band a subject's pass rate (80 and 60 are the cut-offs)."""
    if pass_rate >= GOOD_PASS_RATE:
        return PerformanceBand.GOOD
    if pass_rate >= WARNING_PASS_RATE:
        return PerformanceBand.WARNING
    return PerformanceBand.POOR


def pass_rate_verdict(pass_rate: float) -> str:
    band = classify(pass_rate)
    if band is PerformanceBand.GOOD:
        return "Excellent"
    if band is PerformanceBand.WARNING:
        return "Good"
    return "Needs Improvement"


def mark_status(marks_obtained: Optional[float], passing_marks: float, is_absent: bool = False) -> MarkStatus:
    """
    Status of a single mark against the subject's passing marks.

    The school API owns result status; this is only used while marks are
    being entered, before any result exists.
    """
    if is_absent:
        return MarkStatus.ABSENT
    if marks_obtained is None:
        return MarkStatus.PENDING
    if marks_obtained >= passing_marks:
        return MarkStatus.PASS
    return MarkStatus.FAIL


def band_badge(percentage: float) -> Badge:
    band = classify(percentage)
    return Badge(label=f"{percentage:.2f}%", variant=BAND_VARIANTS[band])


def mark_status_badge(status: MarkStatus) -> Badge:
    variants = {
        MarkStatus.PASS: "success",
        MarkStatus.FAIL: "danger",
        MarkStatus.ABSENT: "default",
        MarkStatus.PENDING: "warning",
    }
    return Badge(label=status.value.capitalize(), variant=variants[status])


def grade_badge(grade: Optional[str]) -> Badge:
    label = grade or "-"
    return Badge(label=label, color=GRADE_COLORS.get(label, "gray-500"))


def exam_type_badge(exam_type: str) -> Badge:
    return Badge(
        label=exam_type.replace("_", " ").upper(),
        color=EXAM_TYPE_COLORS.get(exam_type, "gray-500"),
    )
