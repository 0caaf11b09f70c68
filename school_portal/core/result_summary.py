"""Client-side search and summary statistics over fetched exam results."""
from typing import Iterable, List, Optional

from pydantic import BaseModel

from school_portal.models.exam import ExamResult, ResultStatus


class ResultSummary(BaseModel):
    total: int = 0
    passed: int = 0
    failed: int = 0
    absent: int = 0
    average_percentage: float = 0.0
    pass_rate: float = 0.0


def matches_search(result: ExamResult, search: str) -> bool:
    needle = search.lower()
    name = (result.student_name or "").lower()
    roll_number = (result.student_roll_number or "").lower()
    return needle in name or needle in roll_number


def filter_results(results: Iterable[ExamResult], search: Optional[str] = None) -> List[ExamResult]:
    """Case-insensitive substring match on student name or roll number."""
    if not search:
        return list(results)
    return [result for result in results if matches_search(result, search)]


def summarize_results(results: Iterable[ExamResult]) -> ResultSummary:
    """
    Single pass over the results.

    average_percentage is sum(percentage) / count and pass_rate is the share
    of "pass" results, as a percentage. Empty input gives all zeros.
    """
    total = passed = failed = absent = 0
    percentage_sum = 0.0
    for result in results:
        total += 1
        percentage_sum += result.percentage
        if result.result_status is ResultStatus.PASS:
            passed += 1
        elif result.result_status is ResultStatus.FAIL:
            failed += 1
        else:
            absent += 1

    if total == 0:
        return ResultSummary()

    return ResultSummary(
        total=total,
        passed=passed,
        failed=failed,
        absent=absent,
        average_percentage=percentage_sum / total,
        pass_rate=passed / total * 100,
    )
