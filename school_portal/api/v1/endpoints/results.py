"""
Exam Results Endpoints
Fetched results with client-side search and summary cards
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from school_portal.models.exam import ExamResult
from school_portal.models.pages import ResultRow, ResultsPage
from school_portal.models.ui import EmptyState, SummaryCard
from school_portal.core.dependencies import get_exam_service
from school_portal.core.grading_utils import band_badge, classify, grade_badge
from school_portal.core.page_scope import PageScope
from school_portal.core.result_summary import filter_results, summarize_results
from school_portal.core.logging_config import get_logger
from school_portal.services.exam_service import ExamService

logger = get_logger(__name__)
router = APIRouter()


@router.get("/{exam_id}", response_model=ResultsPage)
async def list_results(
    exam_id: str,
    search: Optional[str] = Query(None, description="Matches student name or roll number"),
    exam_service: ExamService = Depends(get_exam_service)
):
    """
    Results for one exam.

    Summary cards always describe every fetched result; the search only
    narrows the rows.
    """
    async with PageScope("exam-results") as page:
        results = await page.run(exam_service.get_exam_results(exam_id))

    summary = summarize_results(results)
    visible = filter_results(results, search)
    rows = [
        ResultRow(
            result=result,
            percentage_badge=band_badge(result.percentage),
            grade_badge=grade_badge(result.grade),
            band=classify(result.percentage).value,
        )
        for result in visible
    ]
    cards = [
        SummaryCard(title="Total Students", value=summary.total),
        SummaryCard(title="Passed", value=summary.passed),
        SummaryCard(title="Failed", value=summary.failed),
        SummaryCard(title="Average", value=f"{summary.average_percentage:.2f}%"),
        SummaryCard(title="Pass Rate", value=f"{summary.pass_rate:.1f}%"),
    ]

    empty = None
    if not results:
        empty = EmptyState(message="No results found for this exam")
    elif not rows:
        empty = EmptyState(message="No students match your search")

    logger.debug(f"Results page for exam {exam_id}: showing {len(rows)} of {len(results)}")
    return ResultsPage(
        exam_id=exam_id,
        search=search,
        rows=rows,
        showing=len(rows),
        total=len(results),
        cards=cards,
        empty=empty,
    )


@router.get("/{exam_id}/students/{student_id}", response_model=ExamResult)
async def get_student_result(
    exam_id: str,
    student_id: str,
    exam_service: ExamService = Depends(get_exam_service)
):
    """One student's result, as shown on the student and parent dashboards"""
    return await exam_service.get_student_result(exam_id, student_id)
