"""
Exam Directory Endpoints
List, create, edit and delete exams, plus the exam-level actions of the school API
"""

from fastapi import APIRouter, status, Depends, Query
from typing import Optional, Dict, Any
from datetime import date
from school_portal.models.exam import (
    Exam, ExamCreate, ExamUpdate, ExamFilters, ExamType, ReportCardData, ScheduleStatus
)
from school_portal.models.pages import (
    DeleteExamResponse, ExamAnalyticsPage, ExamDirectoryPage, ExamListItem, SubjectStatsRow
)
from school_portal.models.ui import Alert, Badge, EmptyState, SummaryCard
from school_portal.core.dependencies import get_exam_service
from school_portal.core.exam_directory import (
    DELETE_WARNING, delete_exam as delete_exam_confirmed, directory_stats, exam_schedule_status
)
from school_portal.core.grading_utils import (
    BAND_VARIANTS, classify_pass_rate, exam_type_badge, pass_rate_verdict
)
from school_portal.core.page_scope import PageScope
from school_portal.core.logging_config import get_logger
from school_portal.core.exceptions import ConfirmationRequiredError
from school_portal.services.exam_service import ExamService

logger = get_logger(__name__)
router = APIRouter()

STATUS_BADGES = {
    ScheduleStatus.UPCOMING: Badge(label="Upcoming", variant="info"),
    ScheduleStatus.ONGOING: Badge(label="Ongoing", variant="success"),
    ScheduleStatus.COMPLETED: Badge(label="Completed", variant="default"),
}


@router.get("", response_model=ExamDirectoryPage)
async def list_exams(
    class_name: Optional[str] = Query(None),
    section: Optional[str] = Query(None),
    exam_type: Optional[ExamType] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    exam_service: ExamService = Depends(get_exam_service)
):
    """Exam directory with schedule badges and summary cards"""
    filters = ExamFilters(
        class_name=class_name,
        section=section,
        exam_type=exam_type,
        start_date=start_date,
        end_date=end_date,
    )
    async with PageScope("exam-directory") as page:
        exams = await page.run(exam_service.get_all(filters))

    today = date.today()
    items = []
    for exam in exams:
        schedule = exam_schedule_status(exam, today)
        items.append(ExamListItem(
            exam=exam,
            schedule_status=schedule,
            status_badge=STATUS_BADGES[schedule],
            type_badge=exam_type_badge(exam.exam_type.value),
        ))

    stats = directory_stats(exams, today)
    cards = [
        SummaryCard(title="Total Exams", value=stats["total"]),
        SummaryCard(title="Upcoming", value=stats["upcoming"]),
        SummaryCard(title="Ongoing", value=stats["ongoing"]),
        SummaryCard(title="Completed", value=stats["completed"]),
    ]
    empty = EmptyState(message="No exams found") if not exams else None
    return ExamDirectoryPage(exams=items, cards=cards, empty=empty)


@router.post("", response_model=Exam, status_code=status.HTTP_201_CREATED)
async def create_exam(
    exam_data: ExamCreate,
    exam_service: ExamService = Depends(get_exam_service)
):
    """Create a new exam with its subjects"""
    exam = await exam_service.create(exam_data)
    logger.info(f"Exam created successfully: {exam.id}")
    return exam


@router.get("/{exam_id}", response_model=Exam)
async def get_exam(
    exam_id: str,
    exam_service: ExamService = Depends(get_exam_service)
):
    """Get exam by ID"""
    return await exam_service.get_by_id(exam_id)


@router.put("/{exam_id}", response_model=Exam)
async def update_exam(
    exam_id: str,
    exam_data: ExamUpdate,
    exam_service: ExamService = Depends(get_exam_service)
):
    """Update an exam; subjects are edited through their parent exam"""
    exam = await exam_service.update(exam_id, exam_data)
    logger.info(f"Exam updated successfully: {exam_id}")
    return exam


@router.delete("/{exam_id}", response_model=DeleteExamResponse)
async def delete_exam(
    exam_id: str,
    confirm: bool = Query(False, description="Must be true; deleting also removes the exam's results"),
    exam_service: ExamService = Depends(get_exam_service)
):
    """Delete an exam after explicit confirmation"""
    deleted = await delete_exam_confirmed(exam_service, exam_id, confirm)
    if not deleted:
        raise ConfirmationRequiredError(
            DELETE_WARNING,
            error_code="DELETE_NOT_CONFIRMED",
            details={"exam_id": exam_id},
        )
    logger.info(f"Exam deleted: {exam_id}")
    return DeleteExamResponse(deleted=True, alert=Alert(type="success", message="Exam deleted successfully"))


@router.get("/{exam_id}/analytics", response_model=ExamAnalyticsPage)
async def get_exam_analytics(
    exam_id: str,
    exam_service: ExamService = Depends(get_exam_service)
):
    """Exam analytics with pass-rate bands per subject"""
    analytics = await exam_service.get_analytics(exam_id)
    subjects = [
        SubjectStatsRow(
            stats=subject,
            pass_rate_badge=Badge(
                label=f"{subject.pass_percentage:.1f}% Pass Rate",
                variant=BAND_VARIANTS[classify_pass_rate(subject.pass_percentage)],
            ),
        )
        for subject in analytics.subject_wise_stats
    ]
    cards = [
        SummaryCard(title="Total Students", value=analytics.total_students),
        SummaryCard(title="Appeared", value=analytics.appeared),
        SummaryCard(title="Pass Percentage", value=round(analytics.pass_percentage, 1)),
        SummaryCard(title="Average Marks", value=round(analytics.average_marks, 2)),
        SummaryCard(
            title="Marks Range",
            value=f"{analytics.lowest_marks:.1f} - {analytics.highest_marks:.1f}",
        ),
    ]
    return ExamAnalyticsPage(
        analytics=analytics,
        verdict=pass_rate_verdict(analytics.pass_percentage),
        subjects=subjects,
        cards=cards,
    )


@router.post("/{exam_id}/publish-results", response_model=Alert)
async def publish_results(
    exam_id: str,
    exam_service: ExamService = Depends(get_exam_service)
):
    """Make results visible to students and parents"""
    await exam_service.publish_results(exam_id)
    return Alert(type="success", message="Results published successfully")


@router.post("/{exam_id}/calculate-grades", response_model=Alert)
async def calculate_grades(
    exam_id: str,
    exam_service: ExamService = Depends(get_exam_service)
):
    """Ask the school API to (re)compute grades for the exam"""
    await exam_service.calculate_grades(exam_id)
    return Alert(type="success", message="Grades calculated successfully")


@router.get("/{exam_id}/grade-distribution", response_model=Dict[str, Any])
async def get_grade_distribution(
    exam_id: str,
    exam_service: ExamService = Depends(get_exam_service)
):
    return await exam_service.get_grade_distribution(exam_id) or {}


@router.get("/{exam_id}/students/{student_id}/report-card", response_model=ReportCardData)
async def get_report_card(
    exam_id: str,
    student_id: str,
    exam_service: ExamService = Depends(get_exam_service)
):
    return await exam_service.generate_report_card(exam_id, student_id)


@router.get("/{exam_id}/subjects/{subject_code}/marks")
async def get_subject_marks(
    exam_id: str,
    subject_code: str,
    exam_service: ExamService = Depends(get_exam_service)
):
    """Marks already stored for one subject of the exam"""
    return await exam_service.get_subject_marks(exam_id, subject_code)
