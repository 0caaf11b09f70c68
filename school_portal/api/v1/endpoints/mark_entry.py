"""
Mark Entry Endpoints
Build the mark sheet for an exam subject and submit it in one batch
"""

from fastapi import APIRouter, Depends, Query
from school_portal.models.pages import MarkSheet, MarkSheetRow, MarkSheetSubmission
from school_portal.models.ui import EmptyState
from school_portal.core.config import get_settings
from school_portal.core.dependencies import get_exam_service, get_student_service
from school_portal.core.grading_utils import mark_status_badge
from school_portal.core.mark_entry import MarkEntrySession
from school_portal.core.page_scope import PageScope
from school_portal.core.logging_config import get_logger
from school_portal.services.exam_service import ExamService
from school_portal.services.student_service import StudentService

logger = get_logger(__name__)
router = APIRouter()


async def _open_sheet(
    exam_id: str,
    subject_code: str,
    exam_service: ExamService,
    student_service: StudentService,
) -> MarkEntrySession:
    session = MarkEntrySession(banner_seconds=get_settings().MARK_ENTRY_BANNER_SECONDS)
    async with PageScope("mark-entry") as page:
        exam, students = await page.gather(
            exam_service.get_by_id(exam_id),
            student_service.get_all(),
        )
    session.select_exam(exam)
    session.select_subject(subject_code)
    session.load_roster(students)
    return session


def _render(session: MarkEntrySession) -> MarkSheet:
    rows = []
    for row in session.rows:
        status = session.row_status(row)
        rows.append(MarkSheetRow(
            student_id=row.student_id,
            student_name=row.student_name,
            roll_number=row.roll_number,
            marks_obtained=row.marks_obtained,
            is_absent=row.is_absent,
            editable=row.editable,
            status=status.value,
            status_badge=mark_status_badge(status),
        ))
    exam = session.exam
    empty = None
    if not rows:
        empty = EmptyState(message=f"No students found in {exam.class_name} {exam.section}")
    return MarkSheet(
        exam_id=exam.id,
        exam_name=exam.name,
        class_name=exam.class_name,
        section=exam.section,
        subject=session.subject,
        rows=rows,
        state=session.state.value,
        alert=session.alert,
        empty=empty,
    )


@router.get("/sheet", response_model=MarkSheet)
async def get_mark_sheet(
    exam_id: str = Query(..., min_length=1),
    subject_code: str = Query(..., min_length=1),
    exam_service: ExamService = Depends(get_exam_service),
    student_service: StudentService = Depends(get_student_service)
):
    """Empty mark sheet: one row per student of the exam's class and section"""
    session = await _open_sheet(exam_id, subject_code, exam_service, student_service)
    return _render(session)


@router.post("/submit", response_model=MarkSheet)
async def submit_marks(
    submission: MarkSheetSubmission,
    exam_service: ExamService = Depends(get_exam_service),
    student_service: StudentService = Depends(get_student_service)
):
    """Submit marks for every student on the sheet in a single request"""
    session = await _open_sheet(submission.exam_id, submission.subject_code, exam_service, student_service)
    session.apply_entries(submission.marks)
    await session.submit(exam_service)
    logger.info(
        f"Marks saved: exam={submission.exam_id}, subject={submission.subject_code}, "
        f"students={len(session.rows)}"
    )
    return _render(session)
