"""
Admit Card Endpoints
Roster and selection for an exam's admit cards; generation is a stub
"""

from fastapi import APIRouter, Depends
from typing import List
from school_portal.models.exam import Exam
from school_portal.models.pages import AdmitCardPage, AdmitCardRequest, AdmitCardResponse, AdmitCardRow
from school_portal.models.student import Student
from school_portal.models.ui import Alert, EmptyState, SummaryCard
from school_portal.core.admit_cards import AdmitCardSelection, download_notice
from school_portal.core.config import get_settings
from school_portal.core.dependencies import get_exam_service, get_student_service
from school_portal.core.page_scope import PageScope
from school_portal.core.roster import roster_for_exam
from school_portal.services.exam_service import ExamService
from school_portal.services.student_service import StudentService

router = APIRouter()


async def _load(exam_id: str, exam_service: ExamService, student_service: StudentService):
    async with PageScope("admit-cards") as page:
        exam, students = await page.gather(
            exam_service.get_by_id(exam_id),
            student_service.get_all(),
        )
    return exam, roster_for_exam(students, exam)


def _page(exam: Exam, roster: List[Student]) -> AdmitCardPage:
    stats = AdmitCardSelection(roster).stats()
    return AdmitCardPage(
        exam_id=exam.id,
        exam_name=exam.name,
        class_name=exam.class_name,
        section=exam.section,
        students=[
            AdmitCardRow(
                student_id=student.id,
                student_name=student.full_name or "",
                roll_number=student.roll_number,
                admission_number=student.admission_number,
            )
            for student in roster
        ],
        cards=[
            SummaryCard(title="Total Students", value=stats["total"]),
            SummaryCard(title="Generated", value=stats["generated"]),
            SummaryCard(title="Pending", value=stats["pending"]),
        ],
        empty=None if roster else EmptyState(message="No students found for this exam"),
    )


@router.get("/{exam_id}", response_model=AdmitCardPage)
async def get_admit_cards(
    exam_id: str,
    exam_service: ExamService = Depends(get_exam_service),
    student_service: StudentService = Depends(get_student_service)
):
    exam, roster = await _load(exam_id, exam_service, student_service)
    return _page(exam, roster)


@router.post("/{exam_id}/generate", response_model=AdmitCardResponse)
async def generate_admit_cards(
    exam_id: str,
    request: AdmitCardRequest,
    exam_service: ExamService = Depends(get_exam_service),
    student_service: StudentService = Depends(get_student_service)
):
    """Generate admit cards for the selected students"""
    _, roster = await _load(exam_id, exam_service, student_service)
    selection = AdmitCardSelection(roster)
    for student_id in request.student_ids:
        selection.select(student_id)
    count = len(selection)
    alert = await selection.generate(delay_seconds=get_settings().ADMIT_CARD_SIMULATED_DELAY_SECONDS)
    return AdmitCardResponse(generated=count, alert=alert)


@router.post("/{exam_id}/download", response_model=Alert)
async def download_admit_cards(exam_id: str):
    return download_notice()
