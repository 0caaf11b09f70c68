"""
Mark entry flow for one exam + subject.

The flow is linear: pick an exam, pick one of its subjects, load the class
roster, edit marks, submit the whole sheet in one request. A failed submit
keeps every edit so the same sheet can be sent again; a successful one keeps
them too, and sending again overwrites the stored marks.
"""
import math
import time
from enum import Enum
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel

from school_portal.core.exceptions import (
    ApiError,
    NotFoundError,
    ValidationError,
    alert_message,
)
from school_portal.core.grading_utils import MarkStatus, mark_status
from school_portal.core.logging_config import get_logger
from school_portal.core.roster import roster_for_exam
from school_portal.models.exam import Exam, ExamSubject, MarkEntryData, StudentMark
from school_portal.models.student import Student
from school_portal.models.ui import Alert
from school_portal.services.exam_service import ExamService
from school_portal.services.student_service import StudentService

logger = get_logger(__name__)

SUBMIT_SUCCESS_MESSAGE = "Marks submitted successfully!"
SUBMIT_FAILURE_MESSAGE = "Failed to submit marks. Please try again."
DEFAULT_BANNER_SECONDS = 3.0

MarkValue = Union[float, int, str, None]


class MarkEntryState(str, Enum):
    IDLE = "idle"
    EXAM_SELECTED = "exam_selected"
    SUBJECT_SELECTED = "subject_selected"
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class MarkRow(BaseModel):
    student_id: str
    student_name: str = ""
    roll_number: Optional[str] = None
    marks_obtained: Optional[float] = None
    is_absent: bool = False

    @property
    def editable(self) -> bool:
        return not self.is_absent


class MarkEntrySession:
    def __init__(self, banner_seconds: float = DEFAULT_BANNER_SECONDS):
        self.banner_seconds = banner_seconds
        self.state = MarkEntryState.IDLE
        self.exam: Optional[Exam] = None
        self.subject: Optional[ExamSubject] = None
        self.rows: List[MarkRow] = []
        self.alert: Optional[Alert] = None
        self._submitted_at: Optional[float] = None

    @property
    def subjects(self) -> List[ExamSubject]:
        return list(self.exam.subjects) if self.exam else []

    def select_exam(self, exam: Exam) -> None:
        self.exam = exam
        self.subject = None
        self.rows = []
        self.alert = None
        self._submitted_at = None
        self.state = MarkEntryState.EXAM_SELECTED

    def select_subject(self, subject_code: str) -> ExamSubject:
        if self.exam is None:
            raise ValidationError("Select an exam first", error_code="EXAM_NOT_SELECTED")
        subject = self.exam.find_subject(subject_code)
        if subject is None:
            raise ValidationError(
                f"Subject {subject_code} is not part of exam {self.exam.name}",
                error_code="SUBJECT_NOT_FOUND",
                details={"exam_id": self.exam.id, "subject_code": subject_code},
            )
        self.subject = subject
        self.rows = []
        self.alert = None
        self._submitted_at = None
        self.state = MarkEntryState.SUBJECT_SELECTED
        return subject

    def load_roster(self, students: Iterable[Student]) -> List[MarkRow]:
        """Seed one empty row per student of the exam's class and section."""
        if self.exam is None or self.subject is None:
            raise ValidationError("Select an exam and subject first", error_code="SUBJECT_NOT_SELECTED")
        self.rows = [
            MarkRow(
                student_id=student.id,
                student_name=student.full_name or "",
                roll_number=student.roll_number,
            )
            for student in roster_for_exam(students, self.exam)
        ]
        logger.debug(f"Loaded {len(self.rows)} student(s) for {self.exam.class_name} {self.exam.section}")
        self.state = MarkEntryState.EDITING
        return self.rows

    async def fetch_roster(self, student_service: StudentService) -> List[MarkRow]:
        students = await student_service.get_all()
        return self.load_roster(students)

    def row(self, student_id: str) -> MarkRow:
        for row in self.rows:
            if row.student_id == student_id:
                return row
        raise NotFoundError(
            f"Student {student_id} is not on this mark sheet",
            error_code="STUDENT_NOT_ON_SHEET",
            details={"student_id": student_id},
        )

    def _require_rows(self) -> None:
        if self.state not in (MarkEntryState.EDITING, MarkEntryState.SUBMITTED):
            raise ValidationError("Load the class roster before entering marks", error_code="ROSTER_NOT_LOADED")

    def _edited(self) -> None:
        self.state = MarkEntryState.EDITING

    def set_absent(self, student_id: str, absent: bool) -> MarkRow:
        """Marking a student absent clears the mark and locks the input."""
        self._require_rows()
        row = self.row(student_id)
        row.is_absent = absent
        if absent:
            row.marks_obtained = None
        self._edited()
        return row

    def enter_mark(self, student_id: str, value: MarkValue) -> MarkRow:
        self._require_rows()
        row = self.row(student_id)
        if not row.editable:
            raise ValidationError(
                f"{row.student_name or student_id} is marked absent",
                error_code="STUDENT_ABSENT",
                details={"student_id": student_id},
            )
        row.marks_obtained = _parse_mark(value)
        self._edited()
        return row

    def apply_entries(self, entries: Iterable[StudentMark]) -> None:
        """Replay a sheet of edits, absence first so it clears any mark."""
        for entry in entries:
            if entry.is_absent:
                self.set_absent(entry.student_id, True)
            else:
                self.set_absent(entry.student_id, False)
                self.enter_mark(entry.student_id, entry.marks_obtained)

    def row_status(self, row: MarkRow) -> MarkStatus:
        if self.subject is None:
            return MarkStatus.PENDING
        return mark_status(row.marks_obtained, self.subject.passing_marks, row.is_absent)

    def missing_rows(self) -> List[MarkRow]:
        return [row for row in self.rows if not row.is_absent and row.marks_obtained is None]

    def build_submission(self) -> MarkEntryData:
        """
        One entry per loaded row.

        Every row needs either a mark or the absent flag; absent rows never
        carry a mark.
        """
        self._require_rows()
        missing = self.missing_rows()
        if missing:
            names = ", ".join(row.student_name or row.student_id for row in missing)
            raise ValidationError(
                f"Marks are required for: {names}",
                error_code="MARKS_REQUIRED",
                details={"student_ids": [row.student_id for row in missing]},
            )
        return MarkEntryData(
            exam_id=self.exam.id,
            subject_code=self.subject.subject_code,
            marks=[
                StudentMark(
                    student_id=row.student_id,
                    marks_obtained=None if row.is_absent else row.marks_obtained,
                    is_absent=row.is_absent,
                )
                for row in self.rows
            ],
        )

    async def submit(self, exam_service: ExamService) -> Alert:
        submission = self.build_submission()
        self.state = MarkEntryState.SUBMITTING
        self.alert = None
        try:
            await exam_service.submit_marks(submission)
        except ApiError as e:
            logger.error(f"Failed to submit marks for exam {submission.exam_id}: {e.message}")
            self.state = MarkEntryState.EDITING
            self.alert = Alert(type="error", message=alert_message(e, SUBMIT_FAILURE_MESSAGE))
            raise
        self.state = MarkEntryState.SUBMITTED
        self._submitted_at = time.monotonic()
        self.alert = Alert(
            type="success",
            message=SUBMIT_SUCCESS_MESSAGE,
            dismiss_after=self.banner_seconds,
        )
        return self.alert

    def success_banner_visible(self, now: Optional[float] = None) -> bool:
        if self.state is not MarkEntryState.SUBMITTED or self._submitted_at is None:
            return False
        now = time.monotonic() if now is None else now
        return now - self._submitted_at < self.banner_seconds


def _parse_mark(value: MarkValue) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    try:
        mark = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{value}' is not a number", error_code="INVALID_MARK")
    # nan and inf parse as floats but cannot be stored or sent as JSON
    if not math.isfinite(mark):
        raise ValidationError(f"'{value}' is not a valid mark", error_code="INVALID_MARK")
    return mark
