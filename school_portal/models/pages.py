"""View models returned by the page endpoints."""
from pydantic import BaseModel, Field
from typing import Optional, List

from school_portal.models.exam import (
    Exam,
    ExamAnalytics,
    ExamResult,
    ExamSubject,
    ScheduleStatus,
    StudentMark,
    SubjectWiseStats,
)
from school_portal.models.ui import Alert, Badge, EmptyState, SummaryCard


# Exam directory
class ExamListItem(BaseModel):
    exam: Exam
    schedule_status: ScheduleStatus
    status_badge: Badge
    type_badge: Badge


class ExamDirectoryPage(BaseModel):
    exams: List[ExamListItem]
    cards: List[SummaryCard]
    empty: Optional[EmptyState] = None


class DeleteExamResponse(BaseModel):
    deleted: bool
    alert: Alert


class SubjectStatsRow(BaseModel):
    stats: SubjectWiseStats
    pass_rate_badge: Badge


class ExamAnalyticsPage(BaseModel):
    analytics: ExamAnalytics
    verdict: str
    subjects: List[SubjectStatsRow]
    cards: List[SummaryCard]


# Mark entry
class MarkSheetRow(BaseModel):
    student_id: str
    student_name: str
    roll_number: Optional[str] = None
    marks_obtained: Optional[float] = None
    is_absent: bool = False
    editable: bool = True
    status: str
    status_badge: Badge


class MarkSheet(BaseModel):
    exam_id: str
    exam_name: str
    class_name: str
    section: str
    subject: ExamSubject
    rows: List[MarkSheetRow]
    state: str
    alert: Optional[Alert] = None
    empty: Optional[EmptyState] = None


class MarkSheetSubmission(BaseModel):
    exam_id: str = Field(..., min_length=1)
    subject_code: str = Field(..., min_length=1)
    marks: List[StudentMark]


# Results
class ResultRow(BaseModel):
    result: ExamResult
    percentage_badge: Badge
    grade_badge: Badge
    band: str


class ResultsPage(BaseModel):
    exam_id: str
    search: Optional[str] = None
    rows: List[ResultRow]
    showing: int
    total: int
    cards: List[SummaryCard]
    empty: Optional[EmptyState] = None


# Admit cards
class AdmitCardRow(BaseModel):
    student_id: str
    student_name: str
    roll_number: Optional[str] = None
    admission_number: Optional[str] = None
    admit_card_generated: bool = False


class AdmitCardPage(BaseModel):
    exam_id: str
    exam_name: str
    class_name: str
    section: str
    students: List[AdmitCardRow]
    cards: List[SummaryCard]
    empty: Optional[EmptyState] = None


class AdmitCardRequest(BaseModel):
    student_ids: List[str] = Field(default_factory=list)


class AdmitCardResponse(BaseModel):
    generated: int
    alert: Alert
