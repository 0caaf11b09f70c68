"""
Exam Models for the School Portal
Mirror the school API's exam, mark entry and result payloads
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from datetime import date, datetime
from enum import Enum


class ExamType(str, Enum):
    MIDTERM = "midterm"
    FINAL = "final"
    UNIT_TEST = "unit_test"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


class ResultStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    ABSENT = "absent"


class ScheduleStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


# Exam Models
class ExamSubject(BaseModel):
    id: Optional[str] = None
    exam: Optional[str] = None
    subject_name: str = Field(..., min_length=1)
    subject_code: str = Field(..., min_length=1, description="Unique within the exam")
    exam_date: date
    max_marks: float
    passing_marks: float
    duration_minutes: int


class ExamBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Name of the exam")
    exam_type: ExamType
    class_name: str = Field(..., min_length=1)
    section: str = Field(..., min_length=1)
    start_date: date
    # end_date >= start_date is left to the school API
    end_date: date
    total_marks: Optional[float] = None
    passing_marks: Optional[float] = None
    subjects: List[ExamSubject] = Field(default_factory=list)


class ExamCreate(ExamBase):
    pass


class ExamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    exam_type: Optional[ExamType] = None
    class_name: Optional[str] = Field(None, min_length=1)
    section: Optional[str] = Field(None, min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_marks: Optional[float] = None
    passing_marks: Optional[float] = None
    subjects: Optional[List[ExamSubject]] = None


class Exam(ExamBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def find_subject(self, subject_code: str) -> Optional[ExamSubject]:
        for subject in self.subjects:
            if subject.subject_code == subject_code:
                return subject
        return None


class ExamFilters(BaseModel):
    """Optional list filters; anything left as None is not sent."""
    class_name: Optional[str] = None
    section: Optional[str] = None
    exam_type: Optional[ExamType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def to_params(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


# Mark Entry Models
class StudentMark(BaseModel):
    student_id: str
    marks_obtained: Optional[float] = Field(None, allow_inf_nan=False)
    is_absent: bool = False


class MarkEntryData(BaseModel):
    exam_id: str
    subject_code: str
    marks: List[StudentMark]


# Result Models
class SubjectMark(BaseModel):
    subject_name: str
    subject_code: str
    marks_obtained: Optional[float] = None
    max_marks: float
    passing_marks: float
    status: ResultStatus
    grade: Optional[str] = None


class ExamResult(BaseModel):
    id: str
    exam: str
    exam_name: Optional[str] = None
    student: str
    student_name: Optional[str] = ""
    student_roll_number: Optional[str] = ""
    class_name: Optional[str] = None
    section: Optional[str] = None
    subject_marks: List[SubjectMark] = Field(default_factory=list)
    total_marks_obtained: float = 0
    total_max_marks: float = 0
    percentage: float = 0
    grade: Optional[str] = None
    rank: Optional[int] = None
    result_status: ResultStatus
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubjectWiseStats(BaseModel):
    subject_name: str
    average_marks: float
    highest_marks: float
    lowest_marks: float
    pass_percentage: float


class ExamAnalytics(BaseModel):
    exam_id: str
    exam_name: str
    class_name: str
    section: str
    total_students: int
    appeared: int
    absent: int
    passed: int
    failed: int
    pass_percentage: float
    highest_marks: float
    lowest_marks: float
    average_marks: float
    subject_wise_stats: List[SubjectWiseStats] = Field(default_factory=list)


# Report Card Models
class ReportCardStudent(BaseModel):
    id: str
    name: str
    roll_number: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None
    photo: Optional[str] = None


class ReportCardExam(BaseModel):
    id: str
    name: str
    exam_type: str
    start_date: date
    end_date: date


class ReportCardSubject(BaseModel):
    subject_name: str
    marks_obtained: Optional[float] = None
    max_marks: float
    grade: Optional[str] = None
    remarks: Optional[str] = None


class ReportCardSummary(BaseModel):
    total_marks_obtained: float
    total_max_marks: float
    percentage: float
    grade: Optional[str] = None
    rank: Optional[int] = None
    result_status: str


class ReportCardAttendance(BaseModel):
    total_days: int
    present_days: int
    percentage: float


class ReportCardData(BaseModel):
    student: ReportCardStudent
    exam: ReportCardExam
    subjects: List[ReportCardSubject] = Field(default_factory=list)
    summary: ReportCardSummary
    attendance: Optional[ReportCardAttendance] = None
