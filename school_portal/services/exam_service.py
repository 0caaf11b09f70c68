"""
Exam API calls
One method per school API endpoint; no caching between calls
"""

from typing import Any, Dict, List, Optional

from school_portal.core.api_client import SchoolApiClient
from school_portal.core.logging_config import get_logger
from school_portal.models.exam import (
    Exam,
    ExamAnalytics,
    ExamCreate,
    ExamFilters,
    ExamResult,
    ExamUpdate,
    MarkEntryData,
    ReportCardData,
)

logger = get_logger(__name__)


class ExamService:
    def __init__(self, client: SchoolApiClient):
        self.client = client

    async def get_all(self, filters: Optional[ExamFilters] = None) -> List[Exam]:
        """List exams; omitted filters are not sent."""
        params = filters.to_params() if filters else None
        data = await self.client.get("/exams/", params=params)
        return [Exam.model_validate(item) for item in data or []]

    async def get_by_id(self, exam_id: str) -> Exam:
        data = await self.client.get(f"/exams/{exam_id}/")
        return Exam.model_validate(data)

    async def create(self, exam: ExamCreate) -> Exam:
        logger.info(f"Creating exam: {exam.name} for {exam.class_name} {exam.section}")
        data = await self.client.post("/exams/", json=exam.model_dump(mode="json"))
        return Exam.model_validate(data)

    async def update(self, exam_id: str, changes: ExamUpdate) -> Exam:
        logger.info(f"Updating exam: {exam_id}")
        data = await self.client.put(f"/exams/{exam_id}/", json=changes.model_dump(mode="json", exclude_none=True))
        return Exam.model_validate(data)

    async def delete(self, exam_id: str) -> None:
        logger.info(f"Deleting exam: {exam_id}")
        await self.client.delete(f"/exams/{exam_id}/")

    async def get_exam_results(self, exam_id: str) -> List[ExamResult]:
        data = await self.client.get(f"/exams/{exam_id}/results/")
        return [ExamResult.model_validate(item) for item in data or []]

    async def get_student_result(self, exam_id: str, student_id: str) -> ExamResult:
        data = await self.client.get(f"/exams/{exam_id}/students/{student_id}/result/")
        return ExamResult.model_validate(data)

    async def submit_marks(self, submission: MarkEntryData) -> Any:
        logger.info(
            f"Submitting {len(submission.marks)} mark(s): exam={submission.exam_id}, "
            f"subject={submission.subject_code}"
        )
        return await self.client.post("/exams/marks/submit/", json=submission.model_dump(mode="json"))

    async def get_subject_marks(self, exam_id: str, subject_code: str) -> Any:
        return await self.client.get(f"/exams/{exam_id}/subjects/{subject_code}/marks/")

    async def generate_report_card(self, exam_id: str, student_id: str) -> ReportCardData:
        data = await self.client.get(f"/exams/{exam_id}/students/{student_id}/report-card/")
        return ReportCardData.model_validate(data)

    async def get_analytics(self, exam_id: str) -> ExamAnalytics:
        data = await self.client.get(f"/exams/{exam_id}/analytics/")
        return ExamAnalytics.model_validate(data)

    async def publish_results(self, exam_id: str) -> Any:
        logger.info(f"Publishing results for exam: {exam_id}")
        return await self.client.post(f"/exams/{exam_id}/publish-results/")

    async def calculate_grades(self, exam_id: str) -> Any:
        logger.info(f"Requesting grade calculation for exam: {exam_id}")
        return await self.client.post(f"/exams/{exam_id}/calculate-grades/")

    async def get_grade_distribution(self, exam_id: str) -> Dict[str, Any]:
        return await self.client.get(f"/exams/{exam_id}/grade-distribution/")
