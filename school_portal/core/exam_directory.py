"""Exam directory helpers: schedule status, summary counts and guarded delete."""
from datetime import date
from typing import Callable, Dict, Iterable, Optional, Union

from school_portal.core.logging_config import get_logger
from school_portal.models.exam import Exam, ScheduleStatus
from school_portal.services.exam_service import ExamService

logger = get_logger(__name__)

DELETE_WARNING = "Are you sure you want to delete this exam? This will delete all associated results."

Confirmation = Union[bool, Callable[[str], bool]]


def exam_schedule_status(exam: Exam, today: Optional[date] = None) -> ScheduleStatus:
    today = today or date.today()
    if exam.start_date > today:
        return ScheduleStatus.UPCOMING
    if exam.start_date <= today <= exam.end_date:
        return ScheduleStatus.ONGOING
    return ScheduleStatus.COMPLETED


def directory_stats(exams: Iterable[Exam], today: Optional[date] = None) -> Dict[str, int]:
    today = today or date.today()
    stats = {"total": 0, "upcoming": 0, "ongoing": 0, "completed": 0}
    for exam in exams:
        stats["total"] += 1
        stats[exam_schedule_status(exam, today).value] += 1
    return stats


def is_confirmed(confirm: Confirmation) -> bool:
    """Resolve a confirmation given either as a flag or as a prompt callback."""
    if callable(confirm):
        return bool(confirm(DELETE_WARNING))
    return bool(confirm)


async def delete_exam(exam_service: ExamService, exam_id: str, confirm: Confirmation) -> bool:
    """
    Delete an exam once the user has confirmed.

    Returns False without issuing any request when the confirmation is
    declined. Deletion is irreversible and removes the exam's results.
    """
    if not is_confirmed(confirm):
        logger.info(f"Delete of exam {exam_id} cancelled by user")
        return False
    await exam_service.delete(exam_id)
    return True
