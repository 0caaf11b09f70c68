from datetime import date

import pytest

from school_portal.core.exam_directory import (
    DELETE_WARNING,
    delete_exam,
    directory_stats,
    exam_schedule_status,
)
from school_portal.models.exam import Exam, ExamFilters, ExamType, ScheduleStatus
from school_portal.services.exam_service import ExamService


def make_exam(exam_payload, exam_id, start, end):
    return Exam.model_validate(dict(exam_payload, id=exam_id, start_date=start, end_date=end))


def test_schedule_status(exam):
    assert exam_schedule_status(exam, date(2026, 2, 28)) is ScheduleStatus.UPCOMING
    assert exam_schedule_status(exam, date(2026, 3, 1)) is ScheduleStatus.ONGOING
    assert exam_schedule_status(exam, date(2026, 3, 10)) is ScheduleStatus.ONGOING
    assert exam_schedule_status(exam, date(2026, 3, 11)) is ScheduleStatus.COMPLETED


def test_directory_stats(exam_payload):
    exams = [
        make_exam(exam_payload, "e1", "2026-05-01", "2026-05-05"),
        make_exam(exam_payload, "e2", "2026-04-01", "2026-04-20"),
        make_exam(exam_payload, "e3", "2026-01-01", "2026-01-05"),
        make_exam(exam_payload, "e4", "2025-12-01", "2025-12-05"),
    ]
    stats = directory_stats(exams, today=date(2026, 4, 10))
    assert stats == {"total": 4, "upcoming": 1, "ongoing": 1, "completed": 2}


def test_end_before_start_is_accepted(exam_payload):
    exam = make_exam(exam_payload, "e1", "2026-03-10", "2026-03-01")
    assert exam.end_date < exam.start_date


def test_filters_drop_unset_values():
    filters = ExamFilters(class_name="10", exam_type=ExamType.UNIT_TEST, start_date=date(2026, 1, 1))
    assert filters.to_params() == {"class_name": "10", "exam_type": "unit_test", "start_date": "2026-01-01"}


@pytest.mark.anyio
async def test_declined_delete_issues_no_request(fake_api, api_client, exam):
    exams = [exam]
    prompts = []

    def decline(message):
        prompts.append(message)
        return False

    deleted = await delete_exam(ExamService(api_client), exam.id, decline)

    assert deleted is False
    assert prompts == [DELETE_WARNING]
    assert fake_api.requests == []
    assert exams == [exam]


@pytest.mark.anyio
async def test_confirmed_delete_removes_exam(fake_api, api_client, exam):
    fake_api.add("DELETE", "/exams/exam-1/", None, status=204)

    deleted = await delete_exam(ExamService(api_client), exam.id, True)

    assert deleted is True
    assert len(fake_api.calls("DELETE", "/exams/exam-1/")) == 1


@pytest.mark.anyio
async def test_list_sends_filters_as_query(fake_api, api_client, exam_payload):
    fake_api.add("GET", "/exams/", [exam_payload])

    exams = await ExamService(api_client).get_all(ExamFilters(section="A"))

    assert [e.name for e in exams] == ["Mid-Term"]
    params = fake_api.requests[0].url.params
    assert params["section"] == "A"
    assert "class_name" not in params
