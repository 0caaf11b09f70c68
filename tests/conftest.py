import json
import os

# Settings are read at import time
os.environ["DEBUG"] = "true"
os.environ["API_BASE_URL"] = "http://school.test/api"
os.environ["ADMIT_CARD_SIMULATED_DELAY_SECONDS"] = "0"
os.environ["MARK_ENTRY_BANNER_SECONDS"] = "3"

import httpx
import pytest
from fastapi.testclient import TestClient

from school_portal.core.api_client import SchoolApiClient
from school_portal.models.exam import Exam
from school_portal.models.student import Student

BASE_URL = "http://school.test/api"


class FakeSchoolApi:
    """In-memory stand-in for the school REST API, recording every request."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, body=None, status=200):
        self.routes[(method, "/api" + path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"detail": "Not found."})
        status, body = self.routes[key]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def calls(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == "/api" + path]

    def json_body(self, request):
        return json.loads(request.content)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_api():
    return FakeSchoolApi()


@pytest.fixture
def api_client(fake_api):
    return SchoolApiClient(
        base_url=BASE_URL,
        access_token="token-123",
        tenant_id="tenant-1",
        transport=httpx.MockTransport(fake_api.handler),
    )


@pytest.fixture
def exam_payload():
    return {
        "id": "exam-1",
        "name": "Mid-Term",
        "exam_type": "midterm",
        "class_name": "10",
        "section": "A",
        "start_date": "2026-03-01",
        "end_date": "2026-03-10",
        "total_marks": 200,
        "passing_marks": 80,
        "subjects": [
            {
                "subject_name": "Math",
                "subject_code": "MATH",
                "exam_date": "2026-03-01",
                "max_marks": 100,
                "passing_marks": 40,
                "duration_minutes": 180,
            },
            {
                "subject_name": "Science",
                "subject_code": "SCI",
                "exam_date": "2026-03-03",
                "max_marks": 50,
                "passing_marks": 18,
                "duration_minutes": 90,
            },
        ],
        "created_at": "2026-02-01T10:00:00Z",
        "updated_at": "2026-02-01T10:00:00Z",
    }


@pytest.fixture
def students_payload():
    return [
        {"id": "stu-a", "full_name": "Asha Rao", "roll_number": "014", "class_name": "10", "section": "A"},
        {"id": "stu-b", "full_name": "Ben Ortiz", "roll_number": "015", "class_name": "10", "section": "A"},
        {"id": "stu-c", "full_name": "Chen Li", "roll_number": "001", "class_name": "10", "section": "B"},
        {"id": "stu-d", "full_name": "Dara Kim", "roll_number": "002", "class_name": "10", "section": "a"},
        {
            "id": "stu-e",
            "user": {"first_name": "Eli", "last_name": "Moss"},
            "roll_number": "020",
            "class_name": "9",
            "section": "A",
        },
    ]


@pytest.fixture
def results_payload():
    return [
        {
            "id": "res-1", "exam": "exam-1", "student": "stu-a",
            "student_name": "Asha Rao", "student_roll_number": "014",
            "total_marks_obtained": 170, "total_max_marks": 200,
            "percentage": 85.0, "grade": "A", "result_status": "pass",
        },
        {
            "id": "res-2", "exam": "exam-1", "student": "stu-b",
            "student_name": "Ben Ortiz", "student_roll_number": "015",
            "total_marks_obtained": 70, "total_max_marks": 200,
            "percentage": 35.0, "grade": "F", "result_status": "fail",
        },
        {
            "id": "res-3", "exam": "exam-1", "student": "stu-f",
            "student_name": "Farah Shah", "student_roll_number": "021",
            "total_marks_obtained": 130, "total_max_marks": 200,
            "percentage": 65.0, "grade": "B", "result_status": "pass",
        },
    ]


@pytest.fixture
def exam(exam_payload):
    return Exam.model_validate(exam_payload)


@pytest.fixture
def students(students_payload):
    return [Student.model_validate(s) for s in students_payload]


@pytest.fixture
def client(fake_api):
    from main import app

    app.state.http_client = httpx.AsyncClient(
        base_url=BASE_URL,
        transport=httpx.MockTransport(fake_api.handler),
    )
    yield TestClient(app)
    del app.state.http_client
