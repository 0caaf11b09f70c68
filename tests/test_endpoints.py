AUTH = {"Authorization": "Bearer token-123", "X-Tenant-ID": "tenant-1"}


def test_health_and_root(client):
    assert client.get("/").json()["message"].startswith("Welcome to")
    response = client.get("/health")
    assert response.json()["school_api"] == "reachable"


def test_exam_directory_forwards_filters_and_credentials(client, fake_api, exam_payload):
    fake_api.add("GET", "/exams/", [exam_payload])

    response = client.get("/api/v1/exams", params={"class_name": "10", "exam_type": "midterm"}, headers=AUTH)

    assert response.status_code == 200
    body = response.json()
    assert body["exams"][0]["exam"]["name"] == "Mid-Term"
    assert body["exams"][0]["type_badge"]["label"] == "MIDTERM"
    assert body["cards"][0] == {"title": "Total Exams", "value": 1, "hint": None}

    request = fake_api.requests[0]
    assert request.url.params["class_name"] == "10"
    assert request.url.params["exam_type"] == "midterm"
    assert "section" not in request.url.params
    assert request.headers["Authorization"] == "Bearer token-123"
    assert request.url.params["tenant_id"] == "tenant-1"


def test_empty_directory_has_placeholder(client, fake_api):
    fake_api.add("GET", "/exams/", [])

    body = client.get("/api/v1/exams").json()

    assert body["exams"] == []
    assert body["empty"] == {"message": "No exams found"}


def test_create_exam_requires_fields(client, fake_api):
    response = client.post("/api/v1/exams", json={"name": "Finals"})

    assert response.status_code == 422
    assert fake_api.requests == []


def test_create_exam(client, fake_api, exam_payload):
    fake_api.add("POST", "/exams/", exam_payload)
    new_exam = {key: value for key, value in exam_payload.items() if key not in ("id", "created_at", "updated_at")}

    response = client.post("/api/v1/exams", json=new_exam)

    assert response.status_code == 201
    sent = fake_api.json_body(fake_api.requests[0])
    assert sent["subjects"][0]["subject_code"] == "MATH"
    assert sent["start_date"] == "2026-03-01"


def test_delete_without_confirmation_is_refused(client, fake_api):
    response = client.delete("/api/v1/exams/exam-1")

    assert response.status_code == 409
    body = response.json()
    assert body["error_code"] == "DELETE_NOT_CONFIRMED"
    assert body["alert"]["type"] == "warning"
    assert "delete all associated results" in body["message"]
    assert fake_api.requests == []


def test_delete_with_confirmation(client, fake_api):
    fake_api.add("DELETE", "/exams/exam-1/", None, status=204)

    response = client.delete("/api/v1/exams/exam-1", params={"confirm": "true"})

    assert response.status_code == 200
    assert response.json()["deleted"] is True
    assert len(fake_api.calls("DELETE", "/exams/exam-1/")) == 1


def test_upstream_not_found_passes_through(client, fake_api):
    response = client.get("/api/v1/exams/missing")

    assert response.status_code == 404
    assert response.json()["alert"]["message"] == "Not found."


def test_mark_sheet(client, fake_api, exam_payload, students_payload):
    fake_api.add("GET", "/exams/exam-1/", exam_payload)
    fake_api.add("GET", "/students/", students_payload)

    response = client.get("/api/v1/mark-entry/sheet", params={"exam_id": "exam-1", "subject_code": "MATH"})

    assert response.status_code == 200
    sheet = response.json()
    assert sheet["subject"]["max_marks"] == 100
    assert sheet["subject"]["passing_marks"] == 40
    assert [row["student_id"] for row in sheet["rows"]] == ["stu-a", "stu-b"]
    assert all(row["status"] == "pending" for row in sheet["rows"])
    assert sheet["state"] == "editing"


def test_mark_sheet_unknown_subject(client, fake_api, exam_payload, students_payload):
    fake_api.add("GET", "/exams/exam-1/", exam_payload)
    fake_api.add("GET", "/students/", students_payload)

    response = client.get("/api/v1/mark-entry/sheet", params={"exam_id": "exam-1", "subject_code": "ART"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "SUBJECT_NOT_FOUND"


def test_submit_marks(client, fake_api, exam_payload, students_payload):
    fake_api.add("GET", "/exams/exam-1/", exam_payload)
    fake_api.add("GET", "/students/", students_payload)
    fake_api.add("POST", "/exams/marks/submit/", {"status": "ok"})

    response = client.post("/api/v1/mark-entry/submit", json={
        "exam_id": "exam-1",
        "subject_code": "MATH",
        "marks": [
            {"student_id": "stu-a", "marks_obtained": 85},
            {"student_id": "stu-b", "marks_obtained": 35},
        ],
    })

    assert response.status_code == 200
    sheet = response.json()
    assert sheet["state"] == "submitted"
    assert sheet["alert"]["message"] == "Marks submitted successfully!"
    assert sheet["alert"]["dismiss_after"] == 3
    statuses = {row["student_id"]: row["status"] for row in sheet["rows"]}
    assert statuses == {"stu-a": "pass", "stu-b": "fail"}

    calls = fake_api.calls("POST", "/exams/marks/submit/")
    assert len(calls) == 1
    assert len(fake_api.json_body(calls[0])["marks"]) == 2


def test_submit_with_missing_marks_sends_nothing(client, fake_api, exam_payload, students_payload):
    fake_api.add("GET", "/exams/exam-1/", exam_payload)
    fake_api.add("GET", "/students/", students_payload)

    response = client.post("/api/v1/mark-entry/submit", json={
        "exam_id": "exam-1",
        "subject_code": "MATH",
        "marks": [{"student_id": "stu-a", "marks_obtained": 85}],
    })

    assert response.status_code == 400
    assert response.json()["error_code"] == "MARKS_REQUIRED"
    assert fake_api.calls("POST", "/exams/marks/submit/") == []


def test_submit_failure_surfaces_server_message(client, fake_api, exam_payload, students_payload):
    fake_api.add("GET", "/exams/exam-1/", exam_payload)
    fake_api.add("GET", "/students/", students_payload)
    fake_api.add("POST", "/exams/marks/submit/", {"error": "Marks are locked"}, status=500)

    response = client.post("/api/v1/mark-entry/submit", json={
        "exam_id": "exam-1",
        "subject_code": "MATH",
        "marks": [
            {"student_id": "stu-a", "is_absent": True},
            {"student_id": "stu-b", "marks_obtained": 35},
        ],
    })

    assert response.status_code == 502
    assert response.json()["alert"] == {
        "type": "error",
        "message": "Marks are locked",
        "title": None,
        "dismissible": True,
        "dismiss_after": None,
    }


def test_results_page_summary_covers_all_results(client, fake_api, results_payload):
    fake_api.add("GET", "/exams/exam-1/results/", results_payload)

    response = client.get("/api/v1/results/exam-1", params={"search": "ASHA"})

    assert response.status_code == 200
    page = response.json()
    assert page["showing"] == 1
    assert page["total"] == 3
    assert page["rows"][0]["result"]["student_name"] == "Asha Rao"
    assert page["rows"][0]["band"] == "good"
    cards = {card["title"]: card["value"] for card in page["cards"]}
    assert cards["Total Students"] == 3
    assert cards["Passed"] == 2
    assert cards["Average"] == "61.67%"
    assert cards["Pass Rate"] == "66.7%"


def test_results_page_no_match(client, fake_api, results_payload):
    fake_api.add("GET", "/exams/exam-1/results/", results_payload)

    page = client.get("/api/v1/results/exam-1", params={"search": "999"}).json()

    assert page["rows"] == []
    assert page["empty"] == {"message": "No students match your search"}


def test_admit_cards_page(client, fake_api, exam_payload, students_payload):
    fake_api.add("GET", "/exams/exam-1/", exam_payload)
    fake_api.add("GET", "/students/", students_payload)

    page = client.get("/api/v1/admit-cards/exam-1").json()

    assert [s["student_id"] for s in page["students"]] == ["stu-a", "stu-b"]
    cards = {card["title"]: card["value"] for card in page["cards"]}
    assert cards == {"Total Students": 2, "Generated": 0, "Pending": 2}


def test_generate_admit_cards(client, fake_api, exam_payload, students_payload):
    fake_api.add("GET", "/exams/exam-1/", exam_payload)
    fake_api.add("GET", "/students/", students_payload)

    empty = client.post("/api/v1/admit-cards/exam-1/generate", json={"student_ids": []})
    assert empty.status_code == 400
    assert empty.json()["alert"]["message"] == "Please select at least one student"

    response = client.post("/api/v1/admit-cards/exam-1/generate", json={"student_ids": ["stu-a", "stu-a"]})
    assert response.status_code == 200
    assert response.json()["generated"] == 1
    assert response.json()["alert"]["message"] == "Admit cards generated for 1 students"


def test_exam_analytics(client, fake_api):
    fake_api.add("GET", "/exams/exam-1/analytics/", {
        "exam_id": "exam-1",
        "exam_name": "Mid-Term",
        "class_name": "10",
        "section": "A",
        "total_students": 40,
        "appeared": 38,
        "absent": 2,
        "passed": 30,
        "failed": 8,
        "pass_percentage": 78.9,
        "highest_marks": 98,
        "lowest_marks": 21,
        "average_marks": 66.4,
        "subject_wise_stats": [
            {"subject_name": "Math", "average_marks": 61, "highest_marks": 98,
             "lowest_marks": 12, "pass_percentage": 55.0},
        ],
    })

    page = client.get("/api/v1/exams/exam-1/analytics").json()

    assert page["verdict"] == "Excellent"
    assert page["subjects"][0]["pass_rate_badge"]["variant"] == "danger"


def test_submit_rejects_non_finite_marks(client, fake_api, exam_payload, students_payload):
    fake_api.add("GET", "/exams/exam-1/", exam_payload)
    fake_api.add("GET", "/students/", students_payload)
    body = (
        '{"exam_id": "exam-1", "subject_code": "MATH", "marks": ['
        '{"student_id": "stu-a", "marks_obtained": NaN}, '
        '{"student_id": "stu-b", "marks_obtained": Infinity}]}'
    )

    response = client.post(
        "/api/v1/mark-entry/submit",
        content=body,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert fake_api.calls("POST", "/exams/marks/submit/") == []


def test_subject_marks(client, fake_api):
    stored = [{"student_id": "stu-a", "marks_obtained": 85, "is_absent": False}]
    fake_api.add("GET", "/exams/exam-1/subjects/MATH/marks/", stored)

    response = client.get("/api/v1/exams/exam-1/subjects/MATH/marks", headers=AUTH)

    assert response.status_code == 200
    assert response.json() == stored
    request = fake_api.calls("GET", "/exams/exam-1/subjects/MATH/marks/")[0]
    assert request.headers["X-Tenant-ID"] == "tenant-1"
