import pytest
from fastapi.testclient import TestClient

from app.common.deps import CurrentUser, get_current_user
from app.main import app
from conftest import ADMIN_ID, CAT_LESSON_ID, COURSE_ID, EXAM_LESSON_ID, PROJECT_LESSON_ID, USER_ID

learner = CurrentUser(id=USER_ID, email="learner@example.com", role="student")
admin = CurrentUser(id=ADMIN_ID, email="admin@example.com", role="admin")


@pytest.fixture
def as_user():
    """Return a function that swaps the authenticated identity for the test client."""

    def _set(user):
        app.dependency_overrides[get_current_user] = lambda: user

    _set(learner)
    yield _set
    app.dependency_overrides.clear()


@pytest.fixture
def client(as_user):
    return TestClient(app)


def _mc_payload(score=2, total=2):
    return {
        "course_id": COURSE_ID,
        "lesson_id": CAT_LESSON_ID,
        "answers": [
            {"question_index": 0, "question_type": "multiple_choice", "selected_option": 0},
            {"question_index": 1, "question_type": "multiple_choice", "selected_option": 1},
        ],
        "score": score,
        "total": total,
    }


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"
    health = client.get("/healthz").json()
    assert health["components"]["database"]["status"] == "ok"


def test_submit_quiz_returns_submission_envelope(client):
    resp = client.post("/quiz-submissions", json=_mc_payload())
    assert resp.status_code == 200
    body = resp.json()["submission"]
    assert body["status"] == "graded"
    assert body["is_passed"] is True
    assert "X-Request-Id" in resp.headers

    fetched = client.get("/quiz-submissions", params={"lesson_id": CAT_LESSON_ID}).json()
    assert fetched["submission"]["id"] == body["id"]


def test_submit_quiz_validation_error_is_400(client, fake_db):
    resp = client.post("/quiz-submissions", json={"course_id": COURSE_ID, "lesson_id": CAT_LESSON_ID})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "course_id, lesson_id, and answers are required"
    assert fake_db.writes == []


def test_get_quiz_submission_without_lesson_is_400(client):
    resp = client.get("/quiz-submissions")
    assert resp.status_code == 400


def test_storage_error_surfaces_message(client, fake_db):
    fake_db.failing_tables.add("lesson_project_submissions")
    resp = client.post(
        "/project-submissions",
        json={"course_id": COURSE_ID, "lesson_id": PROJECT_LESSON_ID, "submission_text": "done"},
    )
    assert resp.status_code == 400
    assert "unavailable" in resp.json()["detail"]


def test_admin_routes_reject_learners(client):
    resp = client.get("/admin/project-submissions")
    assert resp.status_code == 403


def test_project_review_round_trip(client, as_user, fake_db):
    created = client.post(
        "/project-submissions",
        json={"course_id": COURSE_ID, "lesson_id": PROJECT_LESSON_ID, "submission_url": "https://example.com/repo"},
    ).json()["submission"]

    as_user(admin)
    queue = client.get("/admin/project-submissions", params={"status": "pending_review"}).json()
    assert [s["id"] for s in queue["submissions"]] == [created["id"]]

    bad = client.patch(f"/admin/project-submissions/{created['id']}", json={"status": "pending_review"})
    assert bad.status_code == 400

    resp = client.patch(
        f"/admin/project-submissions/{created['id']}", json={"status": "approved", "feedback": "Great"}
    )
    assert resp.status_code == 200
    assert resp.json()["submission"]["status"] == "approved"
    assert fake_db.rows("user_lesson_completion", lesson_id=PROJECT_LESSON_ID)

    again = client.patch(f"/admin/project-submissions/{created['id']}", json={"status": "rejected"})
    assert again.status_code == 400
    assert again.json()["detail"] == "submission_already_reviewed"


def test_missing_submission_is_404(client, as_user):
    as_user(admin)
    resp = client.patch("/admin/project-submissions/nope", json={"status": "approved"})
    assert resp.status_code == 404


def test_quiz_review_and_course_completion(client, as_user, fake_db):
    client.post("/quiz-submissions", json=_mc_payload())
    pending = client.post(
        "/quiz-submissions",
        json={
            "course_id": COURSE_ID,
            "lesson_id": EXAM_LESSON_ID,
            "answers": [
                {"question_index": 0, "question_type": "multiple_choice", "selected_option": 2},
                {"question_index": 1, "question_type": "free_text", "answer_text": "essay"},
            ],
        },
    ).json()["submission"]
    for lesson_id in ("lesson-project", "lesson-reading"):
        fake_db.new_row(
            "user_lesson_completion", {"user_id": USER_ID, "course_id": COURSE_ID, "lesson_id": lesson_id}
        )

    blocked = client.post(f"/courses/{COURSE_ID}/complete")
    assert blocked.status_code == 400
    grades = client.get(f"/courses/{COURSE_ID}/grades").json()
    assert grades["eligible_to_complete"] is False
    assert grades["grades"]["final_exam_pending_review"] is True

    as_user(admin)
    exam_queue = client.get("/admin/final-exam-submissions").json()["submissions"]
    assert [s["id"] for s in exam_queue] == [pending["id"]]
    graded = client.patch(
        f"/admin/quiz-submissions/{pending['id']}",
        json={"free_text_grades": [{"question_index": 1, "awarded_marks": 3}]},
    )
    assert graded.status_code == 200
    assert graded.json()["submission"]["score"] == 5

    as_user(learner)
    done = client.post(f"/courses/{COURSE_ID}/complete")
    assert done.status_code == 200
    body = done.json()
    assert body["enrollment"]["is_completed"] is True
    assert body["enrollment"]["is_passed"] is True
    assert body["grades"]["final_score_100"] == pytest.approx(100)

    dashboard = client.get("/student/dashboard").json()["courses"]
    assert dashboard[0]["passed"] is True
    assert dashboard[0]["eligibleToComplete"] is True

    retake = client.post(f"/courses/{COURSE_ID}/retake-final-exam")
    assert retake.json() == {"ok": True, "final_exam_lessons": 1}
    dashboard = client.get("/student/dashboard").json()["courses"]
    assert dashboard[0]["enrollment"]["is_completed"] is False
    assert dashboard[0]["eligibleToComplete"] is False


def test_retake_without_exam_is_400(client, fake_db):
    fake_db.tables["lessons"] = [fake_db.tables["lessons"][0]]
    resp = client.post(f"/courses/{COURSE_ID}/retake-final-exam")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Final exam not found for this course"
