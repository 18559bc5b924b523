"""Tests for the learner course-player endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tests.conftest import SAMPLE_COURSE_ID, auth, mint_token

BASE = f"/v1/learn/{SAMPLE_COURSE_ID}"
LESSON_1 = "lesson-handwashing"
QUIZ = "quiz-hygiene"
LESSON_2 = "lesson-cold-storage"

PASSING = {
    "answers": {
        "q1": "20 seconds",
        "q2": "False",
        "q3": ["After a break", "After handling raw meat"],
    }
}
FAILING = {"answers": {"q1": "5 seconds", "q2": "False"}}


def _complete_lesson(client: TestClient, token: str, item_id: str):
    return client.post(f"{BASE}/lessons/{item_id}/complete", headers=auth(token))


# ---- 401: unauthenticated ----


def test_open_rejects_missing_token(client: TestClient) -> None:
    resp = client.post(f"{BASE}/open")
    assert resp.status_code == 401


def test_open_rejects_garbage_token(client: TestClient) -> None:
    resp = client.post(f"{BASE}/open", headers=auth("not-a-jwt"))
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"


# ---- open / progress ----


def test_open_new_course_starts_at_first_item(client: TestClient, token: str) -> None:
    resp = client.post(f"{BASE}/open", headers=auth(token))
    assert resp.status_code == 200
    body = resp.json()
    assert body["course_id"] == SAMPLE_COURSE_ID
    assert body["current_index"] == 0
    assert [i["state"] for i in body["items"]] == ["Unlocked", "Locked", "Locked"]
    assert body["progress"]["status"] == "NotStarted"
    assert body["progress"]["percent_complete"] == 0


def test_progress_is_404_before_first_open(client: TestClient, token: str) -> None:
    resp = client.get(f"{BASE}/progress", headers=auth(token))
    assert resp.status_code == 404


def test_progress_after_open(client: TestClient, token: str) -> None:
    client.post(f"{BASE}/open", headers=auth(token))
    resp = client.get(f"{BASE}/progress", headers=auth(token))
    assert resp.status_code == 200
    assert resp.json()["completed_item_ids"] == []


def test_open_unknown_course_is_404(client: TestClient, token: str) -> None:
    resp = client.post("/v1/learn/no-such-course/open", headers=auth(token))
    assert resp.status_code == 404


# ---- completion ----


def test_complete_first_lesson(client: TestClient, token: str) -> None:
    resp = _complete_lesson(client, token, LESSON_1)
    assert resp.status_code == 200
    body = resp.json()
    assert body["completed_item_ids"] == [LESSON_1]
    assert body["status"] == "InProgress"
    assert body["percent_complete"] == 33


def test_complete_locked_lesson_is_423(client: TestClient, token: str) -> None:
    resp = _complete_lesson(client, token, LESSON_2)
    assert resp.status_code == 423
    assert resp.json()["detail"] == "Complete previous items first"


def test_complete_quiz_as_lesson_is_409(client: TestClient, token: str) -> None:
    _complete_lesson(client, token, LESSON_1)
    resp = _complete_lesson(client, token, QUIZ)
    assert resp.status_code == 409


def test_complete_unknown_item_is_404(client: TestClient, token: str) -> None:
    resp = _complete_lesson(client, token, "lesson-nope")
    assert resp.status_code == 404


def test_recompleting_lesson_is_idempotent(client: TestClient, token: str) -> None:
    first = _complete_lesson(client, token, LESSON_1).json()
    second = _complete_lesson(client, token, LESSON_1).json()
    assert first == second


# ---- quiz attempts ----


def test_failed_quiz_attempt_keeps_progress(client: TestClient, token: str) -> None:
    _complete_lesson(client, token, LESSON_1)
    resp = client.post(
        f"{BASE}/quizzes/{QUIZ}/attempts", json=FAILING, headers=auth(token)
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["passed"] is False
    assert body["score"] == 33
    assert body["incorrect_questions"] == [1, 3]
    assert body["progress"]["completed_item_ids"] == [LESSON_1]


def test_passing_quiz_unlocks_next_lesson(client: TestClient, token: str) -> None:
    _complete_lesson(client, token, LESSON_1)
    resp = client.post(
        f"{BASE}/quizzes/{QUIZ}/attempts", json=PASSING, headers=auth(token)
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["passed"] is True
    assert body["score"] == 100
    assert body["progress"]["percent_complete"] == 66

    opened = client.post(f"{BASE}/open", headers=auth(token)).json()
    assert opened["current_index"] == 2
    assert opened["items"][2]["state"] == "Unlocked"


def test_quiz_attempt_on_locked_quiz_is_423(client: TestClient, token: str) -> None:
    resp = client.post(
        f"{BASE}/quizzes/{QUIZ}/attempts", json=PASSING, headers=auth(token)
    )
    assert resp.status_code == 423


def test_full_course_completion(client: TestClient, token: str) -> None:
    _complete_lesson(client, token, LESSON_1)
    client.post(f"{BASE}/quizzes/{QUIZ}/attempts", json=PASSING, headers=auth(token))
    body = _complete_lesson(client, token, LESSON_2).json()
    assert body["status"] == "Completed"
    assert body["percent_complete"] == 100

    opened = client.post(f"{BASE}/open", headers=auth(token)).json()
    assert opened["current_index"] == 0  # review mode


# ---- navigation ----


def test_navigate_to_locked_item_is_423(client: TestClient, token: str) -> None:
    resp = client.post(
        f"{BASE}/navigate", json={"target_index": 1}, headers=auth(token)
    )
    assert resp.status_code == 423


def test_navigate_claiming_locked_position_is_423(
    client: TestClient, token: str
) -> None:
    client.post(f"{BASE}/open", headers=auth(token))
    resp = client.post(
        f"{BASE}/navigate",
        json={"target_index": 2, "current_index": 2},
        headers=auth(token),
    )
    assert resp.status_code == 423


def test_navigate_out_of_range_is_404(client: TestClient, token: str) -> None:
    resp = client.post(
        f"{BASE}/navigate", json={"target_index": 9}, headers=auth(token)
    )
    assert resp.status_code == 404


def test_navigate_to_unlocked_item(client: TestClient, token: str) -> None:
    _complete_lesson(client, token, LESSON_1)
    resp = client.post(
        f"{BASE}/navigate", json={"target_index": 1}, headers=auth(token)
    )
    assert resp.status_code == 200
    assert resp.json() == {"index": 1}


def test_advance(client: TestClient, token: str) -> None:
    resp = client.post(
        f"{BASE}/advance", json={"current_index": 0}, headers=auth(token)
    )
    assert resp.json() == {"next_index": None, "course_complete": True}

    _complete_lesson(client, token, LESSON_1)
    resp = client.post(
        f"{BASE}/advance", json={"current_index": 0}, headers=auth(token)
    )
    assert resp.json() == {"next_index": 1, "course_complete": False}


# ---- overall / isolation ----


def test_overall_progress(client: TestClient, token: str) -> None:
    resp = client.get("/v1/learn/overall", headers=auth(token))
    assert resp.json() == {"percent_complete": 0}

    _complete_lesson(client, token, LESSON_1)
    resp = client.get("/v1/learn/overall", headers=auth(token))
    assert resp.json() == {"percent_complete": 33}


def test_progress_is_per_learner(client: TestClient, token: str) -> None:
    _complete_lesson(client, token, LESSON_1)
    other = mint_token(username="someone-else")
    resp = client.post(f"{BASE}/open", headers=auth(other))
    assert resp.json()["progress"]["completed_item_ids"] == []
