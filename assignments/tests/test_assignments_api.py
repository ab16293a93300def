from __future__ import annotations

from datetime import timedelta

import pytest
from django.test import Client
from django.utils import timezone

from courses.models import Course

PASSWORD = "Strong#Passw0rd"


def login(username: str) -> Client:
    c = Client()
    assert c.login(username=username, password=PASSWORD)
    return c


@pytest.fixture
def course(instructor, student):
    c = Course.objects.create(instructor=instructor, title="Chemistry")
    assert login("learner").post(f"/api/courses/{c.pk}/enroll").status_code == 201
    return c


def due(days: int = 3) -> str:
    return (timezone.now() + timedelta(days=days)).isoformat()


@pytest.mark.django_db
def test_owner_creates_assignments_and_members_see_them(course, make_user):
    make_user("outsider")
    t = login("teach")
    r = t.post(
        f"/api/courses/{course.pk}/assignments",
        {"title": "Lab report", "due_date": due(), "total_points": 10},
        content_type="application/json",
    )
    assert r.status_code == 201
    r2 = t.post(
        "/api/assignments",
        {"course": course.pk, "title": "Final", "assignment_type": "exam", "due_date": due(10)},
        content_type="application/json",
    )
    assert r2.status_code == 201

    s = login("learner")
    assert [a["title"] for a in s.get("/api/assignments").json()["results"]] == ["Lab report", "Final"]
    assert len(s.get(f"/api/courses/{course.pk}/assignments").json()) == 2
    assert s.post(
        f"/api/courses/{course.pk}/assignments", {"title": "x", "due_date": due()}, content_type="application/json"
    ).status_code == 403

    o = login("outsider")
    assert o.get("/api/assignments").json()["results"] == []
    assert o.get(f"/api/courses/{course.pk}/assignments").status_code == 403
    assert Client().get("/api/assignments").status_code == 401


@pytest.mark.django_db
def test_quiz_flow_hides_answers_and_autogrades(course):
    t = login("teach")
    quiz_id = t.post(
        "/api/assignments",
        {"course": course.pk, "title": "Quiz", "assignment_type": "quiz", "due_date": due(), "total_points": 10},
        content_type="application/json",
    ).json()["id"]
    q = t.post(
        f"/api/assignments/{quiz_id}/questions",
        {"question_text": "H2O is?", "options": ["water", "salt"], "correct_answer": "water", "points": 2},
        content_type="application/json",
    )
    assert q.status_code == 201
    qid = q.json()["id"]
    assert t.get(f"/api/assignments/{quiz_id}/questions").json()[0]["correct_answer"] == "water"

    s = login("learner")
    rows = s.get(f"/api/assignments/{quiz_id}/questions").json()
    assert "correct_answer" not in rows[0]

    r = s.post(f"/api/assignments/{quiz_id}/submit", {"answers": {str(qid): "Water"}}, content_type="application/json")
    assert r.status_code == 201
    assert r.json()["status"] == "graded"
    assert r.json()["grade"] == 10

    dup = s.post(f"/api/assignments/{quiz_id}/submit", {"answers": {}}, content_type="application/json")
    assert dup.status_code == 400


@pytest.mark.django_db
def test_questions_rejected_on_non_quiz(course):
    t = login("teach")
    aid = t.post(
        f"/api/courses/{course.pk}/assignments", {"title": "Essay", "due_date": due()}, content_type="application/json"
    ).json()["id"]
    r = t.post(
        f"/api/assignments/{aid}/questions",
        {"question_text": "?", "correct_answer": "x"},
        content_type="application/json",
    )
    assert r.status_code == 400


@pytest.mark.django_db
def test_submissions_visibility_and_grading(course, make_user):
    other = make_user("peer")
    t = login("teach")
    aid = t.post(
        f"/api/courses/{course.pk}/assignments",
        {"title": "Essay", "due_date": due(), "total_points": 20},
        content_type="application/json",
    ).json()["id"]
    p = login("peer")
    p.post(f"/api/courses/{course.pk}/enroll")
    s = login("learner")
    sub_id = s.post(f"/api/assignments/{aid}/submit", {"submission_text": "mine"}, content_type="application/json").json()["id"]
    p.post(f"/api/assignments/{aid}/submit", {"submission_text": "theirs"}, content_type="application/json")

    assert len(t.get(f"/api/assignments/{aid}/submissions").json()) == 2
    own = s.get(f"/api/assignments/{aid}/submissions").json()
    assert [x["submission_text"] for x in own] == ["mine"]

    assert s.post(f"/api/submissions/{sub_id}/grade", {"grade": 20}, content_type="application/json").status_code == 403
    assert t.post(f"/api/submissions/{sub_id}/grade", {"grade": 25}, content_type="application/json").status_code == 400
    r = t.post(f"/api/submissions/{sub_id}/grade", {"grade": 17, "feedback": "Good"}, content_type="application/json")
    assert r.status_code == 200
    assert r.json()["status"] == "graded"
    assert r.json()["graded_by"] == course.instructor_id
    assert other.submissions.get().status == "submitted"
