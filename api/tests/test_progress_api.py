from __future__ import annotations

import pytest
from django.test import Client

from courses.models import Enrollment
from courses.progress import course_lectures

PASSWORD = "Strong#Passw0rd"


def login(username: str) -> Client:
    c = Client()
    assert c.login(username=username, password=PASSWORD)
    return c


@pytest.mark.django_db
def test_completing_all_lectures_via_api(instructor, student, make_course):
    course = make_course(instructor, lectures=3)
    c = login("learner")
    c.post(f"/api/courses/{course.pk}/enroll")

    last = None
    for lecture in course_lectures(course):
        last = c.post(f"/api/lectures/{lecture.pk}/progress", {"completed": True}, content_type="application/json")
        assert last.status_code == 200
    assert last.json()["progress"] == 100
    assert last.json()["course_completed"] is True

    enrollment = Enrollment.objects.get(user=student, course=course)
    assert enrollment.progress == 100
    assert enrollment.completed is True

    summary = c.get(f"/api/courses/{course.pk}/progress").json()
    assert summary["progress"] == 100
    assert all(row["completed"] for row in summary["lectures"])


@pytest.mark.django_db
def test_position_is_recorded_without_completing(instructor, student, make_course):
    course = make_course(instructor, lectures=2)
    lecture = course_lectures(course).first()
    c = login("learner")
    c.post(f"/api/courses/{course.pk}/enroll")

    r = c.post(f"/api/lectures/{lecture.pk}/progress", {"last_watched_position": 95}, content_type="application/json")
    assert r.status_code == 200
    assert r.json()["completed"] is False
    assert r.json()["progress"] == 0

    got = c.get(f"/api/lectures/{lecture.pk}/progress").json()
    assert got["last_watched_position"] == 95


@pytest.mark.django_db
def test_api_does_not_uncomplete(instructor, student, make_course):
    course = make_course(instructor, lectures=2)
    lecture = course_lectures(course).first()
    c = login("learner")
    c.post(f"/api/courses/{course.pk}/enroll")
    c.post(f"/api/lectures/{lecture.pk}/progress", {"completed": True}, content_type="application/json")
    r = c.post(f"/api/lectures/{lecture.pk}/progress", {"completed": False}, content_type="application/json")
    assert r.json()["completed"] is True
    assert r.json()["progress"] == 50


@pytest.mark.django_db
def test_progress_failure_modes(instructor, student, make_course):
    course = make_course(instructor, lectures=1)
    lecture = course_lectures(course).first()
    c = login("learner")

    # Not enrolled
    r = c.post(f"/api/lectures/{lecture.pk}/progress", {"completed": True}, content_type="application/json")
    assert r.status_code == 403
    assert c.get(f"/api/courses/{course.pk}/progress").status_code == 403

    # Unknown lecture
    assert c.post("/api/lectures/9999/progress", {"completed": True}, content_type="application/json").status_code == 404

    # Anonymous
    anon = Client().post(f"/api/lectures/{lecture.pk}/progress", {"completed": True}, content_type="application/json")
    assert anon.status_code == 401

    # Malformed
    c.post(f"/api/courses/{course.pk}/enroll")
    bad = c.post(f"/api/lectures/{lecture.pk}/progress", {"last_watched_position": -5}, content_type="application/json")
    assert bad.status_code == 400
    assert "last_watched_position" in bad.json()["errors"]


@pytest.mark.django_db
def test_progress_endpoint_checks_enrollment_owner(instructor, student, make_user, make_course):
    make_user("intruder")
    course = make_course(instructor, lectures=2)
    lecture = course_lectures(course).first()
    c = login("learner")
    enrollment_id = c.post(f"/api/courses/{course.pk}/enroll").json()["id"]

    r = login("intruder").post(
        "/api/progress",
        {"enrollment": enrollment_id, "lecture": lecture.pk, "completed": True},
        content_type="application/json",
    )
    assert r.status_code == 403

    ok = c.post(
        "/api/progress",
        {"enrollment": enrollment_id, "lecture": lecture.pk, "completed": True},
        content_type="application/json",
    )
    assert ok.status_code == 200
    assert ok.json()["progress"] == 50

    other = make_course(instructor, title="Other", lectures=1)
    mismatch = c.post(
        "/api/progress",
        {"enrollment": enrollment_id, "lecture": course_lectures(other).first().pk, "completed": True},
        content_type="application/json",
    )
    assert mismatch.status_code == 400
