from __future__ import annotations

import pytest
from django.test import Client

from courses.models import Course, Enrollment

PASSWORD = "Strong#Passw0rd"


def login(username: str) -> Client:
    c = Client()
    assert c.login(username=username, password=PASSWORD)
    return c


@pytest.mark.django_db
def test_duplicate_enrollment_returns_400_not_500(instructor, student):
    course = Course.objects.create(instructor=instructor, title="D")
    c = login("learner")
    r1 = c.post("/api/enrollments", {"course": course.pk}, content_type="application/json")
    assert r1.status_code == 201
    assert r1.json()["progress"] == 0
    assert r1.json()["course"]["id"] == course.pk

    r2 = c.post("/api/enrollments", {"course": course.pk}, content_type="application/json")
    assert r2.status_code == 400
    assert r2.json()["message"] == "Already enrolled in this course"

    r3 = c.post(f"/api/courses/{course.pk}/enroll")
    assert r3.status_code == 400
    assert Enrollment.objects.filter(user=student, course=course).count() == 1


@pytest.mark.django_db
def test_enroll_failure_modes(student):
    c = login("learner")
    assert c.post("/api/enrollments", {"course": 4242}, content_type="application/json").status_code == 404
    assert c.post("/api/courses/4242/enroll").status_code == 404
    assert c.post("/api/enrollments", {"course": "abc"}, content_type="application/json").status_code == 400
    assert Client().post("/api/enrollments", {"course": 1}, content_type="application/json").status_code == 401


@pytest.mark.django_db
def test_enrollment_list_and_lookup_are_per_user(instructor, student, make_user):
    make_user("someone")
    course = Course.objects.create(instructor=instructor, title="Mine")
    other = Course.objects.create(instructor=instructor, title="Theirs")
    c = login("learner")
    c.post(f"/api/courses/{course.pk}/enroll")
    login("someone").post(f"/api/courses/{other.pk}/enroll")

    rows = c.get("/api/enrollments").json()["results"]
    assert [row["course"]["title"] for row in rows] == ["Mine"]

    assert c.get(f"/api/courses/{course.pk}/enrollment").status_code == 200
    assert c.get(f"/api/courses/{other.pk}/enrollment").status_code == 404

    course.refresh_from_db()
    assert course.total_students == 1


@pytest.mark.django_db
def test_student_can_leave_a_course(instructor, student, make_user):
    make_user("someone")
    course = Course.objects.create(instructor=instructor, title="Leave")
    c = login("learner")
    enrollment_id = c.post(f"/api/courses/{course.pk}/enroll").json()["id"]
    assert login("someone").delete(f"/api/enrollments/{enrollment_id}").status_code == 404
    assert c.delete(f"/api/enrollments/{enrollment_id}").status_code == 204
    course.refresh_from_db()
    assert course.total_students == 0
