from __future__ import annotations

import pytest
from django.test import Client

from courses.models import Course

PASSWORD = "Strong#Passw0rd"


def login(username: str) -> Client:
    c = Client()
    assert c.login(username=username, password=PASSWORD)
    return c


@pytest.mark.django_db
def test_review_requires_enrollment_and_is_unique(instructor, student):
    course = Course.objects.create(instructor=instructor, title="R")
    c = login("learner")
    payload = {"rating": 4, "comment": "Solid"}

    assert c.post(f"/api/courses/{course.pk}/reviews", payload, content_type="application/json").status_code == 403
    c.post(f"/api/courses/{course.pk}/enroll")
    r = c.post(f"/api/courses/{course.pk}/reviews", payload, content_type="application/json")
    assert r.status_code == 201
    assert r.json()["user"]["username"] == "learner"

    dup = c.post(f"/api/courses/{course.pk}/reviews", payload, content_type="application/json")
    assert dup.status_code == 400

    course.refresh_from_db()
    assert course.rating == 4.0
    assert course.review_count == 1


@pytest.mark.django_db
def test_review_validation_and_404(instructor, student):
    course = Course.objects.create(instructor=instructor, title="V")
    c = login("learner")
    c.post(f"/api/courses/{course.pk}/enroll")
    assert c.post(f"/api/courses/{course.pk}/reviews", {"rating": 6}, content_type="application/json").status_code == 400
    assert c.post(f"/api/courses/{course.pk}/reviews", {"rating": 0}, content_type="application/json").status_code == 400
    assert c.post("/api/courses/999/reviews", {"rating": 3}, content_type="application/json").status_code == 404
    assert Client().post(f"/api/courses/{course.pk}/reviews", {"rating": 3}, content_type="application/json").status_code == 401


@pytest.mark.django_db
def test_reviews_listed_newest_first(instructor, make_user):
    course = Course.objects.create(instructor=instructor, title="L")
    for name, rating in (("first", 2), ("second", 5)):
        make_user(name)
        c = login(name)
        c.post(f"/api/courses/{course.pk}/enroll")
        c.post(f"/api/courses/{course.pk}/reviews", {"rating": rating}, content_type="application/json")
    rows = Client().get(f"/api/courses/{course.pk}/reviews").json()
    assert [r["user"]["username"] for r in rows] == ["second", "first"]
    course.refresh_from_db()
    assert course.rating == 3.5


@pytest.mark.django_db
def test_enrollment_is_checked_before_the_body(instructor, student):
    course = Course.objects.create(instructor=instructor, title="Gate")
    r = login("learner").post(f"/api/courses/{course.pk}/reviews", {"rating": 9}, content_type="application/json")
    assert r.status_code == 403
    assert r.json()["message"] == "You must be enrolled in the course to leave a review"
