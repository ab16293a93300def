from __future__ import annotations

import pytest
from django.test import Client

from courses.models import Course, Enrollment
from courses.models_feedback import Review

PASSWORD = "Strong#Passw0rd"


@pytest.mark.django_db
def test_stats_for_admin_only(instructor, student, make_user):
    make_user("boss", "admin")
    course = Course.objects.create(instructor=instructor, title="S")
    Enrollment.objects.create(user=student, course=course)
    Review.objects.create(course=course, user=student, rating=4)
    other = make_user("other")
    Enrollment.objects.create(user=other, course=course)
    Review.objects.create(course=course, user=other, rating=5)

    c = Client(); assert c.login(username="boss", password=PASSWORD)
    r = c.get("/api/admin/stats")
    assert r.status_code == 200
    assert r.json() == {
        "total_users": 4,
        "total_courses": 1,
        "total_enrollments": 2,
        "total_reviews": 2,
        "average_rating": 4.5,
    }

    s = Client(); assert s.login(username="learner", password=PASSWORD)
    assert s.get("/api/admin/stats").status_code == 403
    assert Client().get("/api/admin/stats").status_code == 401


@pytest.mark.django_db
def test_staff_users_count_as_admins(make_user):
    make_user("ops", is_staff=True)
    c = Client(); assert c.login(username="ops", password=PASSWORD)
    assert c.get("/api/admin/stats").json()["average_rating"] == 0.0
