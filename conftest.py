import logging

import pytest
from django.contrib.auth.models import User

from accounts.models import Role
from courses.models import Course, Lecture, Section

PASSWORD = "Strong#Passw0rd"


@pytest.fixture(autouse=True)
def silence_django_request_logger():
    """Reduce noise from expected 4xx in passing tests.

    Many tests intentionally exercise 400/403 paths. Django logs these at
    WARNING via 'django.request'; lower that logger to ERROR during tests.
    """
    logger = logging.getLogger("django.request")
    old = logger.level
    logger.setLevel(logging.ERROR)
    try:
        yield
    finally:
        logger.setLevel(old)


@pytest.fixture
def make_user(db):
    def _make(username: str, role: str = Role.STUDENT, **extra) -> User:
        u = User.objects.create_user(username=username, password=PASSWORD, email=f"{username}@ex.com", **extra)
        if u.profile.role != role:
            u.profile.role = role
            u.profile.save(update_fields=["role"])
        return u

    return _make


@pytest.fixture
def instructor(make_user):
    return make_user("teach", Role.INSTRUCTOR)


@pytest.fixture
def student(make_user):
    return make_user("learner")


@pytest.fixture
def make_course(db):
    """Build a course with `lectures` lectures spread over two sections."""

    def _make(owner, title: str = "Course", lectures: int = 3, **fields) -> Course:
        course = Course.objects.create(instructor=owner, title=title, **fields)
        s1 = Section.objects.create(course=course, title="Intro", order=1)
        s2 = Section.objects.create(course=course, title="Deep dive", order=2)
        for i in range(lectures):
            Lecture.objects.create(
                section=s1 if i % 2 == 0 else s2,
                title=f"L{i}",
                duration=60,
                order=i,
            )
        course.refresh_from_db()
        return course

    return _make
