from __future__ import annotations

import pytest
from django.core.exceptions import PermissionDenied, ValidationError

from courses.models import Course, Enrollment, Lecture, LectureProgress, Section
from courses.progress import (
    compute_progress,
    course_lectures,
    course_progress_summary,
    enrollment_for_lecture,
    progress_percent,
    record_lecture_progress,
)


@pytest.mark.parametrize(
    "done,total,expected",
    [
        (0, 0, 0),
        (0, 4, 0),
        (1, 8, 13),  # 12.5 rounds half up
        (1, 3, 33),
        (2, 3, 67),
        (1, 2, 50),
        (199, 200, 99),  # never 100 while a lecture remains
        (3, 3, 100),
    ],
)
def test_progress_percent(done, total, expected):
    assert progress_percent(done, total) == expected


@pytest.mark.django_db
def test_completing_every_lecture_reaches_100_and_completed(instructor, student, make_course):
    course = make_course(instructor, lectures=3)
    enrollment = Enrollment.objects.create(user=student, course=course)
    lectures = list(course_lectures(course))

    expected = [33, 67, 100]
    for lecture, pct in zip(lectures, expected):
        record_lecture_progress(enrollment, lecture, completed=True)
        enrollment.refresh_from_db()
        assert enrollment.progress == pct
    assert enrollment.completed is True


@pytest.mark.django_db
def test_repeated_completion_is_counted_once(instructor, student, make_course):
    course = make_course(instructor, lectures=4)
    enrollment = Enrollment.objects.create(user=student, course=course)
    lecture = course_lectures(course).first()
    for _ in range(3):
        record_lecture_progress(enrollment, lecture, completed=True)
    enrollment.refresh_from_db()
    assert enrollment.progress == 25
    assert LectureProgress.objects.filter(enrollment=enrollment, lecture=lecture).count() == 1


@pytest.mark.django_db
def test_position_update_keeps_completion(instructor, student, make_course):
    course = make_course(instructor, lectures=2)
    enrollment = Enrollment.objects.create(user=student, course=course)
    lecture = course_lectures(course).first()
    record_lecture_progress(enrollment, lecture, completed=True)
    rec = record_lecture_progress(enrollment, lecture, position=42)
    assert rec.completed is True
    assert rec.last_watched_position == 42
    assert rec.last_watched_at is not None
    assert rec.enrollment.progress == 50


@pytest.mark.django_db
def test_uncompleting_lowers_progress(instructor, student, make_course):
    course = make_course(instructor, lectures=2)
    enrollment = Enrollment.objects.create(user=student, course=course)
    a, b = list(course_lectures(course))
    record_lecture_progress(enrollment, a, completed=True)
    record_lecture_progress(enrollment, b, completed=True)
    enrollment.refresh_from_db()
    assert enrollment.completed is True

    record_lecture_progress(enrollment, b, completed=False)
    enrollment.refresh_from_db()
    assert enrollment.progress == 50
    assert enrollment.completed is False


@pytest.mark.django_db
def test_adding_a_lecture_rederives_progress(instructor, student, make_course):
    course = make_course(instructor, lectures=3)
    enrollment = Enrollment.objects.create(user=student, course=course)
    for lecture in course_lectures(course):
        record_lecture_progress(enrollment, lecture, completed=True)
    enrollment.refresh_from_db()
    assert enrollment.progress == 100

    section = course.sections.first()
    Lecture.objects.create(section=section, title="Bonus", order=99)
    enrollment.refresh_from_db()
    assert enrollment.progress == 75
    assert enrollment.completed is False


@pytest.mark.django_db
def test_removing_the_remaining_lecture_completes_the_course(instructor, student, make_course):
    course = make_course(instructor, lectures=3)
    enrollment = Enrollment.objects.create(user=student, course=course)
    a, b, c = list(course_lectures(course))
    record_lecture_progress(enrollment, a, completed=True)
    record_lecture_progress(enrollment, b, completed=True)
    enrollment.refresh_from_db()
    assert enrollment.progress == 67

    c.delete()
    enrollment.refresh_from_db()
    assert enrollment.progress == 100
    assert enrollment.completed is True


@pytest.mark.django_db
def test_course_without_lectures_has_zero_progress(instructor, student):
    course = Course.objects.create(instructor=instructor, title="Empty")
    enrollment = Enrollment.objects.create(user=student, course=course)
    assert compute_progress(enrollment) == 0
    summary = course_progress_summary(enrollment)
    assert summary["progress"] == 0
    assert summary["lectures"] == []


@pytest.mark.django_db
def test_lecture_from_another_course_is_rejected(instructor, student, make_course):
    course = make_course(instructor, lectures=1)
    other = make_course(instructor, title="Other", lectures=1)
    enrollment = Enrollment.objects.create(user=student, course=course)
    with pytest.raises(ValidationError):
        record_lecture_progress(enrollment, course_lectures(other).first(), completed=True)


@pytest.mark.django_db
def test_enrollment_for_lecture_requires_enrollment(instructor, student, make_course):
    course = make_course(instructor, lectures=1)
    lecture = course_lectures(course).first()
    with pytest.raises(PermissionDenied):
        enrollment_for_lecture(student, lecture)
    Enrollment.objects.create(user=student, course=course)
    assert enrollment_for_lecture(student, lecture).course_id == course.pk


@pytest.mark.django_db
def test_summary_lists_lectures_in_syllabus_order(instructor, student):
    course = Course.objects.create(instructor=instructor, title="Ordered")
    late = Section.objects.create(course=course, title="Second", order=2)
    early = Section.objects.create(course=course, title="First", order=1)
    Lecture.objects.create(section=late, title="c", order=1)
    Lecture.objects.create(section=early, title="b", order=2)
    Lecture.objects.create(section=early, title="a", order=1)
    enrollment = Enrollment.objects.create(user=student, course=course)

    summary = course_progress_summary(enrollment)
    assert [row["title"] for row in summary["lectures"]] == ["a", "b", "c"]
