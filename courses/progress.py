"""Lecture progress tracking and enrollment aggregation.

Every progress event updates the single `LectureProgress` row for
(enrollment, lecture) and then re-derives the enrollment percentage from
scratch: completed lectures over all lectures in every section of the
course. The recount is O(lectures in course) and runs inside the same
transaction as the row update.
"""
from __future__ import annotations

import logging
import math

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from .models import Course, Enrollment, Lecture, LectureProgress

logger = logging.getLogger(__name__)


def course_lectures(course: Course | int) -> QuerySet[Lecture]:
    """All lectures of a course in syllabus order."""
    course_id = course.pk if isinstance(course, Course) else course
    return (
        Lecture.objects.filter(section__course_id=course_id)
        .select_related("section")
        .order_by("section__order", "section_id", "order", "id")
    )


def progress_percent(completed: int, total: int) -> int:
    """Whole percentage, rounded half up; 100 only when nothing is left.

    >>> progress_percent(1, 8)
    13
    >>> progress_percent(199, 200)
    99
    """
    if total <= 0:
        return 0
    if completed >= total:
        return 100
    return min(99, math.floor(100 * completed / total + 0.5))


def compute_progress(enrollment: Enrollment) -> int:
    total = course_lectures(enrollment.course_id).count()
    done = LectureProgress.objects.filter(
        enrollment=enrollment,
        completed=True,
        lecture__section__course_id=enrollment.course_id,
    ).count()
    return progress_percent(done, total)


def refresh_enrollment_progress(enrollment: Enrollment) -> Enrollment:
    """Recount and store `progress` and `completed` on the enrollment."""
    progress = compute_progress(enrollment)
    enrollment.progress = progress
    enrollment.completed = progress == 100
    # Queryset update: the row may already be gone during a cascade delete.
    Enrollment.objects.filter(pk=enrollment.pk).update(progress=progress, completed=enrollment.completed)
    return enrollment


def refresh_course_progress(course_id: int) -> int:
    """Re-derive every enrollment of a course after its lectures changed."""
    count = 0
    for enrollment in Enrollment.objects.filter(course_id=course_id):
        refresh_enrollment_progress(enrollment)
        count += 1
    return count


def enrollment_for_lecture(user, lecture: Lecture) -> Enrollment:
    """Return the caller's enrollment in the lecture's course or raise 403."""
    try:
        return Enrollment.objects.select_related("course").get(user=user, course_id=lecture.section.course_id)
    except Enrollment.DoesNotExist:
        raise PermissionDenied("Not enrolled in this course")


@transaction.atomic
def record_lecture_progress(
    enrollment: Enrollment,
    lecture: Lecture,
    *,
    completed: bool | None = None,
    position: int | None = None,
) -> LectureProgress:
    """Apply a progress event and update the enrollment aggregate.

    `completed=None` leaves the completion flag untouched, so playback
    position updates never un-complete a lecture. Passing `False`
    explicitly is allowed here and lowers the percentage.
    """
    if lecture.section.course_id != enrollment.course_id:
        raise ValidationError("Lecture does not belong to this course")
    if position is not None and position < 0:
        raise ValidationError("Position must be zero or greater")

    record, created = LectureProgress.objects.select_for_update().get_or_create(
        enrollment=enrollment, lecture=lecture
    )
    if completed is not None:
        record.completed = completed
    if position is not None:
        record.last_watched_position = position
    record.last_watched_at = timezone.now()
    record.save(update_fields=["completed", "last_watched_position", "last_watched_at"])

    before = enrollment.progress
    refresh_enrollment_progress(enrollment)
    record.enrollment = enrollment
    logger.info(
        "Progress user=%s lecture=%s completed=%s course=%s %s%%->%s%%",
        enrollment.user_id,
        lecture.pk,
        record.completed,
        enrollment.course_id,
        before,
        enrollment.progress,
    )
    if enrollment.completed and before != 100:
        logger.info("Enrollment %s completed course %s", enrollment.pk, enrollment.course_id)
    return record


def course_progress_summary(enrollment: Enrollment) -> dict:
    """Per-lecture state for one enrollment, in syllabus order."""
    records = {
        p.lecture_id: p
        for p in LectureProgress.objects.filter(enrollment=enrollment)
    }
    lectures = []
    for lecture in course_lectures(enrollment.course_id):
        p = records.get(lecture.pk)
        lectures.append(
            {
                "lecture": lecture.pk,
                "section": lecture.section_id,
                "title": lecture.title,
                "completed": bool(p and p.completed),
                "last_watched_position": p.last_watched_position if p else 0,
                "last_watched_at": p.last_watched_at if p else None,
            }
        )
    return {
        "enrollment": enrollment.pk,
        "course": enrollment.course_id,
        "progress": enrollment.progress,
        "completed": enrollment.completed,
        "lectures": lectures,
    }
