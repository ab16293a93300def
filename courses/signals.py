"""Keep derived course columns in sync.

- Lecture and section changes refresh `total_lectures`/`total_duration` and every
  enrollment percentage of the course. A move between courses refreshes both.
- Enrollment changes refresh `total_students`.
- Review changes refresh `rating` (mean, one decimal) and `review_count`.

Updates go through querysets so they are safe while a course is being
deleted in cascade.
"""
from __future__ import annotations

from django.db.models import Avg, Count, Sum
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from .models import Course, Enrollment, Lecture, Section
from .models_feedback import Review
from .progress import refresh_course_progress


def refresh_course_totals(course_id: int) -> None:
    agg = Lecture.objects.filter(section__course_id=course_id).aggregate(n=Count("id"), seconds=Sum("duration"))
    Course.objects.filter(pk=course_id).update(total_lectures=agg["n"] or 0, total_duration=agg["seconds"] or 0)


def refresh_course_rating(course_id: int) -> None:
    agg = Review.objects.filter(course_id=course_id).aggregate(avg=Avg("rating"), n=Count("id"))
    rating = round(float(agg["avg"] or 0.0), 1)
    Course.objects.filter(pk=course_id).update(rating=rating, review_count=agg["n"] or 0)


def refresh_course_students(course_id: int) -> None:
    n = Enrollment.objects.filter(course_id=course_id).count()
    Course.objects.filter(pk=course_id).update(total_students=n)


def _course_id_for_section(section_id: int) -> int | None:
    return Section.objects.filter(pk=section_id).values_list("course_id", flat=True).first()


def _refresh_course(course_id: int | None, *, progress: bool) -> None:
    if course_id is None:
        return
    refresh_course_totals(course_id)
    if progress:
        refresh_course_progress(course_id)


@receiver(pre_save, sender=Lecture)
def remember_lecture_course(sender, instance: Lecture, **kwargs):
    instance._previous_course_id = None
    if instance.pk:
        instance._previous_course_id = (
            Lecture.objects.filter(pk=instance.pk).values_list("section__course_id", flat=True).first()
        )


@receiver(post_save, sender=Lecture)
@receiver(post_delete, sender=Lecture)
def lecture_changed(sender, instance: Lecture, **kwargs):
    course_id = _course_id_for_section(instance.section_id)
    previous = getattr(instance, "_previous_course_id", None)
    created = kwargs.get("created")
    if created is False and previous is not None and previous != course_id:
        # Moved between courses: a removal from one and an addition to the other.
        _refresh_course(previous, progress=True)
        _refresh_course(course_id, progress=True)
        return
    # Duration edits do not change the lecture count; only re-derive on add/remove.
    _refresh_course(course_id, progress=created is None or created)


@receiver(pre_save, sender=Section)
def remember_section_course(sender, instance: Section, **kwargs):
    instance._previous_course_id = None
    if instance.pk:
        instance._previous_course_id = Section.objects.filter(pk=instance.pk).values_list("course_id", flat=True).first()


@receiver(post_save, sender=Section)
def section_changed(sender, instance: Section, created: bool, **kwargs):
    previous = getattr(instance, "_previous_course_id", None)
    if created or previous is None or previous == instance.course_id:
        return
    _refresh_course(previous, progress=True)
    _refresh_course(instance.course_id, progress=True)


@receiver(post_delete, sender=Section)
def section_deleted(sender, instance: Section, **kwargs):
    _refresh_course(instance.course_id, progress=True)


@receiver(post_save, sender=Enrollment)
@receiver(post_delete, sender=Enrollment)
def enrollment_changed(sender, instance: Enrollment, **kwargs):
    if kwargs.get("created") is False:
        return
    refresh_course_students(instance.course_id)


@receiver(post_save, sender=Review)
@receiver(post_delete, sender=Review)
def review_changed(sender, instance: Review, **kwargs):
    refresh_course_rating(instance.course_id)
