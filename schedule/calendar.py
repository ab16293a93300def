"""Merge course events, personal events and assignment deadlines into one feed."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from django.db.models import Q

from assignments.models import Assignment, AssignmentType
from courses.models import Course
from .models import CalendarEvent, EventType


def visible_course_ids(user) -> list[int]:
    return list(
        Course.objects.filter(Q(instructor=user) | Q(enrollments__user=user)).values_list("id", flat=True).distinct()
    )


def _event_entry(ev: CalendarEvent) -> dict[str, Any]:
    return {
        "id": f"event-{ev.pk}",
        "source": "event",
        "title": ev.title,
        "description": ev.description,
        "event_type": ev.event_type,
        "start": ev.starts_at,
        "end": ev.ends_at,
        "location": ev.location,
        "course": ev.course_id,
    }


def _assignment_entry(a: Assignment) -> dict[str, Any]:
    kind = EventType.EXAM if a.assignment_type == AssignmentType.EXAM else EventType.ASSIGNMENT
    return {
        "id": f"assignment-{a.pk}",
        "source": "assignment",
        "title": f"{a.course.title}: {a.title} due",
        "description": a.description,
        "event_type": kind.value,
        "start": a.due_date,
        "end": None,
        "location": "",
        "course": a.course_id,
    }


def events_for_user(user, start: datetime | None = None, end: datetime | None = None) -> list[dict[str, Any]]:
    """Calendar entries visible to `user`, sorted by start.

    Covers events of courses the user teaches or is enrolled in, the user's
    personal events, and due dates of assignments in those courses.
    """
    course_ids = visible_course_ids(user)
    events = CalendarEvent.objects.filter(
        Q(course_id__in=course_ids) | Q(course__isnull=True, created_by=user)
    )
    assignments = Assignment.objects.filter(course_id__in=course_ids).select_related("course")
    if start is not None:
        events = events.filter(starts_at__gte=start)
        assignments = assignments.filter(due_date__gte=start)
    if end is not None:
        events = events.filter(starts_at__lte=end)
        assignments = assignments.filter(due_date__lte=end)
    entries = [_event_entry(ev) for ev in events] + [_assignment_entry(a) for a in assignments]
    entries.sort(key=lambda e: (e["start"], e["id"]))
    return entries
