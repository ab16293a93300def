from __future__ import annotations

from django.conf import settings
from django.db import models

from courses.models import Course


class EventType(models.TextChoices):
    LECTURE = "lecture", "Lecture"
    MEETING = "meeting", "Meeting"
    EXAM = "exam", "Exam"
    ASSIGNMENT = "assignment", "Assignment"
    OTHER = "other", "Other"


class CalendarEvent(models.Model):
    """A dated event, either attached to a course or personal to its creator."""

    course = models.ForeignKey(Course, null=True, blank=True, on_delete=models.CASCADE, related_name="events")
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="calendar_events")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    event_type = models.CharField(max_length=16, choices=EventType.choices, default=EventType.OTHER)
    starts_at = models.DateTimeField(db_index=True)
    ends_at = models.DateTimeField(null=True, blank=True)
    location = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["starts_at", "id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.title} @ {self.starts_at:%Y-%m-%d %H:%M}"
