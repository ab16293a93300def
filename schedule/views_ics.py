"""iCalendar export of a course's events and assignment deadlines."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from django.http import HttpRequest, HttpResponse, JsonResponse

from courses.models import Course


def _ical_escape(s: str) -> str:
    return s.replace("\\", "\\\\").replace(",", "\\,").replace(";", "\\;").replace("\n", "\\n")


def _stamp(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def course_calendar(request: HttpRequest, pk: int) -> HttpResponse:
    course = Course.objects.filter(pk=pk).first()
    if course is None:
        # Same body as the API exception handler; this view is plain Django.
        return JsonResponse({"message": "Course not found", "errors": None}, status=404)
    dtstamp = _stamp(datetime.now(timezone.utc))
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//eduNest//Course Calendar//EN",
        f"X-WR-CALNAME:{_ical_escape(course.title)}",
    ]
    for ev in course.events.all():
        end = ev.ends_at or ev.starts_at + timedelta(hours=1)
        lines += [
            "BEGIN:VEVENT",
            f"UID:event-{ev.pk}@edunest",
            f"DTSTAMP:{dtstamp}",
            f"DTSTART:{_stamp(ev.starts_at)}",
            f"DTEND:{_stamp(end)}",
            f"SUMMARY:{_ical_escape(ev.title)}",
        ]
        if ev.location:
            lines.append(f"LOCATION:{_ical_escape(ev.location)}")
        lines.append("END:VEVENT")
    for a in course.assignments.all():
        lines += [
            "BEGIN:VEVENT",
            f"UID:assignment-{a.pk}@edunest",
            f"DTSTAMP:{dtstamp}",
            f"DTSTART:{_stamp(a.due_date)}",
            f"SUMMARY:{_ical_escape(f'{course.title}: {a.title} due')}",
            "END:VEVENT",
        ]
    lines.append("END:VCALENDAR")
    body = "\r\n".join(lines) + "\r\n"
    resp = HttpResponse(body, content_type="text/calendar")
    resp["Content-Disposition"] = f"attachment; filename=course-{course.pk}.ics"
    return resp
