from __future__ import annotations

from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from schedule.calendar import events_for_user
from schedule.models import CalendarEvent
from .serializers import CalendarEntrySerializer, CalendarEventSerializer
from .views import require_owner


def _parse_bound(value: str | None, name: str, *, end: bool = False) -> datetime | None:
    """Accept an ISO datetime or a plain date; dates cover the whole day."""
    if not value:
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        day = parse_date(value)
        if day is None:
            raise ValidationError({name: "Expected an ISO date or datetime"})
        parsed = datetime.combine(day, time.max if end else time.min)
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


class CalendarEventViewSet(viewsets.ModelViewSet):
    serializer_class = CalendarEventSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return CalendarEvent.objects.none()
        return CalendarEvent.objects.filter(created_by=self.request.user).select_related("course")

    def list(self, request, *args, **kwargs):
        start = _parse_bound(request.query_params.get("start"), "start")
        end = _parse_bound(request.query_params.get("end"), "end", end=True)
        if start and end and end < start:
            raise ValidationError({"end": "End must not be before start"})
        entries = events_for_user(request.user, start, end)
        return Response(CalendarEntrySerializer(entries, many=True).data)

    def perform_create(self, serializer):
        course = serializer.validated_data.get("course")
        if course is not None:
            require_owner(self.request.user, course)
        serializer.save(created_by=self.request.user)

    def perform_update(self, serializer):
        course = serializer.validated_data.get("course")
        if course is not None:
            require_owner(self.request.user, course)
        serializer.save()
