from django.contrib import admin

from .models import CalendarEvent


@admin.register(CalendarEvent)
class CalendarEventAdmin(admin.ModelAdmin):
    list_display = ("title", "event_type", "course", "created_by", "starts_at")
    list_filter = ("event_type",)
    search_fields = ("title", "course__title")
