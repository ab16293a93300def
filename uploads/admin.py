from django.contrib import admin

from .models import Upload


@admin.register(Upload)
class UploadAdmin(admin.ModelAdmin):
    list_display = ("original_name", "kind", "uploaded_by", "size_bytes", "created_at")
    list_filter = ("kind",)
    search_fields = ("original_name", "uploaded_by__username")
