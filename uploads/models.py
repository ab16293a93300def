"""Uploaded lecture videos and course documents.

Uploads are limited to 50 MB and to a per-kind extension allow-list. The
extension is the only type check. The client-declared MIME type is
ignored; the stored `mime` is guessed from the file name for display.
"""
from __future__ import annotations

import mimetypes
import time
from pathlib import Path

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.text import get_valid_filename


class UploadKind(models.TextChoices):
    VIDEO = "video", "Video"
    DOCUMENT = "document", "Document"


ALLOWED_EXT = {
    UploadKind.VIDEO: (".mp4", ".webm", ".avi", ".mov"),
    UploadKind.DOCUMENT: (".pdf", ".doc", ".docx", ".txt", ".ppt", ".pptx"),
}


def max_upload_bytes() -> int:
    return int(getattr(settings, "UPLOAD_MAX_BYTES", 50 * 1024 * 1024))


def validate_upload(file, kind: str) -> None:
    """Reject oversized files and extensions outside the kind's allow-list."""
    size = getattr(file, "size", None)
    limit = max_upload_bytes()
    if size is not None and size > limit:
        raise ValidationError(f"File too large (max {limit // (1024 * 1024)} MB)")
    allowed = ALLOWED_EXT[UploadKind(kind)]
    ext = Path(getattr(file, "name", "") or "").suffix.lower()
    if ext not in allowed:
        label = "video" if kind == UploadKind.VIDEO else "document"
        raise ValidationError(
            f"Invalid file type. Only {label} files are allowed ({', '.join(allowed)})"
        )


def upload_path(instance: "Upload", filename: str) -> str:
    # Millisecond prefix keeps repeated uploads of the same name apart.
    stamp = int(time.time() * 1000)
    return f"{instance.kind}s/{stamp}-{get_valid_filename(Path(filename).name)}"


class Upload(models.Model):
    """A file accepted from an instructor."""

    uploaded_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="uploads")
    kind = models.CharField(max_length=16, choices=UploadKind.choices)
    file = models.FileField(upload_to=upload_path, max_length=300)
    original_name = models.CharField(max_length=255)
    size_bytes = models.PositiveBigIntegerField(default=0)
    mime = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def save(self, *args, **kwargs):
        # Derive size and MIME from the incoming file for display.
        f = self.file
        self.size_bytes = getattr(f, "size", None) or self.size_bytes or 0
        self.mime = mimetypes.guess_type(self.original_name or getattr(f, "name", ""))[0] or ""
        super().save(*args, **kwargs)

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.kind}:{self.original_name}"
