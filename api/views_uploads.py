"""Instructor uploads of lecture videos and course documents."""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from uploads.models import UploadKind
from uploads.storage import store_upload
from .permissions import IsInstructor


def _handle(request, kind: str):
    file = request.FILES.get(kind)
    if file is None:
        raise ValidationError("No files were uploaded")
    upload = store_upload(request.user, file, kind)
    return Response(
        {
            "message": "File uploaded successfully",
            "id": upload.pk,
            "file_url": upload.file.url,
            "name": upload.original_name,
            "size": upload.size_bytes,
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(["POST"])
@permission_classes([IsAuthenticated, IsInstructor])
@parser_classes([MultiPartParser, FormParser])
def upload_video(request):
    return _handle(request, UploadKind.VIDEO)


@api_view(["POST"])
@permission_classes([IsAuthenticated, IsInstructor])
@parser_classes([MultiPartParser, FormParser])
def upload_document(request):
    return _handle(request, UploadKind.DOCUMENT)
