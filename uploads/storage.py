"""Store validated uploads for instructors."""
from __future__ import annotations

import logging

from .models import Upload, UploadKind, validate_upload

logger = logging.getLogger(__name__)


def store_upload(user, file, kind: str) -> Upload:
    validate_upload(file, kind)
    upload = Upload(uploaded_by=user, kind=UploadKind(kind), original_name=file.name)
    upload.file = file
    upload.save()
    logger.info(
        "Stored %s upload %s for user %s (%s bytes) at %s",
        kind,
        upload.pk,
        user.pk,
        upload.size_bytes,
        upload.file.name,
    )
    return upload
