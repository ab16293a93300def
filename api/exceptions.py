"""Single error shape for the API: ``{"message": ..., "errors": ...}``."""
from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


def _first_message(data) -> str:
    if isinstance(data, dict):
        for key, value in data.items():
            msg = _first_message(value)
            if msg:
                if key in ("detail", "non_field_errors"):
                    return msg
                return f"{key}: {msg}"
        return ""
    if isinstance(data, (list, tuple)):
        for item in data:
            msg = _first_message(item)
            if msg:
                return msg
        return ""
    return str(data) if data is not None else ""


def _from_django(exc: DjangoValidationError) -> ValidationError:
    if hasattr(exc, "error_dict"):
        return ValidationError(detail=exc.message_dict)
    return ValidationError(detail=exc.messages)


def api_exception_handler(exc, context):
    """Map domain and DRF exceptions onto JSON errors.

    - Django ``ValidationError`` from the service layer becomes 400
    - anonymous access is reported as 401 even under session auth
    - anything unhandled is logged and returned as 500 with its message
    """
    if isinstance(exc, DjangoValidationError):
        exc = _from_django(exc)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view") if context else None
        logger.exception("Unhandled API error in %s", type(view).__name__ if view else "unknown view", exc_info=exc)
        set_rollback()
        return Response(
            {"message": str(exc) or "Internal server error", "errors": None},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    errors = response.data if isinstance(exc, ValidationError) else None
    response.data = {"message": _first_message(response.data) or "Request failed", "errors": errors}
    return response
