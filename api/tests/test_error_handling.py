from __future__ import annotations

import logging

import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework.exceptions import NotAuthenticated

from api.exceptions import api_exception_handler


def test_unhandled_exception_becomes_500_with_message(caplog, monkeypatch):
    # The "api" logger does not propagate by default; caplog listens on the root logger
    monkeypatch.setattr(logging.getLogger("api"), "propagate", True)
    with caplog.at_level("ERROR", logger="api.exceptions"):
        resp = api_exception_handler(RuntimeError("database on fire"), {})
    assert resp.status_code == 500
    assert resp.data == {"message": "database on fire", "errors": None}
    assert "Unhandled API error" in caplog.text


def test_django_validation_error_becomes_400():
    resp = api_exception_handler(DjangoValidationError("Already enrolled in this course"), {})
    assert resp.status_code == 400
    assert resp.data["message"] == "Already enrolled in this course"
    assert resp.data["errors"] == ["Already enrolled in this course"]


def test_django_field_validation_error_keeps_field():
    resp = api_exception_handler(DjangoValidationError({"rating": ["Out of range"]}), {})
    assert resp.status_code == 400
    assert resp.data["message"] == "rating: Out of range"
    assert resp.data["errors"] == {"rating": ["Out of range"]}


def test_not_authenticated_is_401():
    resp = api_exception_handler(NotAuthenticated(), {})
    assert resp.status_code == 401
    assert resp.data["errors"] is None


def test_http404_is_404():
    resp = api_exception_handler(Http404("gone"), {})
    assert resp.status_code == 404
    assert resp.data["message"]
