from __future__ import annotations

import pytest
from django.test import Client


@pytest.mark.django_db
@pytest.mark.security
def test_csp_header_present_on_api():
    r = Client().get("/api/courses")
    assert r.status_code == 200
    csp = r.headers["Content-Security-Policy"]
    assert "default-src 'self'" in csp
    assert "frame-ancestors 'none'" in csp
    assert "cdn.jsdelivr.net" not in csp


@pytest.mark.django_db
def test_openapi_schema_lists_core_paths():
    r = Client().get("/api/schema")
    assert r.status_code == 200
    body = r.content.decode("utf-8", errors="ignore")
    assert "openapi" in body.lower()
    for path in ("/api/courses", "/api/enrollments", "/api/lectures/{id}/progress"):
        assert path in body


@pytest.mark.django_db
def test_docs_page_allows_swagger_assets():
    r = Client().get("/api/docs")
    assert r.status_code == 200
    assert "cdn.jsdelivr.net" in r.headers["Content-Security-Policy"]


@pytest.mark.django_db
@pytest.mark.security
def test_csrf_enforced_for_session_writes(make_user):
    make_user("csrfu")
    c = Client(enforce_csrf_checks=True)
    assert c.login(username="csrfu", password="Strong#Passw0rd")
    r = c.post("/api/testimonials", {"text": "hi", "rating": 5}, content_type="application/json")
    assert r.status_code == 403
