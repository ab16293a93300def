from __future__ import annotations

import pytest
from django.test import Client

from messaging.models import DirectMessage

PASSWORD = "Strong#Passw0rd"


def login(username: str) -> Client:
    c = Client()
    assert c.login(username=username, password=PASSWORD)
    return c


@pytest.mark.django_db
def test_send_and_read_thread(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    a = login("alice")
    b = login("bob")

    r = a.post(f"/api/messages/{bob.pk}", {"content": "Hi Bob"}, content_type="application/json")
    assert r.status_code == 201
    assert r.json()["sender"] == alice.pk
    b.post(f"/api/messages/{alice.pk}", {"content": "Hey"}, content_type="application/json")
    a.post(f"/api/messages/{bob.pk}", {"content": "How are you?"}, content_type="application/json")

    convo = b.get("/api/messages").json()
    assert len(convo) == 1
    assert convo[0]["partner"]["username"] == "alice"
    assert convo[0]["last_message"]["content"] == "How are you?"
    assert convo[0]["unread"] == 2

    thread = b.get(f"/api/messages/{alice.pk}").json()
    assert [m["content"] for m in thread] == ["Hi Bob", "Hey", "How are you?"]
    assert b.get("/api/messages").json()[0]["unread"] == 0
    assert DirectMessage.objects.filter(recipient=alice, read=False).count() == 1


@pytest.mark.django_db
def test_send_validation(make_user):
    alice = make_user("alice")
    a = login("alice")
    assert a.post(f"/api/messages/{alice.pk}", {"content": "me"}, content_type="application/json").status_code == 400
    bob = make_user("bob")
    assert a.post(f"/api/messages/{bob.pk}", {"content": ""}, content_type="application/json").status_code == 400
    assert a.post(f"/api/messages/{bob.pk}", {"content": "   "}, content_type="application/json").status_code == 400
    assert a.post("/api/messages/9999", {"content": "hello"}, content_type="application/json").status_code == 404
    assert Client().get("/api/messages").status_code == 401
    assert not DirectMessage.objects.exists()
