"""Send and fan out direct messages.

Both the REST endpoint and the socket consumer go through `send_message`
so validation and persistence stay in one place.
"""
from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.http import Http404

from .models import DirectMessage

logger = logging.getLogger(__name__)

MAX_LENGTH = 2000


def user_group(user_id: int) -> str:
    return f"user_{user_id}"


def message_payload(msg: DirectMessage) -> dict:
    return {
        "id": msg.id,
        "sender": msg.sender_id,
        "recipient": msg.recipient_id,
        "content": msg.content,
        "created_at": msg.created_at.isoformat(),
        "read": msg.read,
    }


def send_message(sender, recipient_id, content: str) -> DirectMessage:
    text = (content or "").strip()
    if not text:
        raise ValidationError("Message content is required")
    if len(text) > MAX_LENGTH:
        raise ValidationError(f"Message is too long (max {MAX_LENGTH} characters)")
    try:
        recipient_id = int(recipient_id)
    except (TypeError, ValueError):
        raise ValidationError("Invalid recipient")
    if recipient_id == sender.id:
        raise ValidationError("You cannot message yourself")
    try:
        recipient = User.objects.get(pk=recipient_id, is_active=True)
    except User.DoesNotExist:
        raise Http404("User not found")
    msg = DirectMessage.objects.create(sender=sender, recipient=recipient, content=text)
    logger.info("Message %s from user %s to user %s", msg.pk, sender.pk, recipient.pk)
    return msg


def push_message(msg: DirectMessage) -> None:
    """Push a stored message to the live sockets of both participants."""
    layer = get_channel_layer()
    if layer is None:
        return
    event = {"type": "message_new", "payload": message_payload(msg)}
    for uid in {msg.sender_id, msg.recipient_id}:
        async_to_sync(layer.group_send)(user_group(uid), event)


def thread(user, partner_id: int):
    """Messages between `user` and the partner, oldest first; marks incoming as read."""
    qs = DirectMessage.objects.filter(
        Q(sender=user, recipient_id=partner_id) | Q(sender_id=partner_id, recipient=user)
    ).order_by("created_at", "id")
    DirectMessage.objects.filter(sender_id=partner_id, recipient=user, read=False).update(read=True)
    return qs


def conversations(user) -> list[dict]:
    """One entry per partner: the latest message and the unread count, newest first."""
    qs = (
        DirectMessage.objects.filter(Q(sender=user) | Q(recipient=user))
        .select_related("sender__profile", "recipient__profile")
        .order_by("-created_at", "-id")
    )
    seen: dict[int, dict] = {}
    for msg in qs:
        partner = msg.recipient if msg.sender_id == user.id else msg.sender
        entry = seen.get(partner.id)
        if entry is None:
            entry = seen[partner.id] = {"partner": partner, "last_message": msg, "unread": 0}
        if msg.recipient_id == user.id and not msg.read:
            entry["unread"] += 1
    return list(seen.values())
