from __future__ import annotations

import logging
import time

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.core.exceptions import ValidationError
from django.http import Http404

from .delivery import message_payload, send_message, user_group

logger = logging.getLogger(__name__)

RATE_LIMIT = 5
RATE_WINDOW = 5.0


@database_sync_to_async
def _store(sender, recipient_id, text: str):
    return send_message(sender, recipient_id, text)


class DirectMessageConsumer(AsyncJsonWebsocketConsumer):
    async def connect(self):
        user = self.scope.get("user")
        if not user or not user.is_authenticated:
            await self.close(code=4001)
            return
        self.user = user
        self.group_name = user_group(user.id)
        # Per-connection rate limiter: max 5 messages per 5 seconds
        self._rate_ts: list[float] = []
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def receive_json(self, content, **kwargs):
        content = content or {}
        text = str(content.get("message", "")).strip()
        if not text:
            return
        now = time.monotonic()
        self._rate_ts = [t for t in self._rate_ts if now - t < RATE_WINDOW]
        if len(self._rate_ts) >= RATE_LIMIT:
            await self.send_json({"type": "error", "message": "Rate limit exceeded"})
            return
        self._rate_ts.append(now)
        try:
            msg = await _store(self.user, content.get("to"), text)
        except (ValidationError, Http404) as exc:
            detail = exc.messages[0] if isinstance(exc, ValidationError) else str(exc)
            await self.send_json({"type": "error", "message": detail})
            return
        event = {"type": "message_new", "payload": message_payload(msg)}
        for uid in {msg.sender_id, msg.recipient_id}:
            await self.channel_layer.group_send(user_group(uid), event)

    async def message_new(self, event):
        await self.send_json({"type": "message", **event["payload"]})

    async def disconnect(self, code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
