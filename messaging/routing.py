from __future__ import annotations

from django.urls import re_path
from .consumers import DirectMessageConsumer


websocket_urlpatterns = [
    re_path(r"^ws/messages/$", DirectMessageConsumer.as_asgi()),
]
