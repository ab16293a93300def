from __future__ import annotations

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from messaging.delivery import conversations, push_message, send_message, thread
from .serializers import ConversationSerializer, DirectMessageSerializer, SendMessageSerializer

User = get_user_model()


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def conversation_list(request):
    return Response(ConversationSerializer(conversations(request.user), many=True).data)


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated])
def conversation_thread(request, user_id: int):
    """Read the thread with one user, or send them a message."""
    partner = get_object_or_404(User, pk=user_id)
    if request.method == "GET":
        qs = thread(request.user, partner.pk)
        return Response(DirectMessageSerializer(qs, many=True).data)
    ser = SendMessageSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    msg = send_message(request.user, partner.pk, ser.validated_data["content"])
    push_message(msg)
    return Response(DirectMessageSerializer(msg).data, status=status.HTTP_201_CREATED)
