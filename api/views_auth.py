"""Session authentication, instructor directory and testimonials."""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.db.models import Count, IntegerField, Sum, Value
from django.db.models.functions import Coalesce
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from accounts.models import Role
from courses.models_feedback import Testimonial
from .permissions import IsAuthenticatedOrReadOnly
from .serializers import (
    InstructorSerializer,
    LoginSerializer,
    RegisterSerializer,
    TestimonialSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()


@api_view(["POST"])
@permission_classes([AllowAny])
def register(request):
    ser = RegisterSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    user = ser.save()
    login(request, user, backend="django.contrib.auth.backends.ModelBackend")
    logger.info("Registered user %s as %s", user.pk, user.profile.role)
    return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


@api_view(["POST"])
@permission_classes([AllowAny])
def login_view(request):
    """Log in with a username or an email address."""
    ser = LoginSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    identifier = ser.validated_data["username"].strip()
    username = identifier
    if "@" in identifier:
        match = User.objects.filter(email__iexact=identifier).values_list("username", flat=True).first()
        username = match or identifier
    user = authenticate(request, username=username, password=ser.validated_data["password"])
    if user is None:
        raise AuthenticationFailed("Invalid username or password")
    login(request, user)
    return Response(UserSerializer(user).data)


@api_view(["POST"])
@permission_classes([AllowAny])
def logout_view(request):
    logout(request)
    return Response({"message": "Logged out"})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def current_user(request):
    return Response(UserSerializer(request.user).data)


class InstructorViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = InstructorSerializer
    search_fields = ["username", "profile__full_name"]
    ordering_fields = ["username", "course_count", "total_students"]

    def get_queryset(self):
        return (
            User.objects.filter(profile__role=Role.INSTRUCTOR, is_active=True)
            .select_related("profile")
            .annotate(
                course_count=Count("courses_taught", distinct=True),
                total_students=Coalesce(Sum("courses_taught__total_students"), Value(0), output_field=IntegerField()),
            )
            .order_by("username")
        )


class TestimonialViewSet(mixins.ListModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    serializer_class = TestimonialSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get_queryset(self):
        return Testimonial.objects.filter(featured=True).select_related("user__profile")

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)
