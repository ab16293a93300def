"""Accounts models: user profile and roles.

Defines a `UserProfile` associated one-to-one with Django's `User`,
capturing the marketplace role (student/instructor/admin) and the public
fields shown on course pages. The profile is created automatically on
user creation.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Role(models.TextChoices):
    """Platform roles used for role-based guards."""

    STUDENT = "student", "Student"
    INSTRUCTOR = "instructor", "Instructor"
    ADMIN = "admin", "Admin"


class UserProfile(models.Model):
    """Profile linked to a Django auth user.

    - `role`: gate for instructor-only and admin-only endpoints
    - `full_name`, `bio`, `avatar_url`: shown on course and instructor pages
    """

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.STUDENT)

    full_name = models.CharField(max_length=200, blank=True)
    bio = models.TextField(blank=True)
    avatar_url = models.URLField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover (string repr convenience)
        return f"Profile<{self.user.username}:{self.role}>"


def role_of(user) -> str | None:
    """Return the role of an authenticated user, or None."""
    if not getattr(user, "is_authenticated", False):
        return None
    profile = getattr(user, "profile", None)
    return getattr(profile, "role", None)


def is_admin(user) -> bool:
    return bool(getattr(user, "is_staff", False) or role_of(user) == Role.ADMIN)
