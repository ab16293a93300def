"""Role and ownership permissions for the REST API."""
from __future__ import annotations

from rest_framework.permissions import BasePermission, SAFE_METHODS

from accounts.models import Role, is_admin, role_of


def course_of(obj):
    """Resolve the course a content object belongs to."""
    for path in ("course", "section.course", "assignment.course"):
        cur = obj
        try:
            for attr in path.split("."):
                cur = getattr(cur, attr)
        except AttributeError:
            continue
        return cur
    return obj


class IsAuthenticatedOrReadOnly(BasePermission):
    def has_permission(self, request, view):  # noqa: D401
        return bool(request.method in SAFE_METHODS or (request.user and request.user.is_authenticated))


class IsInstructor(BasePermission):
    message = "Instructor access required"

    def has_permission(self, request, view):
        return role_of(request.user) == Role.INSTRUCTOR


class IsAdmin(BasePermission):
    message = "Admin access required"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and is_admin(request.user))


class IsCourseOwnerOrReadOnly(BasePermission):
    """Writes on a course, or anything inside one, are for its instructor."""

    message = "Only the course instructor can modify this course"

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        course = course_of(obj)
        return bool(request.user and request.user.is_authenticated and course.instructor_id == request.user.id)
