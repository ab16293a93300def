"""Enrollment and review creation with uniqueness guarantees.

Both look up before inserting so the usual duplicate gets a readable
error, and rely on the (user, course) unique constraint for the racing
case.
"""
from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import IntegrityError, transaction

from .models import Course, Enrollment, is_enrolled
from .models_feedback import Review

logger = logging.getLogger(__name__)

ALREADY_ENROLLED = "Already enrolled in this course"
ALREADY_REVIEWED = "You have already reviewed this course"


def enroll(user, course: Course) -> Enrollment:
    if Enrollment.objects.filter(user=user, course=course).exists():
        raise ValidationError(ALREADY_ENROLLED)
    try:
        with transaction.atomic():
            enrollment = Enrollment.objects.create(user=user, course=course)
    except IntegrityError:
        raise ValidationError(ALREADY_ENROLLED)
    logger.info("User %s enrolled in course %s", user.pk, course.pk)
    return enrollment


def create_review(user, course: Course, *, rating: int, comment: str = "") -> Review:
    if not is_enrolled(user, course):
        raise PermissionDenied("You must be enrolled in the course to leave a review")
    if Review.objects.filter(user=user, course=course).exists():
        raise ValidationError(ALREADY_REVIEWED)
    try:
        with transaction.atomic():
            review = Review.objects.create(user=user, course=course, rating=rating, comment=comment)
    except IntegrityError:
        raise ValidationError(ALREADY_REVIEWED)
    return review
