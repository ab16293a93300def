from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models import Avg
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from courses.models import Course, Enrollment
from courses.models_feedback import Review
from .permissions import IsAdmin

User = get_user_model()


@api_view(["GET"])
@permission_classes([IsAdmin])
def platform_stats(request):
    avg = Review.objects.aggregate(avg=Avg("rating"))["avg"]
    return Response(
        {
            "total_users": User.objects.count(),
            "total_courses": Course.objects.count(),
            "total_enrollments": Enrollment.objects.count(),
            "total_reviews": Review.objects.count(),
            "average_rating": round(avg, 1) if avg is not None else 0.0,
        }
    )
