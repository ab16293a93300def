"""Assignments, quiz questions, submissions and grading."""
from __future__ import annotations

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from assignments import grading
from assignments.models import Assignment, Submission
from .permissions import IsCourseOwnerOrReadOnly
from .serializers import (
    AssignmentSerializer,
    GradeSerializer,
    QuizQuestionSerializer,
    SubmissionSerializer,
    SubmitSerializer,
)
from .views import require_owner


class AssignmentViewSet(viewsets.ModelViewSet):
    """Assignments of courses the caller teaches or is enrolled in."""

    serializer_class = AssignmentSerializer
    permission_classes = [IsAuthenticated, IsCourseOwnerOrReadOnly]
    filterset_fields = ["course", "assignment_type"]
    ordering_fields = ["due_date", "created_at", "title"]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Assignment.objects.none()
        user = self.request.user
        return (
            Assignment.objects.filter(Q(course__instructor=user) | Q(course__enrollments__user=user))
            .select_related("course")
            .distinct()
        )

    def perform_create(self, serializer):
        require_owner(self.request.user, serializer.validated_data["course"])
        serializer.save()

    def perform_update(self, serializer):
        course = serializer.validated_data.get("course")
        if course is not None:
            require_owner(self.request.user, course)
        serializer.save()

    @action(detail=True, methods=["get", "post"], permission_classes=[IsAuthenticated])
    def questions(self, request, pk=None):
        assignment = self.get_object()
        owner = assignment.course.is_owner(request.user)
        if request.method == "GET":
            ser = QuizQuestionSerializer(assignment.questions.all(), many=True, context={"hide_answers": not owner})
            return Response(ser.data)
        require_owner(request.user, assignment.course)
        ser = QuizQuestionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        question = grading.add_question(assignment, **ser.validated_data)
        return Response(QuizQuestionSerializer(question).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], permission_classes=[IsAuthenticated])
    def submit(self, request, pk=None):
        assignment = self.get_object()
        ser = SubmitSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        submission = grading.submit(
            assignment,
            request.user,
            text=ser.validated_data["submission_text"],
            attachment_url=ser.validated_data["attachment_url"],
            answers=ser.validated_data["answers"],
        )
        return Response(SubmissionSerializer(submission).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], permission_classes=[IsAuthenticated])
    def submissions(self, request, pk=None):
        assignment = self.get_object()
        qs = assignment.submissions.select_related("student__profile")
        if not assignment.course.is_owner(request.user):
            qs = qs.filter(student=request.user)
        return Response(SubmissionSerializer(qs, many=True).data)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def grade(request, pk: int):
    submission = get_object_or_404(Submission.objects.select_related("assignment__course"), pk=pk)
    require_owner(request.user, submission.assignment.course)
    ser = GradeSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    submission = grading.grade_submission(
        submission,
        grade=ser.validated_data["grade"],
        feedback=ser.validated_data["feedback"],
        graded_by=request.user,
    )
    return Response(SubmissionSerializer(submission).data)
