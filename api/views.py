"""Catalogue, content, enrollment and progress endpoints."""
from __future__ import annotations

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from assignments.models import Assignment
from courses.enrollment import create_review, enroll as enroll_user
from courses.models import Category, Course, Enrollment, Lecture, LectureProgress, Section, is_enrolled
from courses.progress import (
    course_lectures,
    course_progress_summary,
    enrollment_for_lecture,
    record_lecture_progress,
)
from .filters import CourseFilter
from .permissions import IsAuthenticatedOrReadOnly, IsCourseOwnerOrReadOnly, IsInstructor
from .serializers import (
    AssignmentSerializer,
    CategorySerializer,
    CourseDetailSerializer,
    CourseSerializer,
    EnrollmentSerializer,
    EnrollRequestSerializer,
    LectureProgressSerializer,
    LectureSerializer,
    ProgressRequestSerializer,
    ProgressUpdateSerializer,
    ReviewSerializer,
    SectionSerializer,
    StudentProgressSerializer,
)


def require_owner(user, course: Course) -> None:
    if not course.is_owner(user):
        raise PermissionDenied("Only the course instructor can do this")


def require_member(user, course: Course) -> None:
    if course.is_owner(user):
        return
    if not Enrollment.objects.filter(course=course, user=user).exists():
        raise PermissionDenied("Not enrolled in this course")


class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    pagination_class = None
    search_fields = ["name"]


class CourseViewSet(viewsets.ModelViewSet):
    queryset = Course.objects.select_related("instructor__profile", "category")
    serializer_class = CourseSerializer
    permission_classes = [IsAuthenticatedOrReadOnly, IsCourseOwnerOrReadOnly]
    filterset_class = CourseFilter
    search_fields = ["title", "description"]
    ordering_fields = ["title", "created_at", "price", "rating"]

    def get_permissions(self):
        if self.action == "create":
            return [IsAuthenticated(), IsInstructor()]
        return super().get_permissions()

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action == "retrieve":
            qs = qs.prefetch_related(
                Prefetch("sections", queryset=Section.objects.prefetch_related("lectures"))
            )
        return qs

    def get_serializer_class(self):
        if self.action == "retrieve":
            return CourseDetailSerializer
        return super().get_serializer_class()

    def perform_create(self, serializer):
        serializer.save(instructor=self.request.user)

    @action(detail=True, methods=["get", "post"], permission_classes=[IsAuthenticatedOrReadOnly])
    def sections(self, request, pk=None):
        course = self.get_object()
        if request.method == "GET":
            qs = course.sections.prefetch_related("lectures")
            return Response(SectionSerializer(qs, many=True).data)
        require_owner(request.user, course)
        ser = SectionSerializer(data={**request.data, "course": course.pk})
        ser.is_valid(raise_exception=True)
        ser.save()
        return Response(ser.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], permission_classes=[IsAuthenticatedOrReadOnly])
    def lectures(self, request, pk=None):
        course = self.get_object()
        return Response(LectureSerializer(course_lectures(course), many=True).data)

    @action(detail=True, methods=["get"], permission_classes=[IsAuthenticated])
    def students(self, request, pk=None):
        course = self.get_object()
        require_owner(request.user, course)
        qs = course.enrollments.select_related("user__profile").order_by("enrolled_at", "id")
        return Response(StudentProgressSerializer(qs, many=True).data)

    @action(detail=True, methods=["post"], permission_classes=[IsAuthenticated])
    def enroll(self, request, pk=None):
        course = self.get_object()
        enrollment = enroll_user(request.user, course)
        return Response(EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], permission_classes=[IsAuthenticated])
    def enrollment(self, request, pk=None):
        course = self.get_object()
        enrollment = get_object_or_404(Enrollment.objects.select_related("course"), course=course, user=request.user)
        return Response(EnrollmentSerializer(enrollment).data)

    @action(detail=True, methods=["get"], permission_classes=[IsAuthenticated])
    def progress(self, request, pk=None):
        course = self.get_object()
        try:
            enrollment = Enrollment.objects.get(course=course, user=request.user)
        except Enrollment.DoesNotExist:
            raise PermissionDenied("Not enrolled in this course")
        return Response(course_progress_summary(enrollment))

    @action(detail=True, methods=["get", "post"], permission_classes=[IsAuthenticatedOrReadOnly])
    def reviews(self, request, pk=None):
        course = self.get_object()
        if request.method == "GET":
            qs = course.reviews.select_related("user__profile")
            return Response(ReviewSerializer(qs, many=True).data)
        if not is_enrolled(request.user, course):
            raise PermissionDenied("You must be enrolled in the course to leave a review")
        ser = ReviewSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        review = create_review(
            request.user,
            course,
            rating=ser.validated_data["rating"],
            comment=ser.validated_data.get("comment", ""),
        )
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get", "post"], permission_classes=[IsAuthenticated])
    def assignments(self, request, pk=None):
        course = self.get_object()
        if request.method == "GET":
            require_member(request.user, course)
            qs = Assignment.objects.filter(course=course)
            return Response(AssignmentSerializer(qs, many=True).data)
        require_owner(request.user, course)
        ser = AssignmentSerializer(data={**request.data, "course": course.pk})
        ser.is_valid(raise_exception=True)
        ser.save()
        return Response(ser.data, status=status.HTTP_201_CREATED)


class SectionViewSet(
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Section.objects.select_related("course").prefetch_related("lectures")
    serializer_class = SectionSerializer
    permission_classes = [IsAuthenticatedOrReadOnly, IsCourseOwnerOrReadOnly]

    def perform_create(self, serializer):
        require_owner(self.request.user, serializer.validated_data["course"])
        serializer.save()

    def perform_update(self, serializer):
        course = serializer.validated_data.get("course")
        if course is not None:
            require_owner(self.request.user, course)
        serializer.save()


class LectureViewSet(
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Lecture.objects.select_related("section__course")
    serializer_class = LectureSerializer
    permission_classes = [IsAuthenticatedOrReadOnly, IsCourseOwnerOrReadOnly]

    def perform_create(self, serializer):
        require_owner(self.request.user, serializer.validated_data["section"].course)
        serializer.save()

    def perform_update(self, serializer):
        section = serializer.validated_data.get("section")
        if section is not None:
            require_owner(self.request.user, section.course)
        serializer.save()

    @action(detail=True, methods=["get", "post"], permission_classes=[IsAuthenticated])
    def progress(self, request, pk=None):
        lecture = self.get_object()
        enrollment = enrollment_for_lecture(request.user, lecture)
        if request.method == "GET":
            record = LectureProgress.objects.filter(enrollment=enrollment, lecture=lecture).first()
            if record is None:
                record = LectureProgress(enrollment=enrollment, lecture=lecture)
            return Response(LectureProgressSerializer(record).data)
        ser = ProgressUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        # The API only ever marks lectures complete
        completed = True if ser.validated_data.get("completed") else None
        record = record_lecture_progress(
            enrollment,
            lecture,
            completed=completed,
            position=ser.validated_data.get("last_watched_position"),
        )
        return Response(LectureProgressSerializer(record).data)


class EnrollmentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = EnrollmentSerializer
    permission_classes = [IsAuthenticated]
    ordering_fields = ["enrolled_at", "progress"]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Enrollment.objects.none()
        return Enrollment.objects.filter(user=self.request.user).select_related(
            "course__instructor__profile", "course__category"
        )

    def create(self, request, *args, **kwargs):
        req = EnrollRequestSerializer(data=request.data)
        req.is_valid(raise_exception=True)
        course = get_object_or_404(Course, pk=req.validated_data["course"])
        enrollment = enroll_user(request.user, course)
        return Response(self.get_serializer(enrollment).data, status=status.HTTP_201_CREATED)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def progress_update(request):
    """Record lecture progress against an explicit enrollment."""
    ser = ProgressRequestSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    enrollment = get_object_or_404(Enrollment, pk=ser.validated_data["enrollment"])
    if enrollment.user_id != request.user.id:
        raise DjangoPermissionDenied("This enrollment belongs to another user")
    lecture = get_object_or_404(Lecture.objects.select_related("section"), pk=ser.validated_data["lecture"])
    record = record_lecture_progress(
        enrollment,
        lecture,
        completed=True if ser.validated_data.get("completed") else None,
        position=ser.validated_data.get("last_watched_position"),
    )
    return Response(LectureProgressSerializer(record).data)
