"""Catalogue, content and enrollment models.

A `Course` is owned by an instructor and split into ordered `Section`s,
each holding ordered `Lecture`s. An `Enrollment` links a user to a course
and carries the aggregate progress derived from the per-lecture
`LectureProgress` rows (see `courses.progress`).
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class CourseLevel(models.TextChoices):
    BEGINNER = "beginner", "Beginner"
    INTERMEDIATE = "intermediate", "Intermediate"
    ADVANCED = "advanced", "Advanced"


class CourseStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"


class Course(models.Model):
    """A course authored by an instructor.

    `total_lectures`, `total_duration`, `rating`, `review_count` and
    `total_students` are derived columns maintained by `courses.signals`.
    """

    instructor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="courses_taught")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="courses")
    subcategory = models.CharField(max_length=100, blank=True)
    price = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    level = models.CharField(max_length=16, choices=CourseLevel.choices, default=CourseLevel.BEGINNER)
    image_url = models.URLField(blank=True)
    status = models.CharField(max_length=16, choices=CourseStatus.choices, default=CourseStatus.DRAFT)

    total_lectures = models.PositiveIntegerField(default=0)
    total_duration = models.PositiveIntegerField(default=0)  # seconds
    rating = models.FloatField(default=0.0)
    review_count = models.PositiveIntegerField(default=0)
    total_students = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["title", "id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.title}"

    def is_owner(self, user) -> bool:
        return bool(user and user.is_authenticated and self.instructor_id == user.id)


class Section(models.Model):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="sections")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    order = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["order", "id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.course_id}/{self.order}: {self.title}"


class LectureType(models.TextChoices):
    VIDEO = "video", "Video"
    DOCUMENT = "document", "Document"
    QUIZ = "quiz", "Quiz"


class Lecture(models.Model):
    section = models.ForeignKey(Section, on_delete=models.CASCADE, related_name="lectures")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    lecture_type = models.CharField(max_length=16, choices=LectureType.choices, default=LectureType.VIDEO)
    video_url = models.CharField(max_length=500, blank=True)
    file_url = models.CharField(max_length=500, blank=True)
    content = models.TextField(blank=True)
    duration = models.PositiveIntegerField(default=0)  # seconds
    order = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["order", "id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.section_id}/{self.order}: {self.title}"


class Enrollment(models.Model):
    """Link a user to a course.

    `progress` is a whole percentage (0..100) and `completed` is true only
    when every lecture of the course has been completed.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="enrollments")
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="enrollments")
    progress = models.PositiveSmallIntegerField(default=0)
    completed = models.BooleanField(default=False)
    enrolled_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("user", "course")
        ordering = ["-enrolled_at", "id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.user_id}->{self.course_id} ({self.progress}%)"


class LectureProgress(models.Model):
    enrollment = models.ForeignKey(Enrollment, on_delete=models.CASCADE, related_name="lecture_progress")
    lecture = models.ForeignKey(Lecture, on_delete=models.CASCADE, related_name="progress_records")
    completed = models.BooleanField(default=False)
    last_watched_position = models.PositiveIntegerField(default=0)  # seconds
    last_watched_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ("enrollment", "lecture")
        ordering = ["lecture__section__order", "lecture__order", "lecture_id"]
        verbose_name_plural = "lecture progress"

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.enrollment_id}:{self.lecture_id}={'done' if self.completed else self.last_watched_position}"


def is_enrolled(user, course: Course) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False
    return Enrollment.objects.filter(course=course, user=user).exists()


# Feedback models live in their own module; import them so Django registers them.
from .models_feedback import Review, Testimonial  # noqa: E402,F401
