"""Serializers for the REST API.

Derived course fields (totals, rating, student count) and enrollment
progress are always read-only; they are maintained by the service layer.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from accounts.models import Role
from assignments.models import Assignment, QuizQuestion, Submission
from courses.models import Category, Course, Enrollment, Lecture, LectureProgress, Section
from courses.models_feedback import Review, Testimonial
from messaging.models import DirectMessage
from schedule.models import CalendarEvent

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    role = serializers.SerializerMethodField()
    full_name = serializers.SerializerMethodField()
    avatar_url = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ("id", "username", "email", "role", "full_name", "avatar_url")

    def get_role(self, obj) -> str | None:
        profile = getattr(obj, "profile", None)
        return getattr(profile, "role", None)

    def get_full_name(self, obj) -> str:
        profile = getattr(obj, "profile", None)
        return getattr(profile, "full_name", "") or obj.get_full_name()

    def get_avatar_url(self, obj) -> str:
        profile = getattr(obj, "profile", None)
        return getattr(profile, "avatar_url", "")


class InstructorSerializer(UserSerializer):
    bio = serializers.CharField(source="profile.bio", read_only=True)
    course_count = serializers.IntegerField(read_only=True)
    total_students = serializers.IntegerField(read_only=True)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ("bio", "course_count", "total_students")


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})
    full_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    role = serializers.ChoiceField(choices=[Role.STUDENT, Role.INSTRUCTOR], default=Role.STUDENT)

    def validate_username(self, value: str) -> str:
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Username already exists")
        return value

    def validate_email(self, value: str) -> str:
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already registered")
        return value

    def validate(self, attrs):
        candidate = User(username=attrs["username"], email=attrs["email"])
        validate_password(attrs["password"], user=candidate)
        return attrs

    def create(self, validated_data):
        user = User.objects.create_user(
            username=validated_data["username"],
            email=validated_data["email"],
            password=validated_data["password"],
        )
        profile = user.profile
        profile.role = validated_data["role"]
        profile.full_name = validated_data.get("full_name", "")
        profile.save(update_fields=["role", "full_name", "updated_at"])
        return user


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(help_text="Username or email address")
    password = serializers.CharField(write_only=True, style={"input_type": "password"})


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ("id", "name", "description")


class CourseSerializer(serializers.ModelSerializer):
    instructor = UserSerializer(read_only=True)
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all(), allow_null=True, required=False)
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)

    class Meta:
        model = Course
        fields = (
            "id",
            "title",
            "description",
            "instructor",
            "category",
            "category_name",
            "subcategory",
            "price",
            "level",
            "image_url",
            "status",
            "total_lectures",
            "total_duration",
            "rating",
            "review_count",
            "total_students",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "total_lectures",
            "total_duration",
            "rating",
            "review_count",
            "total_students",
            "created_at",
            "updated_at",
        )

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price cannot be negative")
        return value


class LectureSerializer(serializers.ModelSerializer):
    section = serializers.PrimaryKeyRelatedField(queryset=Section.objects.select_related("course"))

    class Meta:
        model = Lecture
        fields = (
            "id",
            "section",
            "title",
            "description",
            "lecture_type",
            "video_url",
            "file_url",
            "content",
            "duration",
            "order",
        )


class SectionSerializer(serializers.ModelSerializer):
    course = serializers.PrimaryKeyRelatedField(queryset=Course.objects.all())
    lectures = LectureSerializer(many=True, read_only=True)

    class Meta:
        model = Section
        fields = ("id", "course", "title", "description", "order", "lectures")


class CourseDetailSerializer(CourseSerializer):
    sections = SectionSerializer(many=True, read_only=True)

    class Meta(CourseSerializer.Meta):
        fields = CourseSerializer.Meta.fields + ("sections",)


class EnrollmentSerializer(serializers.ModelSerializer):
    course = CourseSerializer(read_only=True)

    class Meta:
        model = Enrollment
        fields = ("id", "user", "course", "progress", "completed", "enrolled_at")
        read_only_fields = fields


class EnrollRequestSerializer(serializers.Serializer):
    course = serializers.IntegerField(min_value=1)


class StudentProgressSerializer(serializers.ModelSerializer):
    """Roster row for instructors."""

    user = UserSerializer(read_only=True)

    class Meta:
        model = Enrollment
        fields = ("id", "user", "progress", "completed", "enrolled_at")
        read_only_fields = fields


class LectureProgressSerializer(serializers.ModelSerializer):
    progress = serializers.IntegerField(source="enrollment.progress", read_only=True)
    course_completed = serializers.BooleanField(source="enrollment.completed", read_only=True)

    class Meta:
        model = LectureProgress
        fields = (
            "id",
            "enrollment",
            "lecture",
            "completed",
            "last_watched_position",
            "last_watched_at",
            "progress",
            "course_completed",
        )
        read_only_fields = fields


class ProgressUpdateSerializer(serializers.Serializer):
    completed = serializers.BooleanField(required=False)
    last_watched_position = serializers.IntegerField(required=False, min_value=0)


class ProgressRequestSerializer(serializers.Serializer):
    enrollment = serializers.IntegerField(min_value=1)
    lecture = serializers.IntegerField(min_value=1)
    completed = serializers.BooleanField(required=False)
    last_watched_position = serializers.IntegerField(required=False, min_value=0)


class ReviewSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)
    rating = serializers.IntegerField(min_value=1, max_value=5)

    class Meta:
        model = Review
        fields = ("id", "course", "user", "rating", "comment", "created_at")
        read_only_fields = ("course", "user", "created_at")


class TestimonialSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)
    rating = serializers.IntegerField(min_value=1, max_value=5)

    class Meta:
        model = Testimonial
        fields = ("id", "user", "text", "rating", "featured", "created_at")
        read_only_fields = ("user", "featured", "created_at")


class AssignmentSerializer(serializers.ModelSerializer):
    course = serializers.PrimaryKeyRelatedField(queryset=Course.objects.all())

    class Meta:
        model = Assignment
        fields = (
            "id",
            "course",
            "title",
            "description",
            "assignment_type",
            "due_date",
            "total_points",
            "attachment_url",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("created_at", "updated_at")

    def validate_total_points(self, value):
        if value <= 0:
            raise serializers.ValidationError("Total points must be positive")
        return value


class QuizQuestionSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuizQuestion
        fields = ("id", "assignment", "question_text", "question_type", "options", "correct_answer", "points", "order")
        read_only_fields = ("assignment",)

    def validate_options(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Options must be a list")
        return [str(v) for v in value]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if self.context.get("hide_answers"):
            data.pop("correct_answer", None)
        return data


class SubmissionSerializer(serializers.ModelSerializer):
    student = UserSerializer(read_only=True)

    class Meta:
        model = Submission
        fields = (
            "id",
            "assignment",
            "student",
            "submission_text",
            "attachment_url",
            "answers",
            "submitted_at",
            "status",
            "grade",
            "feedback",
            "graded_by",
            "graded_at",
        )
        read_only_fields = fields


class SubmitSerializer(serializers.Serializer):
    submission_text = serializers.CharField(required=False, allow_blank=True, default="")
    attachment_url = serializers.CharField(required=False, allow_blank=True, default="", max_length=500)
    answers = serializers.DictField(required=False, default=dict)


class GradeSerializer(serializers.Serializer):
    grade = serializers.FloatField()
    feedback = serializers.CharField(required=False, allow_blank=True, default="")


class DirectMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = DirectMessage
        fields = ("id", "sender", "recipient", "content", "created_at", "read")
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=2000)


class ConversationSerializer(serializers.Serializer):
    partner = UserSerializer()
    last_message = DirectMessageSerializer()
    unread = serializers.IntegerField()


class CalendarEventSerializer(serializers.ModelSerializer):
    course = serializers.PrimaryKeyRelatedField(queryset=Course.objects.all(), allow_null=True, required=False)

    class Meta:
        model = CalendarEvent
        fields = (
            "id",
            "course",
            "created_by",
            "title",
            "description",
            "event_type",
            "starts_at",
            "ends_at",
            "location",
            "created_at",
        )
        read_only_fields = ("created_by", "created_at")

    def validate(self, attrs):
        starts = attrs.get("starts_at", getattr(self.instance, "starts_at", None))
        ends = attrs.get("ends_at", getattr(self.instance, "ends_at", None))
        if starts and ends and ends < starts:
            raise serializers.ValidationError({"ends_at": "End must not be before start"})
        return attrs


class CalendarEntrySerializer(serializers.Serializer):
    """One merged calendar row: a stored event or an assignment deadline."""

    id = serializers.CharField()
    source = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    event_type = serializers.CharField()
    start = serializers.DateTimeField()
    end = serializers.DateTimeField(allow_null=True)
    location = serializers.CharField(allow_blank=True)
    course = serializers.IntegerField(allow_null=True)
