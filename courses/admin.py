from django.contrib import admin

from .models import Category, Course, Section, Lecture, Enrollment, LectureProgress
from .models_feedback import Review, Testimonial


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name",)
    search_fields = ("name",)


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("title", "instructor", "category", "status", "total_lectures", "total_students", "rating")
    list_filter = ("status", "level", "category")
    search_fields = ("title", "description", "instructor__username")
    readonly_fields = ("total_lectures", "total_duration", "rating", "review_count", "total_students")


@admin.register(Section)
class SectionAdmin(admin.ModelAdmin):
    list_display = ("title", "course", "order")
    search_fields = ("title", "course__title")


@admin.register(Lecture)
class LectureAdmin(admin.ModelAdmin):
    list_display = ("title", "section", "lecture_type", "duration", "order")
    list_filter = ("lecture_type",)
    search_fields = ("title", "section__course__title")


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ("course", "user", "progress", "completed", "enrolled_at")
    list_filter = ("completed",)
    search_fields = ("course__title", "user__username")


@admin.register(LectureProgress)
class LectureProgressAdmin(admin.ModelAdmin):
    list_display = ("enrollment", "lecture", "completed", "last_watched_position", "last_watched_at")
    list_filter = ("completed",)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("course", "user", "rating", "created_at")
    list_filter = ("rating",)


@admin.register(Testimonial)
class TestimonialAdmin(admin.ModelAdmin):
    list_display = ("user", "rating", "featured", "created_at")
    list_filter = ("featured",)
    list_editable = ("featured",)
