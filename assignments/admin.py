from django.contrib import admin

from .models import Assignment, QuizQuestion, Submission


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = ("title", "course", "assignment_type", "due_date", "total_points")
    list_filter = ("assignment_type", "course")
    search_fields = ("title", "course__title")


@admin.register(QuizQuestion)
class QuizQuestionAdmin(admin.ModelAdmin):
    list_display = ("assignment", "order", "question_type", "points")
    list_filter = ("assignment",)
    search_fields = ("question_text",)


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ("assignment", "student", "status", "grade", "submitted_at")
    list_filter = ("status", "assignment")
    search_fields = ("student__username",)
