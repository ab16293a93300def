"""API routes for eduNest.

Resources are registered on a router without trailing slashes; the
remaining function endpoints and the OpenAPI schema/docs sit alongside.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from schedule.views_ics import course_calendar
from .views import (
    CategoryViewSet,
    CourseViewSet,
    EnrollmentViewSet,
    LectureViewSet,
    SectionViewSet,
    progress_update,
)
from .views_admin import platform_stats
from .views_assignments import AssignmentViewSet, grade
from .views_auth import (
    InstructorViewSet,
    TestimonialViewSet,
    current_user,
    login_view,
    logout_view,
    register,
)
from .views_messaging import conversation_list, conversation_thread
from .views_schedule import CalendarEventViewSet
from .views_uploads import upload_document, upload_video

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register(r"api/categories", CategoryViewSet, basename="categories")
router.register(r"api/courses", CourseViewSet, basename="courses")
router.register(r"api/sections", SectionViewSet, basename="sections")
router.register(r"api/lectures", LectureViewSet, basename="lectures")
router.register(r"api/enrollments", EnrollmentViewSet, basename="enrollments")
router.register(r"api/instructors", InstructorViewSet, basename="instructors")
router.register(r"api/testimonials", TestimonialViewSet, basename="testimonials")
router.register(r"api/assignments", AssignmentViewSet, basename="assignments")
router.register(r"api/calendar/events", CalendarEventViewSet, basename="calendar-events")

urlpatterns = [
    path("api/schema", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/register", register, name="register"),
    path("api/login", login_view, name="login"),
    path("api/logout", logout_view, name="logout"),
    path("api/user", current_user, name="current-user"),
    path("api/progress", progress_update, name="progress"),
    path("api/submissions/<int:pk>/grade", grade, name="submission-grade"),
    path("api/messages", conversation_list, name="conversations"),
    path("api/messages/<int:user_id>", conversation_thread, name="conversation-thread"),
    path("api/upload/video", upload_video, name="upload-video"),
    path("api/upload/document", upload_document, name="upload-document"),
    path("api/admin/stats", platform_stats, name="admin-stats"),
    path("api/courses/<int:pk>/calendar.ics", course_calendar, name="course-calendar"),
    path("", include(router.urls)),
]
