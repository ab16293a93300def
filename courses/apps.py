from django.apps import AppConfig


class CoursesConfig(AppConfig):
    """App configuration for the catalogue, enrollments and progress."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "courses"

    def ready(self) -> None:  # pragma: no cover (import-time hook)
        from . import signals  # noqa: F401
        return super().ready()
