from django.apps import AppConfig


class MessagingConfig(AppConfig):
    """App configuration for direct messaging (REST plus Channels)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "messaging"
