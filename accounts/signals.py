"""Signals for automatic profile management.

On user creation, create a default `UserProfile`. Superusers start as
admins; everyone else starts as a student and may be promoted to
instructor at registration time.
"""
from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import UserProfile, Role


@receiver(post_save, sender=User)
def create_user_profile(sender, instance: User, created: bool, **kwargs):  # noqa: D401
    """Create a profile for new users."""
    if created:
        role = Role.ADMIN if instance.is_superuser else Role.STUDENT
        full_name = f"{instance.first_name} {instance.last_name}".strip()
        UserProfile.objects.create(user=instance, role=role, full_name=full_name)
