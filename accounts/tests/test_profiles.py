from __future__ import annotations

import pytest
from django.contrib.auth.models import AnonymousUser, User

from accounts.models import Role, UserProfile, is_admin, role_of


@pytest.mark.django_db
def test_profile_created_with_student_role():
    u = User.objects.create_user(username="p1", password="pw", first_name="Ada", last_name="Lovelace")
    assert UserProfile.objects.filter(user=u).count() == 1
    assert u.profile.role == Role.STUDENT
    assert u.profile.full_name == "Ada Lovelace"
    assert role_of(u) == Role.STUDENT
    assert not is_admin(u)


@pytest.mark.django_db
def test_superuser_starts_as_admin():
    su = User.objects.create_superuser(username="root", password="pw", email="root@ex.com")
    assert su.profile.role == Role.ADMIN
    assert is_admin(su)


def test_anonymous_has_no_role():
    assert role_of(AnonymousUser()) is None
    assert not is_admin(AnonymousUser())
