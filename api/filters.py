from __future__ import annotations

import django_filters
from django.db.models import Q

from courses.models import Course, CourseLevel, CourseStatus


class CourseFilter(django_filters.FilterSet):
    category = django_filters.CharFilter(method="filter_category")
    instructor = django_filters.NumberFilter(field_name="instructor_id")
    level = django_filters.ChoiceFilter(choices=CourseLevel.choices)
    status = django_filters.ChoiceFilter(choices=CourseStatus.choices)

    class Meta:
        model = Course
        fields = ["category", "instructor", "level", "status"]

    def filter_category(self, queryset, name, value):
        # Accept either the category id or its name
        value = (value or "").strip()
        if not value:
            return queryset
        if value.isdigit():
            return queryset.filter(Q(category_id=int(value)) | Q(category__name__iexact=value))
        return queryset.filter(category__name__iexact=value)
