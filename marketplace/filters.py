import django_filters
from django.db.models import Q

from .models import Project, ProjectCategory


class ProjectFilter(django_filters.FilterSet):
    """
    Query filters shared by the project list and marketplace browse endpoints.

    Parameter names follow the public API (``minPrice``, ``maxPrice``).
    """

    category = django_filters.ChoiceFilter(choices=ProjectCategory.choices)
    minPrice = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    maxPrice = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Project
        fields = ["category"]

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))
