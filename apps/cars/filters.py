"""FilterSet definitions for car listing and search."""

from __future__ import annotations

from functools import reduce
import operator

import django_filters  # type: ignore
from django.db.models import Q, QuerySet  # type: ignore

from .models import Car


class CarFilterSet(django_filters.FilterSet):
    """Filters used by the catalog list endpoint."""

    brand = django_filters.CharFilter(field_name="brand", lookup_expr="icontains")
    model = django_filters.CharFilter(field_name="model", lookup_expr="icontains")
    year = django_filters.NumberFilter(field_name="year", lookup_expr="exact")
    year_min = django_filters.NumberFilter(field_name="year", lookup_expr="gte")
    year_max = django_filters.NumberFilter(field_name="year", lookup_expr="lte")
    price_min = django_filters.NumberFilter(field_name="price_per_day", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="price_per_day", lookup_expr="lte")
    is_available = django_filters.BooleanFilter(field_name="is_available")

    class Meta:
        model = Car
        fields = ["brand", "model", "year", "is_available"]


def search_cars(queryset: QuerySet, query: str | None) -> QuerySet:
    """Free-text search over the brand/model projection.

    Every whitespace separated term must match either the brand or the
    model, so "toyota cor" finds a Toyota Corolla.
    """
    terms = (query or "").split()
    if not terms:
        return queryset.none()
    conditions = [Q(brand__icontains=term) | Q(model__icontains=term) for term in terms]
    return queryset.filter(reduce(operator.and_, conditions))
