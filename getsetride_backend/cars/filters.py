"""FilterSet and ordering for the public car listing."""

import django_filters
from django.db.models import Q

from .models import Car


class CarFilterSet(django_filters.FilterSet):
    """
    One optional filter per search dimension.

    Price bounds are applied independently of each other, so a ``minPrice``
    above ``maxPrice`` simply yields an empty page.
    """

    category = django_filters.CharFilter(field_name='category', lookup_expr='iexact')
    transmission = django_filters.CharFilter(field_name='transmission', lookup_expr='iexact')
    fuelType = django_filters.CharFilter(field_name='fuel_type', lookup_expr='iexact')
    city = django_filters.CharFilter(field_name='city', lookup_expr='icontains')
    minPrice = django_filters.NumberFilter(field_name='price_per_day', lookup_expr='gte')
    maxPrice = django_filters.NumberFilter(field_name='price_per_day', lookup_expr='lte')
    seats = django_filters.NumberFilter(field_name='seats', lookup_expr='gte')
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = Car
        fields = ['category', 'transmission', 'fuelType', 'city', 'minPrice', 'maxPrice', 'seats', 'search']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(brand__icontains=value) | Q(model__icontains=value) | Q(description__icontains=value)
        )


SORT_FIELDS = {
    'createdAt': 'created_at',
    'pricePerDay': 'price_per_day',
    'year': 'year',
    'rating': 'rating_average',
    'seats': 'seats',
}

DEFAULT_SORT = '-createdAt'


def resolve_ordering(sort):
    """Translate an API sort key such as ``-pricePerDay`` into ORM ordering."""
    sort = (sort or DEFAULT_SORT).strip()
    descending = sort.startswith('-')
    field = SORT_FIELDS.get(sort.lstrip('-'))
    if field is None:
        return resolve_ordering(DEFAULT_SORT)
    return ['-' + field if descending else field, '-id']
