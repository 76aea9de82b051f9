import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class CarPagination(PageNumberPagination):
    """
    ``page``/``limit`` pagination for the car listing.

    Pages past the end come back empty instead of raising 404, and the body
    carries ``total`` and ``totalPages`` so clients can render a pager.
    """

    page_size = 12
    page_size_query_param = 'limit'
    max_page_size = 100

    def paginate_queryset(self, queryset, request, view=None):
        self.request = request
        self.limit = self.get_page_size(request)
        try:
            self.current_page = max(int(request.query_params.get(self.page_query_param, 1)), 1)
        except (TypeError, ValueError):
            self.current_page = 1
        self.total = queryset.count()
        offset = (self.current_page - 1) * self.limit
        return list(queryset[offset:offset + self.limit])

    def get_paginated_response(self, data):
        return Response({
            'success': True,
            'count': len(data),
            'total': self.total,
            'totalPages': math.ceil(self.total / self.limit),
            'currentPage': self.current_page,
            'cars': data,
        })
