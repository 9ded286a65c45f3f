from rest_framework.pagination import LimitOffsetPagination
from rest_framework.response import Response

DEFAULT_LIMIT = 100
DEFAULT_OFFSET = 0


class SalesPagination(LimitOffsetPagination):
    """
    Limit/offset pagination for every sales listing.

    A missing, non-numeric or non-positive ``limit`` falls back to 100 and an
    unusable ``offset`` to 0. Listings are plain JSON arrays, so the
    paginated response carries no count/next/previous envelope.
    """

    default_limit = DEFAULT_LIMIT
    max_limit = None

    def get_paginated_response(self, data):
        return Response(data)


def paginate(queryset, limit=DEFAULT_LIMIT, offset=DEFAULT_OFFSET):
    """Slice a queryset for direct service callers that already hold ints."""
    return list(queryset[offset:offset + limit])
