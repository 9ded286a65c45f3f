"""
Shared base components for the sales apps.
"""

from .filters import BaseFilterSet, DateBoundFilter, normalize_datetime_value
from .pagination import DEFAULT_LIMIT, DEFAULT_OFFSET, SalesPagination, paginate

__all__ = [
    # Filters
    'BaseFilterSet',
    'DateBoundFilter',
    'normalize_datetime_value',

    # Pagination
    'DEFAULT_LIMIT',
    'DEFAULT_OFFSET',
    'SalesPagination',
    'paginate',
]
