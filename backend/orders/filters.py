import django_filters
from sales_backend.base import BaseFilterSet
from .models import Order


class OrderFilter(BaseFilterSet):
    """
    Filters for order listings. Every filter is optional; the created-at
    window (start_date/end_date) comes from BaseFilterSet.
    """

    venue_id = django_filters.CharFilter(field_name="venue_id")
    table_id = django_filters.CharFilter(field_name="table_id")
    waiter_id = django_filters.CharFilter(field_name="waiter_id")
    cashier_id = django_filters.CharFilter(field_name="cashier_id")
    status = django_filters.ChoiceFilter(choices=Order.OrderStatus.choices)

    class Meta:
        model = Order
        fields = []


class SalesWindowFilter(BaseFilterSet):
    """Venue and date window applied by the sales summary."""

    venue_id = django_filters.CharFilter(field_name="venue_id")

    class Meta:
        model = Order
        fields = []
