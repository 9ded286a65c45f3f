import django_filters
from sales_backend.base import BaseFilterSet
from .models import Payment


class PaymentFilter(BaseFilterSet):
    """Filters for payment listings; the created-at window comes from BaseFilterSet."""

    order_id = django_filters.UUIDFilter(field_name="order_id")
    cashier_id = django_filters.CharFilter(field_name="cashier_id")
    method = django_filters.ChoiceFilter(choices=Payment.PaymentMethod.choices)
    status = django_filters.ChoiceFilter(choices=Payment.PaymentStatus.choices)

    class Meta:
        model = Payment
        fields = []
