"""
Sales reporting over the order and payment stores.

These are read-only aggregations. The summary runs several independent
queries, so under concurrent writes its parts may reflect slightly
different moments; that is acceptable for a dashboard view.
"""
import logging
from typing import Dict, Any

from django.db.models import Sum, Count

from orders.filters import SalesWindowFilter
from orders.models import Order
from orders.services import OrderService
from payments.models import Payment
from sales_backend.base import DEFAULT_LIMIT, DEFAULT_OFFSET, paginate

logger = logging.getLogger(__name__)


class SalesReportService:
    """Sales history and summary rollups for a venue/date window."""

    @staticmethod
    def filter_sales_history(filters=None):
        """
        Closed orders only; any status supplied in ``filters`` is replaced.
        """
        filters = dict(filters or {})
        filters["status"] = Order.OrderStatus.CLOSED
        return OrderService.filter_orders(filters)

    @staticmethod
    def get_sales_history(filters=None, limit=DEFAULT_LIMIT, offset=DEFAULT_OFFSET) -> list:
        queryset = SalesReportService.filter_sales_history(filters)
        return OrderService.with_items(paginate(queryset, limit, offset))

    @staticmethod
    def get_sales_summary(start_date=None, end_date=None, venue_id=None) -> Dict[str, Any]:
        """
        Order and revenue rollup for the orders created in the window.

        Returns:
            total_orders: orders matching the venue/date filters
            total_revenue_cents: sum of completed payments on those orders
            total_payments: number of completed payments on those orders
            by_payment_method: completed payment count per method
            by_status: order count per status
        """
        window = SalesWindowFilter(
            data={"start_date": start_date, "end_date": end_date, "venue_id": venue_id},
            queryset=Order.objects.all(),
        )
        orders = window.qs
        completed_payments = Payment.objects.filter(
            status=Payment.PaymentStatus.COMPLETED, order__in=orders
        )

        total_orders = orders.aggregate(total=Count("id", distinct=True))["total"] or 0
        payment_totals = completed_payments.aggregate(
            revenue=Sum("amount_cents"), count=Count("id", distinct=True)
        )

        by_payment_method = {
            row["method"]: row["count"]
            for row in completed_payments.values("method")
            .annotate(count=Count("id"))
            .order_by("method")
        }
        by_status = {
            row["status"]: row["count"]
            for row in orders.values("status").annotate(count=Count("id")).order_by("status")
        }

        summary = {
            "total_orders": total_orders,
            "total_revenue_cents": payment_totals["revenue"] or 0,
            "total_payments": payment_totals["count"] or 0,
            "by_payment_method": by_payment_method,
            "by_status": by_status,
        }
        logger.info(
            f"Sales summary venue={venue_id or 'all'} {start_date or '-'}..{end_date or '-'}: "
            f"{summary['total_orders']} orders, {summary['total_revenue_cents']} cents"
        )
        return summary
