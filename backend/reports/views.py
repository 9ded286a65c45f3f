from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.serializers import OrderSerializer
from orders.services import OrderService
from sales_backend.base import SalesPagination
from .services import SalesReportService


class SalesHistoryView(APIView):
    """Closed orders, newest first. Any status query parameter is ignored."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        queryset = SalesReportService.filter_sales_history(request.query_params.dict())

        paginator = SalesPagination()
        orders = OrderService.with_items(paginator.paginate_queryset(queryset, request, view=self))
        return paginator.get_paginated_response(OrderSerializer(orders, many=True).data)


class SalesSummaryView(APIView):
    """
    Revenue and order counts for an optional venue and created-at window.

    Query params: start_date, end_date (YYYY-MM-DD or ISO datetime), venue_id
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        params = request.query_params
        summary = SalesReportService.get_sales_summary(
            start_date=params.get("start_date"),
            end_date=params.get("end_date"),
            venue_id=params.get("venue_id"),
        )
        return Response(summary)
