from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from sales_backend.base import SalesPagination
from sales_backend.permissions import IsCashier, get_principal_id
from .serializers import (
    OrderSerializer,
    OrderCreateSerializer,
    OrderUpdateSerializer,
    OrderCloseSerializer,
)
from .services import OrderService


class OrderServiceMixin:
    """Gives views a fresh OrderService per request."""

    def get_order_service(self):
        return OrderService()


class OrderListCreateView(OrderServiceMixin, APIView):
    """
    GET: list orders (newest first, items included, payments omitted).
    POST: open a new order; the caller is recorded as waiter unless the body names one.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        service = self.get_order_service()
        queryset = service.filter_orders(request.query_params.dict())

        paginator = SalesPagination()
        orders = service.with_items(paginator.paginate_queryset(queryset, request, view=self))
        return paginator.get_paginated_response(OrderSerializer(orders, many=True).data)

    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = self.get_order_service().create_order(
            table_id=data["table_id"],
            venue_id=data["venue_id"],
            items=data["items"],
            waiter_id=data.get("waiter_id") or get_principal_id(request),
            notes=data.get("notes"),
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(OrderServiceMixin, APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id):
        order = self.get_order_service().get_order(order_id)
        return Response(OrderSerializer(order).data)

    def put(self, request, order_id):
        serializer = OrderUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = self.get_order_service().update_order(
            order_id,
            status=data.get("status"),
            items=data.get("items"),
            discount_cents=data.get("discount_cents"),
            notes=data.get("notes"),
        )
        return Response(OrderSerializer(order).data)


class OrderCloseView(OrderServiceMixin, APIView):
    """Settle an order with one or more payments and close it. The caller is the cashier."""

    permission_classes = [IsAuthenticated]

    def post(self, request, order_id):
        serializer = OrderCloseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = self.get_order_service().close_order(
            order_id,
            payments=data["payments"],
            cashier_id=get_principal_id(request),
            notes=data.get("notes"),
        )
        return Response(OrderSerializer(order).data)


class CashierOrderListView(OrderServiceMixin, APIView):
    """Orders still awaiting settlement (pending, confirmed or ready). Cashiers only."""

    permission_classes = [IsAuthenticated, IsCashier]

    def get(self, request):
        service = self.get_order_service()
        queryset = service.filter_closable_orders(request.query_params.dict())

        paginator = SalesPagination()
        orders = service.with_items(paginator.paginate_queryset(queryset, request, view=self))
        return paginator.get_paginated_response(OrderSerializer(orders, many=True).data)
