from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from sales_backend.base import SalesPagination
from sales_backend.permissions import IsCashier, get_principal_id
from .serializers import PaymentSerializer, PaymentCreateSerializer
from .services import PaymentService


class PaymentListCreateView(APIView):
    """
    GET: list payments, newest first.
    POST: record a payment against an open order. The caller is the cashier.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        queryset = PaymentService.filter_payments(request.query_params.dict())

        paginator = SalesPagination()
        payments = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(PaymentSerializer(payments, many=True).data)

    def post(self, request):
        return create_payment_response(request, order_id=None)


class PaymentDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, payment_id):
        payment = PaymentService.get_payment(payment_id)
        return Response(PaymentSerializer(payment).data)


class CashierOrderPaymentView(APIView):
    """Record a payment against the order in the URL. Cashiers only."""

    permission_classes = [IsAuthenticated, IsCashier]

    def post(self, request, order_id):
        return create_payment_response(request, order_id=order_id)


def create_payment_response(request, order_id=None):
    serializer = PaymentCreateSerializer(data=request.data, order_in_url=order_id is not None)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    payment = PaymentService().create_payment(
        order_id=order_id or data["order_id"],
        amount_cents=data["amount_cents"],
        method=data["method"],
        cashier_id=get_principal_id(request),
        reference_number=data.get("reference_number"),
        notes=data.get("notes"),
    )
    return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)
