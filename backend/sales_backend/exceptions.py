"""
Sales error taxonomy and the DRF exception handler that maps it to responses.

Services raise these exceptions; views never translate them by hand.
"""
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class SalesError(Exception):
    """Base exception for order and payment workflow errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "sales_error"

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def as_dict(self):
        data = {"error": self.message, "code": self.code}
        data.update(self.details)
        return data


class SalesValidationError(SalesError):
    """Raised when input violates a business constraint (empty items, bad amounts)."""

    code = "validation_error"


class NotFoundError(SalesError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class OrderNotFound(NotFoundError):
    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class PaymentNotFound(NotFoundError):
    def __init__(self, payment_id):
        self.payment_id = payment_id
        super().__init__(f"Payment {payment_id} not found")


class ProductNotFound(NotFoundError):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class InvalidStateError(SalesError):
    """Raised when an operation is not allowed for the current order status."""

    code = "invalid_state"


class InsufficientPaymentError(SalesError):
    code = "insufficient_payment"

    def __init__(self, expected_cents, paid_cents):
        self.expected_cents = expected_cents
        self.paid_cents = paid_cents
        super().__init__(
            f"insufficient payment: expected {expected_cents} cents, got {paid_cents} cents",
            details={"expected_cents": expected_cents, "paid_cents": paid_cents},
        )


class StoreFailure(SalesError):
    """Raised when a backing store (database, catalog service) fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "store_failure"


class CatalogUnavailable(StoreFailure):
    code = "catalog_unavailable"


def sales_exception_handler(exc, context):
    """
    Map SalesError subclasses and database failures to JSON error responses.
    Everything else goes through DRF's default handler.
    """
    if isinstance(exc, DatabaseError):
        logger.error(f"Database failure: {exc}", exc_info=exc)
        exc = StoreFailure("storage backend failure")

    if isinstance(exc, SalesError):
        request = context.get("request")
        path = request.path if request is not None else ""
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__} on {path}: {exc.message}", exc_info=exc)
        else:
            logger.info(f"{exc.__class__.__name__} on {path}: {exc.message}")
        return Response(exc.as_dict(), status=exc.status_code)

    return exception_handler(exc, context)
