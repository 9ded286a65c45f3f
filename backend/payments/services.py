from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone
import logging

from orders.models import Order
from sales_backend.base import DEFAULT_LIMIT, DEFAULT_OFFSET, paginate
from sales_backend.exceptions import (
    InvalidStateError,
    OrderNotFound,
    PaymentNotFound,
    SalesValidationError,
)
from .filters import PaymentFilter
from .models import Payment

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Payment Service for recording settlements against open orders.

    Payments are created pending and advanced to completed right away; there
    is no asynchronous settlement step.
    """

    # State transition map - defines valid transitions for Payment.PaymentStatus
    VALID_TRANSITIONS = {
        Payment.PaymentStatus.PENDING: [Payment.PaymentStatus.COMPLETED],
        Payment.PaymentStatus.COMPLETED: [],
        Payment.PaymentStatus.FAILED: [],
        Payment.PaymentStatus.REFUNDED: [],
    }

    def __init__(self, clock=None):
        self.clock = clock or timezone.now

    @staticmethod
    def _validate_transition(current_status: str, target_status: str) -> bool:
        valid_targets = PaymentService.VALID_TRANSITIONS.get(current_status, [])
        return target_status in valid_targets

    @staticmethod
    def _transition_payment_status(payment: Payment, target_status: str, completed_at=None) -> Payment:
        """
        Moves a payment to a new status, rejecting transitions outside VALID_TRANSITIONS.
        """
        if not PaymentService._validate_transition(payment.status, target_status):
            raise InvalidStateError(
                f"Invalid state transition from {payment.status} to {target_status}."
            )

        old_status = payment.status
        payment.status = target_status
        payment.completed_at = completed_at
        payment.save(update_fields=["status", "completed_at"])

        logger.info(f"Payment {payment.id}: Status transition {old_status} -> {target_status}")
        return payment

    @staticmethod
    def _validate_payment(amount_cents, method):
        if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents < 1:
            raise SalesValidationError("amount_cents must be at least 1")
        if method not in Payment.PaymentMethod.values:
            raise SalesValidationError(f"'{method}' is not a valid payment method")

    @staticmethod
    def record_completed_payment(
        order: Order,
        cashier_id,
        amount_cents,
        method,
        completed_at,
        reference_number=None,
        notes=None,
    ) -> Payment:
        """
        Inserts a payment already in its completed state. Used while closing an
        order, where the caller owns the transaction and the order lock.
        """
        PaymentService._validate_payment(amount_cents, method)
        return Payment.objects.create(
            order=order,
            cashier_id=cashier_id,
            amount_cents=amount_cents,
            method=method,
            status=Payment.PaymentStatus.COMPLETED,
            reference_number=reference_number,
            notes=notes,
            created_at=completed_at,
            completed_at=completed_at,
        )

    def create_payment(
        self, order_id, amount_cents, method, cashier_id, reference_number=None, notes=None
    ) -> Payment:
        """
        Records a standalone payment against an open order.

        The payment is written pending and then completed. Both writes happen
        under a lock on the order row so a concurrent close cannot slip in
        between the status check and the insert. The order itself is not
        modified: paying the full amount this way does not close it.
        """
        self._validate_payment(amount_cents, method)

        with transaction.atomic():
            try:
                order = Order.objects.select_for_update().get(pk=order_id)
            except (Order.DoesNotExist, DjangoValidationError, ValueError):
                raise OrderNotFound(order_id)

            if order.is_closed:
                raise InvalidStateError("cannot add payment to closed order")

            now = self.clock()
            payment = Payment.objects.create(
                order=order,
                cashier_id=cashier_id,
                amount_cents=amount_cents,
                method=method,
                status=Payment.PaymentStatus.PENDING,
                reference_number=reference_number,
                notes=notes,
                created_at=now,
            )
            self._transition_payment_status(
                payment, Payment.PaymentStatus.COMPLETED, completed_at=now
            )

        logger.info(
            f"Recorded {method} payment of {amount_cents} cents on order "
            f"{order.order_number} by cashier {cashier_id}"
        )
        return payment

    @staticmethod
    def get_payment(payment_id) -> Payment:
        try:
            return Payment.objects.get(pk=payment_id)
        except (Payment.DoesNotExist, DjangoValidationError, ValueError):
            raise PaymentNotFound(payment_id)

    @staticmethod
    def filter_payments(filters=None):
        """
        Payments matching ``filters``, newest first, as an unevaluated queryset.

        ``filters`` accepts order_id, cashier_id, method, status, start_date
        and end_date.
        """
        filterset = PaymentFilter(data=dict(filters or {}), queryset=Payment.objects.all())
        if not filterset.is_valid():
            raise SalesValidationError(
                "invalid payment filter",
                details={"fields": {k: list(v) for k, v in filterset.errors.items()}},
            )
        return filterset.qs

    @staticmethod
    def list_payments(filters=None, limit=DEFAULT_LIMIT, offset=DEFAULT_OFFSET) -> list:
        return paginate(PaymentService.filter_payments(filters), limit, offset)
