from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone
import logging

from orders.calculators import OrderCalculator, line_subtotal_cents, total_cents
from orders.catalog import get_catalog
from orders.filters import OrderFilter
from orders.models import Order, OrderItem
from orders.numbering import OrderNumberGenerator
from payments.models import Payment
from payments.services import PaymentService
from sales_backend.base import DEFAULT_LIMIT, DEFAULT_OFFSET, paginate
from sales_backend.exceptions import (
    InsufficientPaymentError,
    InvalidStateError,
    OrderNotFound,
    SalesValidationError,
)

logger = logging.getLogger(__name__)


class OrderService:
    """
    Core service for order lifecycle management - creating, updating, closing orders.

    Collaborators are injected so callers (and tests) control pricing, time
    and order numbering:
        catalog: BaseCatalog used to price items (defaults to settings.SALES_CATALOG)
        clock: callable returning an aware datetime (defaults to timezone.now)
        number_generator: callable returning a new order number
    """

    # Orders a cashier may still settle
    CLOSABLE_STATUSES = (
        Order.OrderStatus.PENDING,
        Order.OrderStatus.CONFIRMED,
        Order.OrderStatus.READY,
    )

    def __init__(self, catalog=None, clock=None, number_generator=None):
        self.catalog = catalog if catalog is not None else get_catalog()
        self.clock = clock or timezone.now
        self.number_generator = number_generator or OrderNumberGenerator(clock=self.clock)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, table_id, venue_id, items, waiter_id=None, notes=None) -> Order:
        """
        Opens a new order with its items priced from the catalog.

        The order row and all of its items are written in one transaction.
        """
        if not table_id:
            raise SalesValidationError("table_id is required")
        if not venue_id:
            raise SalesValidationError("venue_id is required")
        self._validate_items(items)

        now = self.clock()
        lines = self._price_items(items, now)
        totals = OrderCalculator(lines).calculate_totals()

        with transaction.atomic():
            order = Order.objects.create(
                order_number=self.number_generator(now),
                table_id=table_id,
                venue_id=venue_id,
                waiter_id=waiter_id or None,
                status=Order.OrderStatus.PENDING,
                notes=notes,
                created_at=now,
                updated_at=now,
                **totals,
            )
            self._attach_items(order, lines)

        logger.info(
            f"Created order {order.order_number} for table {table_id} at venue {venue_id}: "
            f"{len(lines)} items, total {order.total_cents} cents"
        )
        return self.get_order(order.pk)

    def update_order(self, order_id, status=None, items=None, discount_cents=None, notes=None) -> Order:
        """
        Applies a partial update to an open order and recomputes its totals.

        - status: overwritten as given (closing goes through close_order)
        - items: when non-empty, replaces the whole item set, re-priced
        - discount_cents: overwritten
        - notes: overwritten
        """
        order = self._get_order(order_id)
        if order.is_closed:
            raise InvalidStateError("cannot modify a closed order")

        if status is not None:
            if status not in Order.OrderStatus.values:
                raise SalesValidationError(f"'{status}' is not a valid order status.")
            if status == Order.OrderStatus.CLOSED:
                raise InvalidStateError("orders can only be closed through the close operation")

        if discount_cents is not None:
            if isinstance(discount_cents, bool) or not isinstance(discount_cents, int) or discount_cents < 0:
                raise SalesValidationError("discount_cents must be a non-negative integer")

        now = self.clock()
        lines = None
        if items:
            self._validate_items(items)
            lines = self._price_items(items, now)

        with transaction.atomic():
            order = self._get_order(order_id, for_update=True)
            if order.is_closed:
                raise InvalidStateError("cannot modify a closed order")

            if status is not None:
                order.status = status

            if lines is not None:
                order.items.all().delete()
                self._attach_items(order, lines)
                totals = OrderCalculator(lines).calculate_totals()
                order.subtotal_cents = totals["subtotal_cents"]
                order.tax_cents = totals["tax_cents"]

            if discount_cents is not None:
                order.discount_cents = discount_cents

            if notes is not None:
                order.notes = notes

            order.total_cents = total_cents(
                order.subtotal_cents, order.tax_cents, order.discount_cents
            )
            if order.total_cents < 0:
                raise SalesValidationError("discount_cents cannot exceed subtotal plus tax")

            order.updated_at = now
            order.save(
                update_fields=[
                    "status",
                    "subtotal_cents",
                    "tax_cents",
                    "discount_cents",
                    "total_cents",
                    "notes",
                    "updated_at",
                ]
            )

        if lines is not None:
            logger.info(f"Replaced items of order {order.order_number}: {len(lines)} items")
        logger.info(f"Updated order {order.order_number}: total {order.total_cents} cents")
        return self.get_order(order.pk)

    def close_order(self, order_id, payments, cashier_id, notes=None) -> Order:
        """
        Settles and closes an order.

        Every entry in ``payments`` is recorded as a completed payment, then the
        total paid is reconciled against the order total. The payments and the
        status flip commit together: an insufficient settlement rolls back the
        payments and leaves the order untouched.

        The order row is locked for the whole operation and the status flip is
        conditional on the order still being open, so concurrent closes of the
        same order settle it at most once.
        """
        self._validate_payment_entries(payments)

        with transaction.atomic():
            order = self._get_order(order_id, for_update=True)
            if order.is_closed:
                raise InvalidStateError("order is already closed")

            now = self.clock()
            total_paid = 0
            for entry in payments:
                PaymentService.record_completed_payment(
                    order=order,
                    cashier_id=cashier_id,
                    amount_cents=entry["amount_cents"],
                    method=entry["method"],
                    reference_number=entry.get("reference_number"),
                    notes=entry.get("notes"),
                    completed_at=now,
                )
                total_paid += entry["amount_cents"]

            if total_paid < order.total_cents:
                logger.warning(
                    f"Rejected close of order {order.order_number}: "
                    f"paid {total_paid} of {order.total_cents} cents"
                )
                raise InsufficientPaymentError(order.total_cents, total_paid)

            changes = {
                "status": Order.OrderStatus.CLOSED,
                "cashier_id": cashier_id,
                "closed_at": now,
                "updated_at": now,
            }
            if notes is not None:
                changes["notes"] = notes

            updated = (
                Order.objects.filter(pk=order.pk)
                .exclude(status=Order.OrderStatus.CLOSED)
                .update(**changes)
            )
            if updated != 1:
                raise InvalidStateError("order is already closed")

        logger.info(
            f"Closed order {order.order_number} by cashier {cashier_id}: "
            f"{len(payments)} payments, {total_paid} of {order.total_cents} cents"
        )
        return self.get_order(order.pk)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id) -> Order:
        """Returns the order with ``item_list`` and ``payment_list`` attached."""
        order = self._get_order(order_id)
        return self._compose(order, include_payments=True)

    @staticmethod
    def filter_orders(filters=None):
        """
        Orders matching ``filters``, newest first, as an unevaluated queryset.

        ``filters`` accepts venue_id, table_id, waiter_id, cashier_id, status,
        start_date and end_date.
        """
        filterset = OrderFilter(data=dict(filters or {}), queryset=Order.objects.all())
        if not filterset.is_valid():
            raise SalesValidationError(
                "invalid order filter",
                details={"fields": {k: list(v) for k, v in filterset.errors.items()}},
            )
        return filterset.qs

    def filter_closable_orders(self, filters=None):
        """Orders a cashier can still settle: pending, confirmed or ready."""
        return self.filter_orders(filters).filter(status__in=self.CLOSABLE_STATUSES)

    def list_orders(self, filters=None, limit=DEFAULT_LIMIT, offset=DEFAULT_OFFSET) -> list:
        """Lists one window of orders, each with its items but without payments."""
        return self.with_items(paginate(self.filter_orders(filters), limit, offset))

    def list_closable_orders(self, filters=None, limit=DEFAULT_LIMIT, offset=DEFAULT_OFFSET) -> list:
        return self.with_items(paginate(self.filter_closable_orders(filters), limit, offset))

    @staticmethod
    def with_items(orders) -> list:
        """
        Attaches ``item_list`` to every order of a listing page in one query.
        Listings carry no payments, so ``payment_list`` is None.
        """
        orders = list(orders)
        items_by_order = {order.pk: [] for order in orders}
        try:
            for item in OrderItem.objects.filter(order_id__in=list(items_by_order)):
                items_by_order[item.order_id].append(item)
        except DatabaseError as e:
            logger.warning(f"Could not load items for {len(orders)} orders: {e}")
        for order in orders:
            order.item_list = items_by_order[order.pk]
            order.payment_list = None
        return orders

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _get_order(order_id, for_update=False) -> Order:
        queryset = Order.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise OrderNotFound(order_id)

    @staticmethod
    def _validate_items(items):
        if not items:
            raise SalesValidationError("an order needs at least one item")
        for index, item in enumerate(items):
            if not item.get("product_id"):
                raise SalesValidationError(f"item {index}: product_id is required")
            quantity = item.get("quantity")
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                raise SalesValidationError(f"item {index}: quantity must be at least 1")

    @staticmethod
    def _validate_payment_entries(payments):
        if not payments:
            raise SalesValidationError("at least one payment is required to close an order")
        for index, entry in enumerate(payments):
            amount = entry.get("amount_cents")
            if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
                raise SalesValidationError(f"payment {index}: amount_cents must be at least 1")
            if entry.get("method") not in Payment.PaymentMethod.values:
                raise SalesValidationError(
                    f"payment {index}: '{entry.get('method')}' is not a valid payment method"
                )

    def _price_items(self, items, now) -> list:
        lines = []
        for item in items:
            unit_price = self.catalog.get_unit_price_cents(item["product_id"])
            lines.append(
                OrderItem(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                    unit_price_cents=unit_price,
                    subtotal_cents=line_subtotal_cents(item["quantity"], unit_price),
                    notes=item.get("notes"),
                    created_at=now,
                )
            )
        return lines

    @staticmethod
    def _attach_items(order, lines):
        for line in lines:
            line.order = order
            line.save()

    @staticmethod
    def _compose(order, include_payments=True) -> Order:
        # Secondary collections are best effort: a failed load leaves them empty
        try:
            order.item_list = list(order.items.all())
        except DatabaseError as e:
            logger.warning(f"Could not load items for order {order.pk}: {e}")
            order.item_list = []

        order.payment_list = None
        if include_payments:
            try:
                order.payment_list = list(Payment.objects.filter(order=order))
            except DatabaseError as e:
                logger.warning(f"Could not load payments for order {order.pk}: {e}")
                order.payment_list = []
        return order
