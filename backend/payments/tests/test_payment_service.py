"""
Payment Processing Tests

Standalone payments against open orders, the pending -> completed
transition and payment listings.
"""
import pytest

from orders.models import Order
from payments.models import Payment
from payments.services import PaymentService
from sales_backend.exceptions import (
    InvalidStateError,
    OrderNotFound,
    PaymentNotFound,
    SalesValidationError,
)


@pytest.mark.django_db
class TestCreatePayment:
    def test_records_completed_payment(self, payment_service, open_order, clock):
        payment = payment_service.create_payment(
            open_order.id, 1000, "card", cashier_id="C1", reference_number="AUTH-77"
        )

        payment.refresh_from_db()
        assert payment.status == Payment.PaymentStatus.COMPLETED
        assert payment.amount_cents == 1000
        assert payment.method == "card"
        assert payment.cashier_id == "C1"
        assert payment.reference_number == "AUTH-77"
        assert payment.created_at == clock.now
        assert payment.completed_at == clock.now

    def test_full_amount_does_not_close_order(self, payment_service, open_order):
        payment_service.create_payment(open_order.id, 3570, "cash", cashier_id="C1")

        order = Order.objects.get(pk=open_order.id)
        assert order.status == Order.OrderStatus.PENDING
        assert order.cashier_id is None
        assert order.closed_at is None

    def test_closed_order_rejects_payment(self, order_service, payment_service, open_order):
        order_service.close_order(
            open_order.id, payments=[{"amount_cents": 3570, "method": "cash"}], cashier_id="C1"
        )
        with pytest.raises(InvalidStateError):
            payment_service.create_payment(open_order.id, 100, "cash", cashier_id="C2")
        assert Payment.objects.filter(order_id=open_order.id).count() == 1

    @pytest.mark.parametrize("order_id", ["nope", "2f1e7a54-3c55-4b8e-9a49-2d0a8a1f0c11"])
    def test_unknown_order(self, payment_service, order_id):
        with pytest.raises(OrderNotFound):
            payment_service.create_payment(order_id, 100, "cash", cashier_id="C1")

    @pytest.mark.parametrize("amount, method", [(0, "cash"), (-5, "cash"), (True, "cash"), (100, "crypto")])
    def test_invalid_payment(self, payment_service, open_order, amount, method):
        with pytest.raises(SalesValidationError):
            payment_service.create_payment(open_order.id, amount, method, cashier_id="C1")
        assert Payment.objects.count() == 0


class TestPaymentTransitions:
    def test_only_pending_can_complete(self):
        assert PaymentService._validate_transition("pending", "completed")
        assert not PaymentService._validate_transition("completed", "pending")
        assert not PaymentService._validate_transition("failed", "completed")
        assert not PaymentService._validate_transition("pending", "refunded")

    def test_completed_payment_cannot_transition_again(self):
        payment = Payment(status=Payment.PaymentStatus.COMPLETED)
        with pytest.raises(InvalidStateError):
            PaymentService._transition_payment_status(payment, Payment.PaymentStatus.COMPLETED)


@pytest.mark.django_db
class TestPaymentQueries:
    def test_get_payment(self, payment_service, open_order):
        created = payment_service.create_payment(open_order.id, 500, "transfer", cashier_id="C1")
        assert PaymentService.get_payment(created.id) == created
        assert PaymentService.get_payment(str(created.id)).amount_cents == 500

    @pytest.mark.parametrize("payment_id", ["bad", "2f1e7a54-3c55-4b8e-9a49-2d0a8a1f0c11"])
    def test_get_missing_payment(self, payment_id):
        with pytest.raises(PaymentNotFound):
            PaymentService.get_payment(payment_id)

    def test_list_filters_and_order(self, order_service, payment_service, open_order, clock):
        other = order_service.create_order(
            table_id="T2", venue_id="V1", items=[{"product_id": "P2", "quantity": 1}]
        )
        first = payment_service.create_payment(open_order.id, 100, "cash", cashier_id="C1")
        clock.advance(minutes=1)
        second = payment_service.create_payment(open_order.id, 200, "card", cashier_id="C2")
        clock.advance(minutes=1)
        third = payment_service.create_payment(other.id, 300, "card", cashier_id="C1")

        assert [p.id for p in PaymentService.list_payments()] == [third.id, second.id, first.id]
        assert [p.id for p in PaymentService.list_payments({"order_id": str(open_order.id)})] == [
            second.id,
            first.id,
        ]
        assert [p.id for p in PaymentService.list_payments({"method": "card", "cashier_id": "C1"})] == [third.id]
        assert [p.id for p in PaymentService.list_payments({"status": "completed"}, limit=1, offset=1)] == [
            second.id
        ]

    def test_list_rejects_unknown_method(self):
        with pytest.raises(SalesValidationError):
            PaymentService.list_payments({"method": "barter"})
