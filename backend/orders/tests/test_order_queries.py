"""
Order Query Tests

Lookup, listing filters, the limit/offset window and the best-effort
composition of items and payments onto an order.
"""
import pytest
from datetime import datetime, timezone as dt_timezone
from unittest import mock

from django.db import DatabaseError
from django.utils import timezone

from orders.models import OrderItem
from sales_backend.base import normalize_datetime_value
from sales_backend.exceptions import OrderNotFound, SalesValidationError


def open_orders(order_service, clock, rows):
    """Create one order per (table, venue, waiter) row, one minute apart."""
    orders = []
    for table_id, venue_id, waiter_id in rows:
        orders.append(
            order_service.create_order(
                table_id=table_id,
                venue_id=venue_id,
                waiter_id=waiter_id,
                items=[{"product_id": "P2", "quantity": 1}],
            )
        )
        clock.advance(minutes=1)
    return orders


@pytest.mark.django_db
class TestGetOrder:
    def test_includes_items_and_payments(self, order_service, payment_service, open_order):
        payment_service.create_payment(open_order.id, 500, "card", cashier_id="C1")
        order = order_service.get_order(open_order.id)
        assert len(order.item_list) == 1
        assert [p.amount_cents for p in order.payment_list] == [500]

    @pytest.mark.parametrize("order_id", ["not-a-uuid", "2f1e7a54-3c55-4b8e-9a49-2d0a8a1f0c11"])
    def test_missing(self, order_service, order_id):
        with pytest.raises(OrderNotFound):
            order_service.get_order(order_id)

    def test_payment_load_failure_yields_empty_payments(self, order_service, open_order):
        with mock.patch(
            "orders.services.order_service.Payment.objects.filter",
            side_effect=DatabaseError("payments table gone"),
        ):
            order = order_service.get_order(open_order.id)
        assert order.total_cents == 3570
        assert len(order.item_list) == 1
        assert order.payment_list == []

    def test_repeated_reads_return_same_collections(self, order_service):
        # Every item and payment below shares one created_at, so only the id breaks ties
        order = order_service.create_order(
            table_id="T1",
            venue_id="V1",
            items=[
                {"product_id": "P1", "quantity": 1},
                {"product_id": "P2", "quantity": 2},
                {"product_id": "P3", "quantity": 1},
            ],
        )
        order_service.close_order(
            order.id,
            payments=[
                {"amount_cents": 1000, "method": "cash"},
                {"amount_cents": 1000, "method": "card"},
                {"amount_cents": 1000, "method": "transfer"},
                {"amount_cents": 1000, "method": "other"},
            ],
            cashier_id="C1",
        )

        first = order_service.get_order(order.id)
        second = order_service.get_order(order.id)

        assert len({p.created_at for p in first.payment_list}) == 1
        assert [p.pk for p in first.payment_list] == [p.pk for p in second.payment_list]
        assert [p.pk for p in first.payment_list] == sorted(p.pk for p in first.payment_list)
        assert [i.pk for i in first.item_list] == [i.pk for i in second.item_list]
        assert [i.pk for i in first.item_list] == sorted(i.pk for i in first.item_list)


@pytest.mark.django_db
class TestListOrders:
    def test_newest_first_with_items_without_payments(self, order_service, clock):
        first, second, third = open_orders(
            order_service, clock, [("T1", "V1", "W1"), ("T2", "V1", "W1"), ("T3", "V2", "W2")]
        )
        orders = order_service.list_orders()
        assert [o.id for o in orders] == [third.id, second.id, first.id]
        assert all(len(o.item_list) == 1 for o in orders)
        assert all(o.payment_list is None for o in orders)

    def test_item_load_failure_yields_empty_items(self, order_service, open_order):
        with mock.patch(
            "orders.services.order_service.OrderItem.objects.filter",
            side_effect=DatabaseError("items table gone"),
        ):
            orders = order_service.list_orders()
        assert [o.id for o in orders] == [open_order.id]
        assert orders[0].item_list == []

    def test_equal_timestamps_list_stably(self, order_service):
        for table in ("T1", "T2", "T3"):
            order_service.create_order(
                table_id=table, venue_id="V1", items=[{"product_id": "P2", "quantity": 1}]
            )
        ids = [o.id for o in order_service.list_orders()]
        assert ids == sorted(ids)
        assert ids == [o.id for o in order_service.list_orders()]

    def test_filters_combine(self, order_service, clock):
        open_orders(
            order_service, clock, [("T1", "V1", "W1"), ("T2", "V1", "W2"), ("T1", "V2", "W1")]
        )
        assert len(order_service.list_orders({"venue_id": "V1"})) == 2
        assert len(order_service.list_orders({"venue_id": "V1", "waiter_id": "W1"})) == 1
        assert len(order_service.list_orders({"table_id": "T1"})) == 2
        assert order_service.list_orders({"venue_id": "V9"}) == []

    def test_status_and_cashier_filters(self, order_service, clock):
        first, second = open_orders(order_service, clock, [("T1", "V1", "W1"), ("T2", "V1", "W1")])
        order_service.close_order(
            first.id, payments=[{"amount_cents": 10000, "method": "cash"}], cashier_id="C7"
        )
        assert [o.id for o in order_service.list_orders({"status": "closed"})] == [first.id]
        assert [o.id for o in order_service.list_orders({"status": "pending"})] == [second.id]
        assert [o.id for o in order_service.list_orders({"cashier_id": "C7"})] == [first.id]

    def test_invalid_status_filter(self, order_service):
        with pytest.raises(SalesValidationError) as exc_info:
            order_service.list_orders({"status": "eaten"})
        assert "status" in exc_info.value.details["fields"]

    def test_date_window_is_inclusive_per_day(self, order_service, clock):
        early = open_orders(order_service, clock, [("T1", "V1", None)])[0]
        clock.advance(days=1)
        late = open_orders(order_service, clock, [("T2", "V1", None)])[0]

        # Fake clock starts 2025-03-14 15:00 UTC (10:00 local)
        assert [o.id for o in order_service.list_orders({"start_date": "2025-03-15"})] == [late.id]
        assert [o.id for o in order_service.list_orders({"end_date": "2025-03-14"})] == [early.id]
        both = order_service.list_orders({"start_date": "2025-03-14", "end_date": "2025-03-15"})
        assert len(both) == 2

    def test_unparseable_dates_are_ignored(self, order_service, clock):
        open_orders(order_service, clock, [("T1", "V1", None), ("T2", "V1", None)])
        assert len(order_service.list_orders({"start_date": "yesterday", "end_date": "2025-13-45"})) == 2

    def test_limit_and_offset(self, order_service, clock):
        orders = open_orders(order_service, clock, [(f"T{i}", "V1", None) for i in range(5)])
        newest_first = [o.id for o in reversed(orders)]

        assert [o.id for o in order_service.list_orders()] == newest_first
        assert [o.id for o in order_service.list_orders(limit=2)] == newest_first[:2]
        assert [o.id for o in order_service.list_orders(limit=2, offset=2)] == newest_first[2:4]
        assert order_service.list_orders(offset=10) == []

    def test_closable_orders(self, order_service, clock):
        pending, ready, preparing, closed = open_orders(
            order_service, clock, [("T1", "V1", None), ("T2", "V1", None), ("T3", "V1", None), ("T4", "V1", None)]
        )
        order_service.update_order(ready.id, status="ready")
        order_service.update_order(preparing.id, status="preparing")
        order_service.close_order(
            closed.id, payments=[{"amount_cents": 10000, "method": "card"}], cashier_id="C1"
        )

        ids = {o.id for o in order_service.list_closable_orders()}
        assert ids == {pending.id, ready.id}


class TestDateBounds:
    def test_date_only_end_bound_covers_whole_day(self, settings):
        settings.TIME_ZONE = "America/Bogota"
        bound = normalize_datetime_value("2025-03-14", is_end=True)
        assert timezone.localtime(bound).replace(tzinfo=None) == datetime(2025, 3, 14, 23, 59, 59, 999999)

    def test_date_only_start_bound_is_midnight(self, settings):
        settings.TIME_ZONE = "America/Bogota"
        bound = normalize_datetime_value("2025-03-14")
        assert timezone.localtime(bound).replace(tzinfo=None) == datetime(2025, 3, 14, 0, 0)

    def test_datetime_kept_as_given(self):
        bound = normalize_datetime_value("2025-03-14T10:30:00Z", is_end=True)
        assert bound == datetime(2025, 3, 14, 10, 30, tzinfo=dt_timezone.utc)

    @pytest.mark.parametrize("value", ["", None, "yesterday", "2025-13-45", "2025-02-30T10:00:00"])
    def test_unusable_values(self, value):
        assert normalize_datetime_value(value, is_end=True) is None

    @pytest.mark.django_db
    def test_single_day_window_lists_that_day(self, order_service, clock):
        same_day = open_orders(order_service, clock, [("T1", "V1", None)])[0]
        clock.advance(days=1)
        open_orders(order_service, clock, [("T2", "V1", None)])

        window = {"start_date": "2025-03-14", "end_date": "2025-03-14"}
        assert [o.id for o in order_service.list_orders(window)] == [same_day.id]
