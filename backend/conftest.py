"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from datetime import datetime, timedelta, timezone as dt_timezone

import jwt
from django.conf import settings
from rest_framework.test import APIClient

from orders.catalog import StaticPriceCatalog
from orders.numbering import OrderNumberGenerator
from orders.services import OrderService
from payments.services import PaymentService


# ============================================================================
# CATALOG, CLOCK AND NUMBERING
# ============================================================================

CATALOG_PRICES = {"P1": 1500, "P2": 250, "P3": 999}


class FakeClock:
    """Deterministic clock; ``advance`` moves time forward between calls."""

    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def catalog():
    """Static catalog with P1=1500, P2=250 and P3=999 cents."""
    return StaticPriceCatalog(prices=CATALOG_PRICES)


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 3, 14, 15, 0, 0, tzinfo=dt_timezone.utc))


@pytest.fixture
def number_generator(clock):
    return OrderNumberGenerator(clock=clock, token_factory=lambda: "test")


@pytest.fixture
def order_service(catalog, clock, number_generator):
    return OrderService(catalog=catalog, clock=clock, number_generator=number_generator)


@pytest.fixture
def payment_service(clock):
    return PaymentService(clock=clock)


@pytest.fixture
def open_order(order_service):
    """Table T1 at venue V1, two units of P1: total 3570 cents."""
    return order_service.create_order(
        table_id="T1",
        venue_id="V1",
        waiter_id="W1",
        items=[{"product_id": "P1", "quantity": 2}],
    )


@pytest.fixture
def catalog_settings(settings):
    """Route the default catalog (used by the API views) to the test prices."""
    settings.SALES_CATALOG = {
        "BACKEND": "orders.catalog.StaticPriceCatalog",
        "PRICES": CATALOG_PRICES,
    }
    return settings.SALES_CATALOG


# ============================================================================
# API CLIENTS
# ============================================================================

def _encode_token(user_id="user-1", roles=None, lifetime=timedelta(hours=1)):
    """Mint an HS256 access token the way the auth service issues them."""
    now = datetime.now(dt_timezone.utc)
    payload = {
        "user_id": user_id,
        "roles": roles or [],
        "token_type": "access",
        "jti": f"jti-{user_id}",
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, settings.SIMPLE_JWT["SIGNING_KEY"], algorithm="HS256")


@pytest.fixture
def make_token():
    return _encode_token


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def waiter_client(catalog_settings):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {_encode_token('W1', roles=['waiter'])}")
    return client


@pytest.fixture
def cashier_client(catalog_settings):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {_encode_token('C1', roles=['cashier'])}")
    return client
