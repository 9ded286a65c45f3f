from django.urls import path
from .views import (
    OrderListCreateView,
    OrderDetailView,
    OrderCloseView,
    CashierOrderListView,
)

app_name = "orders"

urlpatterns = [
    path("orders", OrderListCreateView.as_view(), name="order-list"),
    path("orders/<str:order_id>", OrderDetailView.as_view(), name="order-detail"),
    path("orders/<str:order_id>/close", OrderCloseView.as_view(), name="order-close"),
    path("cashier/orders", CashierOrderListView.as_view(), name="cashier-order-list"),
]
