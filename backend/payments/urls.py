from django.urls import path
from .views import PaymentListCreateView, PaymentDetailView, CashierOrderPaymentView

app_name = "payments"

urlpatterns = [
    path("payments", PaymentListCreateView.as_view(), name="payment-list"),
    path("payments/<str:payment_id>", PaymentDetailView.as_view(), name="payment-detail"),
    path(
        "cashier/orders/<str:order_id>/payments",
        CashierOrderPaymentView.as_view(),
        name="cashier-order-payment",
    ),
]
