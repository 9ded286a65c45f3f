from django.urls import path
from . import views

app_name = "reports"

urlpatterns = [
    path("sales/history", views.SalesHistoryView.as_view(), name="sales-history"),
    path("sales/summary", views.SalesSummaryView.as_view(), name="sales-summary"),
]
