"""
URL configuration for sales_backend project.

Paths mirror the sales service contract used by the front-of-house apps:
orders, payments, sales history/summary and the cashier routes.
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "service": "sales"})


urlpatterns = [
    path("health", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("", include("orders.urls")),
    path("", include("payments.urls")),
    path("", include("reports.urls")),
]
