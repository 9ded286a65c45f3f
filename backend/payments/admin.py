from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin view for the Payment model.
    """

    list_display = (
        "id",
        "order",
        "amount_cents",
        "method",
        "status",
        "cashier_id",
        "created_at",
    )
    list_filter = ("status", "method", "created_at")
    search_fields = ("id", "order__id", "order__order_number", "reference_number")
    readonly_fields = (
        "id",
        "order",
        "amount_cents",
        "method",
        "created_at",
        "completed_at",
    )

    def has_delete_permission(self, request, obj=None):
        return False
