from django.contrib import admin
from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("unit_price_cents", "subtotal_cents", "created_at")
    fields = ("product_id", "quantity", "unit_price_cents", "subtotal_cents", "notes", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Read-mostly view of orders. Totals are owned by the service layer,
    so every money field is read-only here.
    """

    list_display = (
        "order_number",
        "venue_id",
        "table_id",
        "status",
        "get_total_formatted",
        "created_at",
        "closed_at",
    )
    list_display_links = ("order_number",)
    search_fields = ("order_number", "table_id", "waiter_id", "cashier_id")
    list_filter = ("status", "venue_id", "created_at")

    inlines = [OrderItemInline]

    fieldsets = (
        (
            "Order Overview",
            {
                "fields": (
                    "id",
                    "order_number",
                    "venue_id",
                    "table_id",
                    "waiter_id",
                    "cashier_id",
                    "status",
                    "notes",
                )
            },
        ),
        (
            "Financial Summary",
            {
                "fields": ("subtotal_cents", "tax_cents", "discount_cents", "total_cents"),
                "description": "All amounts are in cents.",
            },
        ),
        (
            "Timestamps",
            {
                "classes": ("collapse",),
                "fields": ("created_at", "updated_at", "closed_at"),
            },
        ),
    )
    readonly_fields = (
        "id",
        "order_number",
        "subtotal_cents",
        "tax_cents",
        "discount_cents",
        "total_cents",
        "created_at",
        "updated_at",
        "closed_at",
    )

    def get_total_formatted(self, obj):
        return f"${obj.total_cents / 100:,.2f}"

    get_total_formatted.short_description = "Total"
