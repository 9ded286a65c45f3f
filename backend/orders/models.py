import uuid
from django.db import models
from django.utils.translation import gettext_lazy as _
from django.utils import timezone


class Order(models.Model):
    """
    A tab opened against one table at one venue.

    All monetary fields are integer cents. ``total_cents`` always equals
    ``subtotal_cents + tax_cents - discount_cents``; the service layer
    recomputes it on every write.
    """

    class OrderStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        PREPARING = "preparing", _("Preparing")
        READY = "ready", _("Ready")
        DELIVERED = "delivered", _("Delivered")
        CANCELLED = "cancelled", _("Cancelled")
        CLOSED = "closed", _("Closed")  # Terminal, reached only through close

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=32, db_index=True)

    # --- References to entities owned by other services ---
    table_id = models.CharField(max_length=64)
    venue_id = models.CharField(max_length=64)
    waiter_id = models.CharField(max_length=64, blank=True, null=True)
    cashier_id = models.CharField(
        max_length=64,
        blank=True,
        null=True,
        help_text=_("Set when the order is closed."),
    )

    status = models.CharField(
        max_length=16, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )

    # --- Financial Fields (cents) ---
    subtotal_cents = models.BigIntegerField(default=0)
    tax_cents = models.BigIntegerField(default=0)
    discount_cents = models.BigIntegerField(default=0)
    total_cents = models.BigIntegerField(default=0)

    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(default=timezone.now, editable=False)
    closed_at = models.DateTimeField(
        null=True,
        blank=True,
        editable=False,
        db_index=True,
        help_text="Timestamp when the order was closed. Use this for daily sales history.",
    )

    class Meta:
        # Newest orders first, id as tie-breaker so equal timestamps list stably
        ordering = ["-created_at", "id"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["venue_id", "created_at"], name="order_venue_created_idx"),
            models.Index(fields=["status", "created_at"], name="order_status_created_idx"),
            models.Index(fields=["table_id"], name="order_table_idx"),
            models.Index(fields=["waiter_id"], name="order_waiter_idx"),
            models.Index(fields=["cashier_id"], name="order_cashier_idx"),
        ]

    def __str__(self):
        return f"Order {self.order_number or self.pk} (table {self.table_id}) - {self.status}"

    @property
    def is_closed(self):
        return self.status == self.OrderStatus.CLOSED


class OrderItem(models.Model):
    """One product line within an order, priced at the time it was added."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product_id = models.CharField(max_length=64)
    quantity = models.PositiveIntegerField(default=1)

    # Price snapshot
    unit_price_cents = models.BigIntegerField(
        help_text=_("Unit price of the product at the time it was added."),
    )
    subtotal_cents = models.BigIntegerField()

    notes = models.TextField(
        blank=True, null=True, help_text=_("Customer notes, e.g., 'no ice'")
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["order", "created_at"], name="item_order_created_idx"),
        ]

    def __str__(self):
        return f"{self.quantity} of {self.product_id} in Order {self.order.order_number}"
