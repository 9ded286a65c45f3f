import uuid
from django.db import models
from django.utils.translation import gettext_lazy as _
from django.utils import timezone
from orders.models import Order


class Payment(models.Model):
    """
    A monetary settlement applied to an order.

    The amount never changes after creation; only ``status`` and
    ``completed_at`` move.
    """

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        COMPLETED = "completed", _("Completed")
        # Reserved: no workflow moves a payment here yet
        FAILED = "failed", _("Failed")
        REFUNDED = "refunded", _("Refunded")

    class PaymentMethod(models.TextChoices):
        CASH = "cash", _("Cash")
        CARD = "card", _("Card")
        TRANSFER = "transfer", _("Transfer")
        OTHER = "other", _("Other")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(
        Order, on_delete=models.PROTECT, related_name="payments"
    )
    cashier_id = models.CharField(max_length=64)

    amount_cents = models.BigIntegerField()
    method = models.CharField(max_length=16, choices=PaymentMethod.choices)
    status = models.CharField(
        max_length=16,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        help_text=_("The current status of the payment."),
    )

    reference_number = models.CharField(max_length=100, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "id"]
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount_cents__gte=1),
                name="payment_amount_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["order", "status"], name="payment_order_status_idx"),
            models.Index(fields=["status", "created_at"], name="payment_status_created_idx"),
            models.Index(fields=["cashier_id"], name="payment_cashier_idx"),
        ]

    def __str__(self):
        return f"Payment {self.id} for Order {self.order.order_number or self.order_id} - {self.status}"
