from rest_framework import serializers
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(read_only=True)
    payment_method = serializers.CharField(source="method", read_only=True)
    payment_status = serializers.CharField(source="status", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "order_id",
            "cashier_id",
            "amount_cents",
            "payment_method",
            "payment_status",
            "reference_number",
            "notes",
            "created_at",
            "completed_at",
        ]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    """
    Body of a standalone payment. ``order_id`` is optional when the order
    comes from the URL (cashier route).
    """

    order_id = serializers.CharField(max_length=64, required=False)
    amount_cents = serializers.IntegerField(min_value=1)
    payment_method = serializers.ChoiceField(
        choices=Payment.PaymentMethod.choices, source="method"
    )
    reference_number = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def __init__(self, *args, order_in_url=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.order_in_url = order_in_url

    def validate(self, attrs):
        if not self.order_in_url and not attrs.get("order_id"):
            raise serializers.ValidationError({"order_id": "This field is required."})
        return attrs
