from rest_framework import serializers
from .models import Order, OrderItem
from payments.models import Payment
from payments.serializers import PaymentSerializer


class OrderItemSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "order_id",
            "product_id",
            "quantity",
            "unit_price_cents",
            "subtotal_cents",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """
    Order with its composed collections.

    ``items`` and ``payments`` come from the ``item_list``/``payment_list``
    attributes set by OrderService. Listings carry no payments, so the key is
    omitted when ``payment_list`` is None.
    """

    items = serializers.SerializerMethodField()
    payments = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "table_id",
            "venue_id",
            "waiter_id",
            "cashier_id",
            "status",
            "subtotal_cents",
            "tax_cents",
            "discount_cents",
            "total_cents",
            "notes",
            "created_at",
            "updated_at",
            "closed_at",
            "items",
            "payments",
        ]
        read_only_fields = fields

    def get_items(self, obj):
        items = getattr(obj, "item_list", None)
        if items is None:
            items = obj.items.all()
        return OrderItemSerializer(items, many=True).data

    def get_payments(self, obj):
        return PaymentSerializer(obj.payment_list or [], many=True).data

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if getattr(instance, "payment_list", None) is None:
            data.pop("payments", None)
        return data


# --- Request payloads ---


class OrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class OrderCreateSerializer(serializers.Serializer):
    table_id = serializers.CharField(max_length=64)
    venue_id = serializers.CharField(max_length=64)
    waiter_id = serializers.CharField(max_length=64, required=False, allow_null=True)
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class OrderUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.OrderStatus.choices, required=False)
    items = OrderItemInputSerializer(many=True, required=False)
    discount_cents = serializers.IntegerField(min_value=0, required=False)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class PaymentEntrySerializer(serializers.Serializer):
    amount_cents = serializers.IntegerField(min_value=1)
    payment_method = serializers.ChoiceField(
        choices=Payment.PaymentMethod.choices, source="method"
    )
    reference_number = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class OrderCloseSerializer(serializers.Serializer):
    payments = PaymentEntrySerializer(many=True, allow_empty=False)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
