import json

from rest_framework import serializers
from .models import Order, Payment, Delivery, TransactionLog


class PaymentSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(source='order.order_id', read_only=True)

    class Meta:
        model = Payment
        fields = ['id', 'order_id', 'amount', 'payment_details', 'status', 'created_at', 'updated_at']
        read_only_fields = fields


class DeliverySerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(source='order.order_id', read_only=True, allow_null=True)
    item_list = serializers.SerializerMethodField()

    class Meta:
        model = Delivery
        fields = [
            'id', 'order_id', 'order_number', 'customer_id', 'address',
            'items', 'item_list', 'scheduled_date', 'status', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_item_list(self, obj):
        try:
            return json.loads(obj.items)
        except (TypeError, ValueError):
            return []


class TransactionLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = TransactionLog
        fields = ['id', 'message', 'level', 'created_at']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    is_cancelled = serializers.BooleanField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_id', 'order_number', 'customer_id', 'items', 'total_amount',
            'status', 'is_cancelled', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class OrderDetailSerializer(OrderSerializer):
    payments = PaymentSerializer(many=True, read_only=True)
    logs = TransactionLogSerializer(many=True, read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ['payments', 'logs']
        read_only_fields = fields


# ----------------------
# Request payloads
# ----------------------
class CreateOrderSerializer(serializers.Serializer):
    customer_id = serializers.CharField(max_length=64)
    items = serializers.ListField(child=serializers.JSONField(), allow_empty=False)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    payment_details = serializers.JSONField(required=False, default=dict)
    address = serializers.CharField()
    scheduled_date = serializers.DateTimeField(required=False, allow_null=True)


class UpdateOrderSerializer(serializers.Serializer):
    items = serializers.ListField(child=serializers.JSONField(), allow_empty=False, required=False)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)


class OrderPaymentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices, required=False)
    payment_status = serializers.ChoiceField(choices=Payment.Status.choices, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide an order status, a payment status or both")
        return attrs


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


class DeliveryStatusSerializer(serializers.Serializer):
    # "completed" is the dashboard's name for delivered
    status = serializers.ChoiceField(
        choices=Delivery.Status.choices + [('completed', 'Completed')]
    )
