from rest_framework import serializers

from .models import Order, OrderStatus, OrderStatusHistory, PaymentStatus


class AddressSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True)
    mobile = serializers.CharField(max_length=30, required=False, allow_blank=True)
    address = serializers.CharField(max_length=300)
    city = serializers.CharField(max_length=100)
    postalCode = serializers.CharField(max_length=20, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False, allow_blank=True)


class OrderItemInputSerializer(serializers.Serializer):
    productId = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    variant = serializers.CharField(max_length=2, required=False, allow_blank=True, allow_null=True)


class CreateOrderSerializer(serializers.Serializer):
    items = OrderItemInputSerializer(many=True)
    shippingAddress = AddressSerializer()
    billingAddress = AddressSerializer(required=False, allow_null=True)
    couponCode = serializers.CharField(max_length=50, required=False, allow_blank=True)
    # computed by the shipping and tax collaborators, taken as given
    shippingCost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False, default=0)
    tax = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False, default=0)
    paymentMethod = serializers.CharField(max_length=50, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class OrderStatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = ['status', 'note', 'timestamp']


class OrderSerializer(serializers.ModelSerializer):
    statusHistory = OrderStatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'orderNumber', 'user', 'items', 'shippingAddress', 'billingAddress',
            'subtotal', 'shippingCost', 'tax', 'discount', 'total',
            'status', 'paymentStatus', 'paymentMethod', 'paymentIntentId',
            'couponCode', 'notes', 'statusHistory', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    note = serializers.CharField(max_length=255, required=False, allow_blank=True)


class PaymentStatusSerializer(serializers.Serializer):
    paymentStatus = serializers.ChoiceField(choices=PaymentStatus.choices)


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True)
