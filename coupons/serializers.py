# serializers.py
from rest_framework import serializers

from .models import Coupon, normalize_code


class CouponSerializer(serializers.ModelSerializer):
    usageCount = serializers.IntegerField(read_only=True)

    class Meta:
        model = Coupon
        fields = [
            'id', 'code', 'description', 'type', 'value',
            'minPurchase', 'maxDiscount', 'usageLimit', 'userLimit', 'usageCount',
            'startDate', 'endDate', 'isActive',
            'categories', 'products', 'excludedProducts',
            'createdBy', 'createdAt', 'updatedAt',
        ]
        read_only_fields = ['createdBy', 'createdAt', 'updatedAt']

    def validate_code(self, value):
        code = normalize_code(value)
        if not code:
            raise serializers.ValidationError("Coupon code is required.")
        duplicates = Coupon.objects.filter(code=code)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError("A coupon with this code already exists.")
        return code

    def validate(self, data):
        # partial updates are checked against the stored values
        def current(field):
            if field in data:
                return data[field]
            return getattr(self.instance, field, None)

        coupon_type = current('type')
        value = current('value')
        if coupon_type == Coupon.PERCENTAGE and value is not None and not 0 < value <= 100:
            raise serializers.ValidationError({'value': "Percentage must be between 0 and 100."})
        if coupon_type == Coupon.FIXED and value is not None and value <= 0:
            raise serializers.ValidationError({'value': "Fixed discount must be greater than 0."})

        for field in ('minPurchase', 'maxDiscount'):
            amount = current(field)
            if amount is not None and amount < 0:
                raise serializers.ValidationError({field: "Must not be negative."})

        start, end = current('startDate'), current('endDate')
        if start and end and end <= start:
            raise serializers.ValidationError({'endDate': "End date must be after the start date."})
        return data


class PublicCouponSerializer(serializers.ModelSerializer):
    class Meta:
        model = Coupon
        fields = ['code', 'description', 'type', 'value', 'minPurchase', 'maxDiscount', 'endDate']


class CartItemSerializer(serializers.Serializer):
    productId = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)


class ValidateCouponSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    cartTotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    items = CartItemSerializer(many=True, required=False)
