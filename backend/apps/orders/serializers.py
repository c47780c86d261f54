from rest_framework import serializers

from apps.carts.serializers import VendorSerializer


class OrderItemReadSerializer(serializers.Serializer):
    productId = serializers.IntegerField(source="product_id")
    name = serializers.CharField()
    quantity = serializers.IntegerField()
    unitPrice = serializers.DecimalField(
        source="unit_price", max_digits=10, decimal_places=2, coerce_to_string=False
    )
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=False)


class OrderReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    vendorId = serializers.IntegerField(source="company_id")
    vendor = VendorSerializer(source="company", allow_null=True)
    deliveryMode = serializers.CharField(source="delivery_mode")
    pickupTime = serializers.CharField(source="pickup_time", allow_blank=True)
    status = serializers.CharField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=False)
    createdAt = serializers.DateTimeField(source="created_at")
    items = OrderItemReadSerializer(many=True)


class OrderConfirmedSerializer(serializers.Serializer):
    message = serializers.CharField()
    order = OrderReadSerializer()


class OrderLineWriteSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)


class OrderWriteSerializer(serializers.Serializer):
    # Schema only; items are validated by OrderService so rejections share one error code
    vendorId = serializers.IntegerField(min_value=1)
    deliveryMode = serializers.CharField(required=False, allow_blank=True)
    pickupTime = serializers.CharField(required=False, allow_blank=True)
    items = OrderLineWriteSerializer(many=True)
