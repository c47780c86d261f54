from rest_framework import serializers


class VendorSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    logo = serializers.CharField(allow_blank=True)


class CartItemReadSerializer(serializers.Serializer):
    """Flattens a ``CartEntryDTO`` into the wire shape the storefront consumes."""

    productId = serializers.IntegerField(source="product.id")
    name = serializers.CharField(source="product.name")
    price = serializers.DecimalField(
        source="product.price", max_digits=10, decimal_places=2, coerce_to_string=False
    )
    quantity = serializers.IntegerField()
    vendorId = serializers.IntegerField(source="product.company_id")
    vendor = VendorSerializer(source="product.company", allow_null=True)


class CartMutationSerializer(serializers.Serializer):
    message = serializers.CharField()
    products = CartItemReadSerializer(source="items", many=True)


class QuantityWriteSerializer(serializers.Serializer):
    # Parsing is done by the request validation middleware; this is for the schema
    quantity = serializers.IntegerField(min_value=1)
