from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import error_responses
from apps.common import get_logger

from .container import build_cart_service
from .serializers import (
    CartItemReadSerializer,
    CartMutationSerializer,
    QuantityWriteSerializer,
)

logger = get_logger(__name__).bind(component="carts", layer="view")

_AUTH_ERRORS = error_responses(401, 403)


class CartView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartView")

    @extend_schema(
        summary="View cart",
        description="Entries of the caller's cart in insertion order. The cart is created on first use.",
        responses={200: CartItemReadSerializer(many=True), **_AUTH_ERRORS},
    )
    def get(self, request):
        items = self.service.view(request.validated_user_id)
        return Response(CartItemReadSerializer(items, many=True).data)

    @extend_schema(
        summary="Clear cart",
        responses={200: CartMutationSerializer, **_AUTH_ERRORS},
    )
    def delete(self, request):
        result = self.service.clear(request.validated_user_id)
        self.log.info("Cart cleared via API", user_id=request.validated_user_id)
        return Response(CartMutationSerializer(result).data)


class CartItemView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemView")

    @extend_schema(
        summary="Add product to cart",
        description="Adds the quantity to any quantity already in the cart for this product.",
        request=QuantityWriteSerializer,
        responses={
            200: CartMutationSerializer,
            **error_responses(400, 404),
            **_AUTH_ERRORS,
        },
    )
    def post(self, request, product_id: int):
        result = self.service.add(request.validated_user_id, product_id, request.cart_quantity)
        return Response(CartMutationSerializer(result).data)

    @extend_schema(
        summary="Set product quantity",
        description="Overwrites the quantity of a product already in the cart.",
        request=QuantityWriteSerializer,
        responses={
            200: CartMutationSerializer,
            **error_responses(400, 404),
            **_AUTH_ERRORS,
        },
    )
    def put(self, request, product_id: int):
        result = self.service.set_quantity(
            request.validated_user_id, product_id, request.cart_quantity
        )
        return Response(CartMutationSerializer(result).data)

    @extend_schema(
        summary="Remove product from cart",
        responses={200: CartMutationSerializer, **_AUTH_ERRORS},
    )
    def delete(self, request, product_id: int):
        result = self.service.remove(request.validated_user_id, product_id)
        return Response(CartMutationSerializer(result).data)
