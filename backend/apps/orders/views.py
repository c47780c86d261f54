from django.utils.translation import gettext as _
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import error_responses
from apps.common import get_logger

from .container import build_order_service
from .serializers import OrderConfirmedSerializer, OrderReadSerializer, OrderWriteSerializer
from .services import MSG_CONFIRMED

logger = get_logger(__name__).bind(component="orders", layer="view")


class OrderListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()
    log = logger.bind(view="OrderListView")

    @extend_schema(
        summary="List my orders",
        responses={
            200: OrderReadSerializer(many=True),
            **error_responses(401, 403),
        },
    )
    def get(self, request):
        orders = self.service.list_for_user(request.validated_user_id)
        return Response(OrderReadSerializer(orders, many=True).data)

    @extend_schema(
        summary="Confirm vendor order",
        description=(
            "Records an order for one vendor and removes that vendor's products from the "
            "caller's cart. Products of other vendors stay in the cart."
        ),
        request=OrderWriteSerializer,
        responses={
            201: OrderConfirmedSerializer,
            **error_responses(400, 401, 403, 422),
        },
    )
    def post(self, request):
        data = request.data
        order = self.service.confirm(
            request.validated_user_id,
            request.order_vendor_id,
            data.get("deliveryMode") or "",
            data.get("pickupTime") or "",
            data.get("items"),
        )
        self.log.info(
            "Order confirmed via API",
            user_id=request.validated_user_id,
            order_id=order.id,
            vendor_id=order.company_id,
        )
        body = {"message": _(MSG_CONFIRMED), "order": order}
        return Response(OrderConfirmedSerializer(body).data, status=status.HTTP_201_CREATED)
