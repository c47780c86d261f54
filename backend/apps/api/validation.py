import json
from typing import Any, Dict, Optional

from django.http import HttpRequest
from rest_framework.exceptions import AuthenticationFailed as DRFAuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from apps.api.exceptions import ApplicationError
from apps.api.utils import error_response
from apps.carts.commands import parse_quantity
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="validation")

_jwt_authenticator = JWTAuthentication()

CART_VIEWS = ("CartView", "CartItemView")
ORDER_VIEWS = ("OrderListView",)


def _is_authenticated_user(request: HttpRequest) -> bool:
    user = getattr(request, "user", None)
    if user and getattr(user, "is_authenticated", False) and getattr(user, "id", None):
        return True

    # DRF authenticates later in the request lifecycle, so bearer tokens are
    # checked here by hand.
    meta = getattr(request, "META", {}) or {}
    auth_header = meta.get("HTTP_AUTHORIZATION") if hasattr(meta, "get") else None
    if not auth_header:
        return False

    try:
        authenticated = _jwt_authenticator.authenticate(request)
    except (InvalidToken, DRFAuthenticationFailed) as exc:
        logger.warning("JWT authentication failed", detail=str(exc))
        return False

    if not authenticated:
        return False

    user, token = authenticated
    if not getattr(user, "is_authenticated", False) or not getattr(user, "id", None):
        return False

    request.user = user
    request.auth = token
    logger.debug("Authenticated user from bearer token", user_id=user.id)
    return True


def _set_validated_user(request: HttpRequest, user_id: Optional[int]) -> None:
    request.validated_user_id = user_id


def _is_client_user(user: Any) -> bool:
    return bool(getattr(user, "is_client", False))


def _extract_request_data(request: HttpRequest) -> Any:
    data = getattr(request, "data", None)
    if data not in (None, {}):
        return data
    if request.content_type == "application/json":
        try:
            body = request.body.decode("utf-8") if hasattr(request, "body") else None
            return json.loads(body) if body else {}
        except (ValueError, AttributeError, UnicodeDecodeError):
            return None
    if hasattr(request, "POST"):
        post = request.POST
        if hasattr(post, "dict"):
            return post.dict()
        return dict(post)
    return {}


def _require_client(request: HttpRequest, view_name: str) -> Any:
    """Authenticate the caller and make sure the account may hold a cart."""
    if not _is_authenticated_user(request):
        logger.warning("Authentication required", view=view_name, method=request.method)
        return error_response("UNAUTHORIZED", "Authentication required")
    user = request.user
    if not _is_client_user(user):
        logger.warning(
            "Non-client account rejected",
            view=view_name,
            user_id=user.id,
            role=getattr(user, "role", None),
        )
        return error_response(
            "FORBIDDEN", "Only client accounts can use the cart and place orders"
        )
    _set_validated_user(request, int(user.id))
    return None


def _parse_cart_quantity(request: HttpRequest, *, product_id: Optional[int]) -> Any:
    data = _extract_request_data(request)
    raw = data.get("quantity") if isinstance(data, dict) else None
    try:
        request.cart_quantity = parse_quantity(raw)
    except ApplicationError as exc:
        logger.warning(
            "Invalid cart quantity",
            method=request.method,
            product_id=product_id,
            value=raw,
        )
        return exc.to_response()
    return None


def _parse_order_vendor(request: HttpRequest) -> Any:
    data = _extract_request_data(request)
    if not isinstance(data, dict):
        logger.warning("Order payload is not an object")
        return error_response("VALIDATION_ERROR", "Order payload must be a JSON object")
    raw = data.get("vendorId")
    vendor_id: Optional[int] = None
    if isinstance(raw, int) and not isinstance(raw, bool):
        vendor_id = raw
    elif isinstance(raw, str) and raw.strip().isascii() and raw.strip().isdigit():
        vendor_id = int(raw.strip())
    if vendor_id is None or vendor_id < 1:
        logger.warning("Invalid vendorId in order payload", value=raw)
        return error_response(
            "VALIDATION_ERROR", "vendorId must be a positive integer", {"vendorId": raw}
        )
    request.order_vendor_id = vendor_id
    return None


def validate_request_context(request: HttpRequest, view_class, view_kwargs) -> Any:
    """
    Performs request level validation for specific API views.
    Returns a DRF Response when validation fails; otherwise None and
    attaches validated data to the request instance.
    """
    view_name = getattr(view_class, "__name__", "")

    logger.debug(
        "Running request context validation",
        view=view_name,
        method=getattr(request, "method", None),
    )

    if view_name in CART_VIEWS:
        response = _require_client(request, view_name)
        if response is not None:
            return response
        if view_name == "CartItemView" and request.method in ("POST", "PUT"):
            response = _parse_cart_quantity(
                request, product_id=view_kwargs.get("product_id")
            )
            if response is not None:
                return response
        logger.debug(
            "Validated cart request",
            view=view_name,
            method=request.method,
            user_id=request.validated_user_id,
        )
    elif view_name in ORDER_VIEWS:
        response = _require_client(request, view_name)
        if response is not None:
            return response
        if request.method == "POST":
            response = _parse_order_vendor(request)
            if response is not None:
                return response
            logger.debug(
                "Validated order submission",
                user_id=request.validated_user_id,
                vendor_id=request.order_vendor_id,
            )

    return None
