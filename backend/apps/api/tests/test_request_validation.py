import json
import types
from unittest.mock import patch

from rest_framework.test import APIRequestFactory

from apps.api.middleware import RequestValidationMiddleware
from apps.api.validation import _extract_request_data, validate_request_context
from apps.carts.views import CartItemView, CartView
from apps.orders.views import OrderListView


factory = APIRequestFactory()


def _client(user_id=42):
    return types.SimpleNamespace(id=user_id, is_authenticated=True, is_client=True, role="client")


def test_cart_view_sets_validated_user_for_client():
    request = factory.get("/api/cart/")
    request.user = _client()
    response = validate_request_context(request, CartView, {})
    assert response is None
    assert request.validated_user_id == 42


def test_cart_view_rejects_anonymous():
    request = factory.get("/api/cart/")
    request.user = types.SimpleNamespace(id=None, is_authenticated=False)
    response = validate_request_context(request, CartView, {})
    assert response.status_code == 401
    assert response.data["error"]["code"] == "UNAUTHORIZED"


def test_cart_view_rejects_company_account():
    request = factory.delete("/api/cart/")
    request.user = types.SimpleNamespace(
        id=7, is_authenticated=True, is_client=False, role="company"
    )
    response = validate_request_context(request, CartView, {})
    assert response.status_code == 403
    assert response.data["error"]["code"] == "FORBIDDEN"
    assert not hasattr(request, "validated_user_id")


def test_cart_item_post_parses_quantity():
    request = factory.post("/api/cart/items/3/", {"quantity": 2}, format="json")
    request.user = _client()
    response = validate_request_context(request, CartItemView, {"product_id": 3})
    assert response is None
    assert request.cart_quantity == 2


def test_cart_item_put_accepts_digit_string():
    request = factory.put("/api/cart/items/3/", {"quantity": "5"}, format="json")
    request.user = _client()
    response = validate_request_context(request, CartItemView, {"product_id": 3})
    assert response is None
    assert request.cart_quantity == 5


def test_cart_item_post_rejects_zero_quantity():
    request = factory.post("/api/cart/items/3/", {"quantity": 0}, format="json")
    request.user = _client()
    response = validate_request_context(request, CartItemView, {"product_id": 3})
    assert response.status_code == 400
    assert response.data["error"]["code"] == "INVALID_QUANTITY"


def test_cart_item_put_rejects_missing_quantity():
    request = factory.put("/api/cart/items/3/", {}, format="json")
    request.user = _client()
    response = validate_request_context(request, CartItemView, {"product_id": 3})
    assert response.status_code == 400
    assert response.data["error"]["code"] == "INVALID_QUANTITY"


def test_cart_item_post_rejects_fractional_quantity():
    request = factory.post("/api/cart/items/3/", {"quantity": 1.5}, format="json")
    request.user = _client()
    response = validate_request_context(request, CartItemView, {"product_id": 3})
    assert response.status_code == 400
    assert response.data["error"]["details"] == {"quantity": 1.5}


def test_cart_item_delete_does_not_require_quantity():
    request = factory.delete("/api/cart/items/3/")
    request.user = _client()
    response = validate_request_context(request, CartItemView, {"product_id": 3})
    assert response is None
    assert not hasattr(request, "cart_quantity")


def test_order_post_parses_vendor_id():
    request = factory.post(
        "/api/orders/", {"vendorId": "4", "items": []}, format="json"
    )
    request.user = _client()
    response = validate_request_context(request, OrderListView, {})
    assert response is None
    assert request.order_vendor_id == 4


def test_cart_item_post_rejects_malformed_sign_as_invalid_quantity():
    for raw in ("+-5", "--3", "²"):
        request = factory.post("/api/cart/items/3/", {"quantity": raw}, format="json")
        request.user = _client()
        response = validate_request_context(request, CartItemView, {"product_id": 3})
        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_QUANTITY"


def test_order_post_rejects_superscript_vendor_id():
    request = factory.post("/api/orders/", {"vendorId": "²", "items": []}, format="json")
    request.user = _client()
    response = validate_request_context(request, OrderListView, {})
    assert response.status_code == 400
    assert response.data["error"]["code"] == "VALIDATION_ERROR"


def test_order_post_rejects_missing_vendor():
    request = factory.post("/api/orders/", {"items": []}, format="json")
    request.user = _client()
    response = validate_request_context(request, OrderListView, {})
    assert response.status_code == 400
    assert response.data["error"]["code"] == "VALIDATION_ERROR"


def test_order_get_skips_payload_checks():
    request = factory.get("/api/orders/")
    request.user = _client(5)
    response = validate_request_context(request, OrderListView, {})
    assert response is None
    assert request.validated_user_id == 5


def test_unrelated_view_passes_through():
    request = factory.get("/api/other/")
    view = type("SchemaView", (), {})
    assert validate_request_context(request, view, {}) is None


def test_extract_request_data_reads_json_body():
    request = factory.post("/api/cart/items/1/", {"quantity": 3}, format="json")
    assert _extract_request_data(request) == {"quantity": 3}


def test_extract_request_data_invalid_json_returns_none():
    request = factory.post(
        "/api/cart/items/1/", "{not json", content_type="application/json"
    )
    assert _extract_request_data(request) is None


def test_middleware_no_view_class_returns_none():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/health/live")
    response = middleware.process_view(request, lambda req: req, [], {})
    assert response is None


def test_middleware_renders_blocked_response():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/api/cart/")
    request.user = types.SimpleNamespace(id=None, is_authenticated=False)
    view_func = CartView.as_view()
    response = middleware.process_view(request, view_func, [], {})
    assert response.status_code == 401
    assert json.loads(response.content)["error"]["code"] == "UNAUTHORIZED"


def test_middleware_delegates_to_validation():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/api/orders/")
    with patch("apps.api.middleware.validate_request_context", return_value=None) as mock:
        response = middleware.process_view(request, OrderListView.as_view(), [], {})
    assert response is None
    mock.assert_called_once()
