import unittest
from unittest.mock import Mock

import requests

from apps.storefront.errors import (
    CartRequestRejected,
    TransientNetworkFailure,
    VendorSubmissionFailed,
)
from apps.storefront.transport import CartApiClient


def make_response(status_code, body=None):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


class CartApiClientTests(unittest.TestCase):
    def setUp(self):
        self.session = Mock()
        self.session.headers = {}
        self.client = CartApiClient(
            "http://api.test/api/", token="abc", timeout=5, session=self.session
        )

    def test_bearer_token_and_urls(self):
        self.session.request.return_value = make_response(200, [])
        self.assertEqual(self.client.get_cart(), [])
        self.assertEqual(self.session.headers["Authorization"], "Bearer abc")
        self.session.request.assert_called_once_with(
            "GET", "http://api.test/api/cart/", json=None, timeout=5
        )

    def test_add_item_sends_quantity(self):
        self.session.request.return_value = make_response(200, {"message": "ok", "products": []})
        self.client.add_item(3, 2)
        self.session.request.assert_called_once_with(
            "POST", "http://api.test/api/cart/items/3/", json={"quantity": 2}, timeout=5
        )

    def test_connection_error_is_transient(self):
        self.session.request.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(TransientNetworkFailure):
            self.client.clear()

    def test_timeout_is_transient(self):
        self.session.request.side_effect = requests.Timeout("slow")
        with self.assertRaises(TransientNetworkFailure):
            self.client.remove_item(1)

    def test_client_error_envelope_is_rejected(self):
        self.session.request.return_value = make_response(
            400,
            {"error": {"code": "INVALID_QUANTITY", "message": "Quantity must be at least 1", "status": 400}},
        )
        with self.assertRaises(CartRequestRejected) as ctx:
            self.client.set_quantity(1, 0)
        self.assertEqual(ctx.exception.code, "INVALID_QUANTITY")
        self.assertEqual(ctx.exception.status, 400)

    def test_server_error_is_transient(self):
        self.session.request.return_value = make_response(500, None)
        with self.assertRaises(TransientNetworkFailure) as ctx:
            self.client.get_cart()
        self.assertEqual(ctx.exception.status, 500)

    def test_unreadable_success_body_is_transient(self):
        self.session.request.return_value = make_response(200, None)
        with self.assertRaises(TransientNetworkFailure):
            self.client.get_cart()

    def test_order_rejection_passes_message_verbatim(self):
        self.session.request.return_value = make_response(
            422,
            {"error": {"code": "VENDOR_SUBMISSION_FAILED", "message": "Some products do not belong to this vendor."}},
        )
        with self.assertRaises(VendorSubmissionFailed) as ctx:
            self.client.confirm_order(1, "Pickup at store", "10:30", [{"productId": 1, "quantity": 1}])
        self.assertEqual(ctx.exception.message, "Some products do not belong to this vendor.")
        _, kwargs = self.session.request.call_args
        self.assertEqual(
            kwargs["json"],
            {
                "vendorId": 1,
                "deliveryMode": "Pickup at store",
                "pickupTime": "10:30",
                "items": [{"productId": 1, "quantity": 1}],
            },
        )

    def test_order_rejection_without_message_is_generic(self):
        self.session.request.return_value = make_response(502, None)
        with self.assertRaises(VendorSubmissionFailed) as ctx:
            self.client.confirm_order(1, "", "", [])
        self.assertEqual(ctx.exception.message, "Could not process the order")

    def test_bare_message_body_is_understood(self):
        self.session.request.return_value = make_response(409, {"message": "Busy"})
        with self.assertRaises(CartRequestRejected) as ctx:
            self.client.add_item(1, 1)
        self.assertEqual(ctx.exception.message, "Busy")
