from decimal import Decimal
from urllib.parse import urlsplit

import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from apps.carts.models import CartEntry
from apps.catalog.models import Company, Product
from apps.orders.models import Order
from apps.storefront.errors import CartRequestRejected, VendorSubmissionFailed
from apps.storefront.items import VendorInfo
from apps.storefront.mirror import CartMirror
from apps.storefront.transport import CartApiClient
from apps.users.models import User

BASE_URL = "http://testserver/api"


class DjangoClientAdapter(BaseAdapter):
    """Routes ``requests`` calls into the Django test client."""

    def __init__(self, client):
        super().__init__()
        self.client = client

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        parts = urlsplit(request.url)
        path = parts.path + (f"?{parts.query}" if parts.query else "")
        extra = {}
        if request.headers.get("Authorization"):
            extra["HTTP_AUTHORIZATION"] = request.headers["Authorization"]
        result = self.client.generic(
            request.method,
            path,
            data=request.body or b"",
            content_type=request.headers.get("Content-Type", "application/json"),
            **extra,
        )
        response = requests.Response()
        response.status_code = result.status_code
        response._content = result.content
        response.headers = CaseInsensitiveDict(result.headers.items())
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


class TestStorefrontAgainstApi(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="client", password="TestPass123", email="client@example.com"
        )
        self.vendor_a = Company.objects.create(name="Bean Bar", logo="logos/bar.png")
        self.vendor_b = Company.objects.create(name="Crumbs")
        self.coffee = Product.objects.create(
            name="Coffee", price=Decimal("3.50"), company=self.vendor_a
        )
        self.bread = Product.objects.create(
            name="Bread", price=Decimal("4.00"), company=self.vendor_b
        )
        session = requests.Session()
        session.mount("http://testserver", DjangoClientAdapter(self.client))
        self.api = CartApiClient(
            BASE_URL, str(AccessToken.for_user(self.user)), session=session
        )
        self.mirror = CartMirror(self.api)

    def test_mirror_follows_server_cart(self):
        self.assertTrue(self.mirror.add({"id": self.coffee.id}, 2).ok)
        self.assertTrue(self.mirror.add({"id": self.bread.id}, 1).ok)
        self.assertTrue(self.mirror.set_quantity(self.coffee.id, 5).ok)
        items = {i.product_id: i for i in self.mirror.items}
        self.assertEqual(items[self.coffee.id].quantity, 5)
        self.assertEqual(items[self.coffee.id].price, Decimal("3.5"))
        self.assertEqual(
            items[self.coffee.id].vendor, VendorInfo(self.vendor_a.id, "Bean Bar", "logos/bar.png")
        )
        self.assertEqual(CartEntry.objects.get(product=self.coffee).quantity, 5)

    def test_unknown_product_is_rejected_with_server_message(self):
        with self.assertRaises(CartRequestRejected) as ctx:
            self.api.add_item(999999, 1)
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(ctx.exception.code, "NOT_FOUND")
        self.assertEqual(ctx.exception.message, "Product not found")

    def test_rejected_order_message_reaches_client_verbatim(self):
        self.mirror.add({"id": self.coffee.id}, 1)
        with self.assertRaises(VendorSubmissionFailed) as ctx:
            self.api.confirm_order(
                self.vendor_a.id,
                "Pickup at store",
                "10:30",
                [{"productId": self.bread.id, "quantity": 1}],
            )
        self.assertEqual(ctx.exception.status, 422)
        self.assertEqual(ctx.exception.code, "VENDOR_SUBMISSION_FAILED")
        self.assertEqual(ctx.exception.message, "Some products do not belong to this vendor.")
        self.assertEqual(Order.objects.count(), 0)

    def test_mirror_surfaces_vendor_rejection_and_keeps_items(self):
        self.mirror.add({"id": self.coffee.id}, 1)
        self.mirror.add({"id": self.bread.id}, 1)
        before = self.mirror.items
        Company.objects.filter(pk=self.vendor_a.pk).update(is_active=False)
        result = self.mirror.confirm_order(self.vendor_a.id, "10:30")
        self.assertFalse(result.ok)
        self.assertEqual(result.message, "The vendor is not available.")
        self.assertEqual(self.mirror.items, before)
        self.assertEqual(CartEntry.objects.count(), 2)

    def test_confirm_prunes_vendor_on_both_sides(self):
        self.mirror.add({"id": self.coffee.id}, 2)
        self.mirror.add({"id": self.bread.id}, 1)
        result = self.mirror.confirm_order(self.vendor_a.id, "10:30")
        self.assertTrue(result.ok)
        self.assertEqual(result.message, "Order confirmed.")
        self.assertEqual([i.product_id for i in self.mirror.items], [self.bread.id])
        self.assertEqual(
            list(CartEntry.objects.values_list("product_id", flat=True)), [self.bread.id]
        )
        self.assertEqual(Order.objects.get().total, Decimal("7.00"))
