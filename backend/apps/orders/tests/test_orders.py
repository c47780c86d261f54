from decimal import Decimal

from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from apps.carts.models import CartEntry
from apps.catalog.models import Company, Product
from apps.orders.models import Order, OrderItem
from apps.users.models import User


class TestOrders(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="client", password="TestPass123", email="client@example.com"
        )
        self.vendor_a = Company.objects.create(name="Bean Bar")
        self.vendor_b = Company.objects.create(name="Crumbs")
        self.coffee = Product.objects.create(
            name="Coffee", price=Decimal("3.50"), company=self.vendor_a
        )
        self.bread = Product.objects.create(
            name="Bread", price=Decimal("4.00"), company=self.vendor_b
        )
        token = AccessToken.for_user(self.user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        self.client.post(f"/api/cart/items/{self.coffee.id}/", {"quantity": 1}, format="json")
        self.client.post(f"/api/cart/items/{self.bread.id}/", {"quantity": 2}, format="json")

    def _confirm(self, vendor, items, **extra):
        payload = {"vendorId": vendor.id, "items": items, **extra}
        return self.client.post("/api/orders/", payload, format="json")

    def test_confirm_vendor_a_keeps_vendor_b_in_cart(self):
        res = self._confirm(
            self.vendor_a,
            [{"productId": self.coffee.id, "quantity": 1}],
            deliveryMode="Pickup at store",
            pickupTime="10:30",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        body = res.json()
        self.assertEqual(body["message"], "Order confirmed.")
        self.assertEqual(body["order"]["vendorId"], self.vendor_a.id)
        self.assertEqual(body["order"]["total"], 3.5)
        self.assertEqual(body["order"]["pickupTime"], "10:30")
        self.assertEqual(body["order"]["status"], "pending")
        cart = self.client.get("/api/cart/").json()
        self.assertEqual([p["productId"] for p in cart], [self.bread.id])
        self.assertEqual(cart[0]["quantity"], 2)

    def test_server_prices_are_used(self):
        res = self._confirm(self.vendor_b, [{"productId": self.bread.id, "quantity": 2, "price": 0}])
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        order = Order.objects.get()
        self.assertEqual(order.total, Decimal("8.00"))
        self.assertEqual(OrderItem.objects.get().unit_price, Decimal("4.00"))

    def test_rejected_order_leaves_cart_untouched(self):
        res = self._confirm(self.vendor_a, [{"productId": self.bread.id, "quantity": 1}])
        self.assertEqual(res.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        error = res.json()["error"]
        self.assertEqual(error["code"], "VENDOR_SUBMISSION_FAILED")
        self.assertEqual(error["message"], "Some products do not belong to this vendor.")
        self.assertEqual(CartEntry.objects.count(), 2)
        self.assertFalse(Order.objects.exists())

    def test_missing_vendor_id(self):
        res = self.client.post("/api/orders/", {"items": []}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.json()["error"]["code"], "VALIDATION_ERROR")

    def test_list_my_orders(self):
        self._confirm(self.vendor_a, [{"productId": self.coffee.id, "quantity": 1}])
        self._confirm(self.vendor_b, [{"productId": self.bread.id, "quantity": 2}])
        res = self.client.get("/api/orders/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        orders = res.json()
        self.assertEqual([o["vendorId"] for o in orders], [self.vendor_b.id, self.vendor_a.id])
        self.assertEqual(orders[0]["items"][0]["subtotal"], 8.0)
        self.assertEqual(self.client.get("/api/cart/").json(), [])
