import unittest
from decimal import Decimal
from unittest.mock import Mock

from apps.storefront.errors import (
    CartRequestRejected,
    TransientNetworkFailure,
    VendorSubmissionFailed,
)
from apps.storefront.items import ClientCartItem, VendorInfo
from apps.storefront.mirror import CartMirror
from apps.storefront.store import CartStateStore

BAR = VendorInfo(1, "Bean Bar", "logos/1.png")
CRUMBS = VendorInfo(2, "Crumbs", "")


def server_item(product_id, quantity, vendor=None):
    data = {"productId": product_id, "name": f"P{product_id}", "price": 3.5, "quantity": quantity}
    if vendor is not None:
        data["vendorId"] = vendor.id
        data["vendor"] = {"id": vendor.id, "name": vendor.name, "logo": vendor.logo}
    return data


def local_item(product_id, quantity, vendor):
    return ClientCartItem(product_id, f"P{product_id}", Decimal("3.5"), quantity, vendor.id, vendor)


class CartMirrorTests(unittest.TestCase):
    def setUp(self):
        self.api = Mock()
        self.store = CartStateStore()
        self.mirror = CartMirror(self.api, self.store)

    def test_refresh_replaces_state(self):
        self.api.get_cart.return_value = [server_item(1, 2, BAR)]
        result = self.mirror.refresh()
        self.assertTrue(result.ok)
        self.assertEqual(self.mirror.items[0].quantity, 2)
        self.assertEqual(self.mirror.items[0].vendor, BAR)

    def test_refresh_failure_keeps_state(self):
        self.store.replace([local_item(1, 1, BAR)])
        self.api.get_cart.side_effect = TransientNetworkFailure("offline")
        result = self.mirror.refresh()
        self.assertFalse(result.ok)
        self.assertEqual(result.message, "offline")
        self.assertEqual(len(self.mirror.items), 1)

    def test_add_waits_for_server_and_uses_supplied_vendor(self):
        self.api.add_item.return_value = {
            "message": "Product added to cart.",
            "products": [server_item(7, 2)],
        }
        seen = []
        self.store.subscribe(seen.append)
        result = self.mirror.add({"id": 7, "company": {"id": 2, "name": "Crumbs"}}, 2)
        self.assertTrue(result.ok)
        self.assertEqual(result.message, "Product added to cart.")
        self.api.add_item.assert_called_once_with(7, 2)
        self.assertEqual(len(seen), 1)
        self.assertEqual(self.mirror.items[0].vendor, CRUMBS)
        self.assertEqual(self.mirror.items[0].vendor_id, 2)

    def test_add_keeps_previously_known_vendor(self):
        self.store.replace([local_item(1, 1, BAR)])
        self.api.add_item.return_value = {
            "message": "ok",
            "products": [server_item(1, 3), server_item(7, 1)],
        }
        self.mirror.add({"id": 7, "vendor": {"id": 2, "name": "Crumbs"}})
        by_id = {i.product_id: i for i in self.mirror.items}
        self.assertEqual(by_id[1].vendor, BAR)
        self.assertEqual(by_id[1].quantity, 3)
        self.assertEqual(by_id[7].vendor, CRUMBS)

    def test_add_failure_leaves_state(self):
        self.api.add_item.side_effect = CartRequestRejected("Product not found", status=404)
        result = self.mirror.add(99)
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, CartRequestRejected)
        self.assertEqual(self.mirror.items, ())

    def test_set_quantity_is_optimistic_then_reconciled(self):
        self.store.replace([local_item(1, 1, BAR)])
        seen = []
        self.store.subscribe(lambda state: seen.append(state[0].quantity))
        self.api.set_quantity.return_value = {"message": "Quantity updated.", "products": [server_item(1, 4)]}
        result = self.mirror.set_quantity(1, 4)
        self.assertTrue(result.ok)
        self.assertEqual(seen, [4, 4])
        self.assertEqual(self.mirror.items[0].vendor, BAR)

    def test_set_quantity_failure_restores_previous_state(self):
        before = (local_item(1, 2, BAR),)
        self.store.replace(before)
        self.api.set_quantity.side_effect = TransientNetworkFailure("timeout")
        result = self.mirror.set_quantity(1, 5)
        self.assertFalse(result.ok)
        self.assertEqual(self.mirror.items, before)

    def test_set_quantity_below_one_redirects_to_remove(self):
        self.store.replace([local_item(1, 2, BAR)])
        self.api.remove_item.return_value = {"message": "Product removed from cart.", "products": []}
        result = self.mirror.set_quantity(1, 0)
        self.assertTrue(result.ok)
        self.api.set_quantity.assert_not_called()
        self.api.remove_item.assert_called_once_with(1)
        self.assertEqual(self.mirror.items, ())

    def test_remove_failure_keeps_item(self):
        self.store.replace([local_item(1, 2, BAR)])
        self.api.remove_item.side_effect = TransientNetworkFailure("offline")
        result = self.mirror.remove(1)
        self.assertFalse(result.ok)
        self.assertEqual(len(self.mirror.items), 1)

    def test_remove_filters_by_product(self):
        self.store.replace([local_item(1, 2, BAR), local_item(2, 1, CRUMBS)])
        self.api.remove_item.return_value = {"message": "Product removed from cart.", "products": []}
        self.mirror.remove(1)
        self.assertEqual([i.product_id for i in self.mirror.items], [2])

    def test_clear(self):
        self.store.replace([local_item(1, 2, BAR)])
        self.api.clear.return_value = {"message": "Cart cleared.", "products": []}
        result = self.mirror.clear()
        self.assertEqual(result.message, "Cart cleared.")
        self.assertEqual(self.mirror.items, ())

    def test_confirm_order_prunes_only_that_vendor(self):
        self.store.replace([local_item(1, 1, BAR), local_item(2, 3, BAR), local_item(3, 1, CRUMBS)])
        self.api.confirm_order.return_value = {"message": "Order confirmed.", "order": {"id": 1}}
        result = self.mirror.confirm_order(1, "10:30")
        self.assertTrue(result.ok)
        self.api.confirm_order.assert_called_once_with(
            1,
            "Pickup at store",
            "10:30",
            [{"productId": 1, "quantity": 1}, {"productId": 2, "quantity": 3}],
        )
        self.assertEqual(self.mirror.items, (local_item(3, 1, CRUMBS),))

    def test_confirm_order_failure_surfaces_server_message(self):
        state = (local_item(1, 1, BAR), local_item(3, 1, CRUMBS))
        self.store.replace(state)
        self.api.confirm_order.side_effect = VendorSubmissionFailed("The vendor is not available.")
        result = self.mirror.confirm_order(1, "10:30")
        self.assertFalse(result.ok)
        self.assertEqual(result.message, "The vendor is not available.")
        self.assertEqual(self.mirror.items, state)

    def test_confirm_order_network_failure_uses_generic_message(self):
        self.store.replace([local_item(1, 1, BAR)])
        self.api.confirm_order.side_effect = TransientNetworkFailure("connection refused")
        result = self.mirror.confirm_order(1, "10:30")
        self.assertFalse(result.ok)
        self.assertEqual(result.message, "Could not process the order")
        self.assertEqual(len(self.mirror.items), 1)

    def test_add_with_unreadable_items_fails_without_raising(self):
        self.store.replace([local_item(1, 1, BAR)])
        for body in (
            {"products": [{"name": "no id"}]},
            {"products": [{"productId": 7, "quantity": 1, "price": "free"}]},
            {"products": "nope"},
            ["not", "an", "object"],
        ):
            with self.subTest(body=body):
                self.api.add_item.return_value = body
                result = self.mirror.add({"id": 7}, 1)
                self.assertFalse(result.ok)
                self.assertIsInstance(result.error, TransientNetworkFailure)
                self.assertEqual([i.product_id for i in self.mirror.items], [1])

    def test_set_quantity_with_unreadable_items_rolls_back(self):
        before = (local_item(1, 2, BAR),)
        self.store.replace(before)
        self.api.set_quantity.return_value = {"products": [{"productId": 1, "quantity": None}]}
        result = self.mirror.set_quantity(1, 5)
        self.assertFalse(result.ok)
        self.assertEqual(self.mirror.items, before)

    def test_refresh_with_non_list_body_keeps_state(self):
        self.store.replace([local_item(1, 1, BAR)])
        self.api.get_cart.return_value = {"error": "odd"}
        result = self.mirror.refresh()
        self.assertFalse(result.ok)
        self.assertEqual(len(self.mirror.items), 1)
