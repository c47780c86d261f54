from __future__ import annotations

from typing import Any, List, Optional

from django.utils.translation import gettext as _

from apps.common import get_logger

from .commands import CartItemCommand, parse_quantity
from .dtos import CartEntryDTO, CartResult
from .errors import CartNotFoundError, InvalidQuantityError, ProductNotFoundError
from .protocols import (
    CartEntryMapperProtocol,
    CartEntryRepositoryProtocol,
    CartRepositoryProtocol,
    ProductRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="carts", layer="service")

MISSING_CART_IGNORE = "ignore"
MISSING_CART_ERROR = "error"
MISSING_CART_POLICIES = (MISSING_CART_IGNORE, MISSING_CART_ERROR)

MSG_ADDED = "Product added to cart."
MSG_UPDATED = "Quantity updated."
MSG_REMOVED = "Product removed from cart."
MSG_CLEARED = "Cart cleared."

__all__ = [
    "CartService",
    "CartNotFoundError",
    "InvalidQuantityError",
    "ProductNotFoundError",
    "MISSING_CART_POLICIES",
]


class CartService:
    """Per-user cart operations.

    Every mutation runs inside ``carts.locked(user_id)`` so that two requests
    for the same user never interleave their read-modify-write, and every
    mutation answers with the full cart as it stood when the lock was held.
    """

    def __init__(
        self,
        carts: CartRepositoryProtocol,
        entries: CartEntryRepositoryProtocol,
        products: ProductRepositoryProtocol,
        entry_mapper: CartEntryMapperProtocol,
        missing_cart_policy: str = MISSING_CART_IGNORE,
    ):
        if missing_cart_policy not in MISSING_CART_POLICIES:
            raise ValueError(f"Unknown missing cart policy: {missing_cart_policy!r}")
        self.carts = carts
        self.entries = entries
        self.products = products
        self.entry_mapper = entry_mapper
        self.missing_cart_policy = missing_cart_policy
        self.logger = logger.bind(service="CartService")

    def _snapshot(self, cart) -> List[CartEntryDTO]:
        if cart is None:
            return []
        return self.entry_mapper.many_to_dto(self.entries.list_entries(cart))

    def view(self, user_id: int) -> List[CartEntryDTO]:
        """Return the user's entries in insertion order, creating the cart on first use."""
        cart = self.carts.get_or_create_for_user(user_id)
        items = self._snapshot(cart)
        self.logger.debug("Cart viewed", user_id=user_id, entries=len(items))
        return items

    def add(self, user_id: int, product_id: Any, quantity: Any) -> CartResult:
        cmd = CartItemCommand.from_raw(product_id, quantity)
        if self.products.get(id=cmd.product_id) is None:
            self.logger.warning(
                "Add rejected for unknown product", user_id=user_id, product_id=cmd.product_id
            )
            raise ProductNotFoundError(
                "Product not found", details={"productId": cmd.product_id}
            )
        with self.carts.locked(user_id) as cart:
            existing = self.entries.find_entry(cart, cmd.product_id)
            total = cmd.quantity + (existing.quantity if existing is not None else 0)
            self.entries.upsert_entry(cart, cmd.product_id, total)
            items = self._snapshot(cart)
        self.logger.info(
            "Product added to cart",
            user_id=user_id,
            product_id=cmd.product_id,
            added=cmd.quantity,
            quantity=total,
        )
        return CartResult(message=_(MSG_ADDED), items=items)

    def set_quantity(self, user_id: int, product_id: Any, quantity: Any) -> CartResult:
        """Overwrite the quantity of an entry already in the cart.

        A product that is not in the cart is left alone. A missing cart is a
        no-op under the ``ignore`` policy and CART_NOT_FOUND under ``error``.
        """
        checked = parse_quantity(quantity)
        pid = _as_product_id(product_id)
        with self.carts.locked(user_id, create=False) as cart:
            if cart is None:
                if self.missing_cart_policy == MISSING_CART_ERROR:
                    self.logger.warning("Set quantity on missing cart", user_id=user_id)
                    raise CartNotFoundError(
                        "Cart not found", details={"userId": user_id}
                    )
                self.logger.debug("Set quantity ignored, no cart", user_id=user_id)
                return CartResult(message=_(MSG_UPDATED), items=[])
            if pid is not None and self.entries.find_entry(cart, pid) is not None:
                self.entries.upsert_entry(cart, pid, checked)
                self.logger.info(
                    "Cart quantity updated", user_id=user_id, product_id=pid, quantity=checked
                )
            else:
                self.logger.debug(
                    "Set quantity ignored, product not in cart",
                    user_id=user_id,
                    product_id=product_id,
                )
            items = self._snapshot(cart)
        return CartResult(message=_(MSG_UPDATED), items=items)

    def remove(self, user_id: int, product_id: Any) -> CartResult:
        pid = _as_product_id(product_id)
        with self.carts.locked(user_id, create=False) as cart:
            removed = 0
            if cart is not None and pid is not None:
                removed = self.entries.remove_entry(cart, pid)
            items = self._snapshot(cart)
        self.logger.info(
            "Product removed from cart", user_id=user_id, product_id=product_id, removed=removed
        )
        return CartResult(message=_(MSG_REMOVED), items=items)

    def clear(self, user_id: int) -> CartResult:
        with self.carts.locked(user_id, create=False) as cart:
            removed = self.entries.clear(cart) if cart is not None else 0
        self.logger.info("Cart cleared", user_id=user_id, removed=removed)
        return CartResult(message=_(MSG_CLEARED), items=[])

    def exclusive(self, user_id: int):
        """Keep every other cart mutation for ``user_id`` out until the block exits.

        Re-entrant, so the operations above may be called inside the block.
        """
        return self.carts.hold(user_id)

    def remove_company_entries(self, user_id: int, company_id: int) -> int:
        """Drop every entry whose product belongs to ``company_id``; other vendors are untouched."""
        with self.carts.locked(user_id, create=False) as cart:
            removed = (
                self.entries.remove_company_entries(cart, company_id)
                if cart is not None
                else 0
            )
        self.logger.info(
            "Vendor entries pruned", user_id=user_id, company_id=company_id, removed=removed
        )
        return removed


def _as_product_id(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None
