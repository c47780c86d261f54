from __future__ import annotations

from collections import OrderedDict
from typing import Any, Iterable, List, Mapping

from django.db import transaction
from django.utils.translation import gettext as _

from apps.api.exceptions import ApplicationError
from apps.common import get_logger

from .dtos import OrderDTO, OrderLine
from .models import DEFAULT_DELIVERY_MODE
from .protocols import (
    CompanyRepositoryProtocol,
    OrderMapperProtocol,
    OrderRepositoryProtocol,
    ProductRepositoryProtocol,
    VendorCartPrunerProtocol,
)

logger = get_logger(__name__).bind(component="orders", layer="service")

MSG_CONFIRMED = "Order confirmed."


class VendorSubmissionFailed(ApplicationError):
    """The vendor order was rejected; nothing was recorded and the cart is untouched."""

    code = "VENDOR_SUBMISSION_FAILED"


def build_lines(raw_items: Any) -> List[OrderLine]:
    """Validate ``[{"productId", "quantity"}]`` and merge repeated products."""
    if not isinstance(raw_items, (list, tuple)) or not raw_items:
        raise VendorSubmissionFailed(_("The order has no products."))
    merged: "OrderedDict[int, int]" = OrderedDict()
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, Mapping):
            raise VendorSubmissionFailed(
                _("Invalid order item."), details={"index": index}
            )
        product_id = _positive_int(raw.get("productId"))
        quantity = _positive_int(raw.get("quantity"))
        if product_id is None:
            raise VendorSubmissionFailed(
                _("Invalid product in order."), details={"index": index}
            )
        if quantity is None:
            raise VendorSubmissionFailed(
                _("Quantity must be at least 1."),
                details={"index": index, "productId": product_id},
            )
        merged[product_id] = merged.get(product_id, 0) + quantity
    return [OrderLine(product_id=pid, quantity=qty) for pid, qty in merged.items()]


def _positive_int(raw: Any):
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and raw.strip().isascii() and raw.strip().isdigit():
        value = int(raw.strip())
    else:
        return None
    return value if value >= 1 else None


class OrderService:
    """Confirms one vendor's share of a cart as an order.

    The order rows and the removal of that vendor's cart entries commit
    together; entries of other vendors are never touched.
    """

    def __init__(
        self,
        orders: OrderRepositoryProtocol,
        companies: CompanyRepositoryProtocol,
        products: ProductRepositoryProtocol,
        cart: VendorCartPrunerProtocol,
        mapper: OrderMapperProtocol,
    ):
        self.orders = orders
        self.companies = companies
        self.products = products
        self.cart = cart
        self.mapper = mapper
        self.logger = logger.bind(service="OrderService")

    def confirm(
        self,
        user_id: int,
        company_id: int,
        delivery_mode: str,
        pickup_time: str,
        items: Iterable[Any],
    ) -> OrderDTO:
        company = self.companies.get(id=company_id, is_active=True)
        if company is None:
            self.logger.warning("Order for unknown vendor", user_id=user_id, company_id=company_id)
            raise VendorSubmissionFailed(
                _("The vendor is not available."), details={"vendorId": company_id}
            )
        lines = build_lines(list(items) if items is not None else None)
        wanted = [line.product_id for line in lines]
        prices = {
            p.id: p.price for p in self.products.list_for_company(company_id, wanted)
        }
        foreign = [pid for pid in wanted if pid not in prices]
        if foreign:
            self.logger.warning(
                "Order lists products outside the vendor",
                user_id=user_id,
                company_id=company_id,
                products=foreign,
            )
            raise VendorSubmissionFailed(
                _("Some products do not belong to this vendor."),
                details={"vendorId": company_id, "productIds": foreign},
            )
        # Same lock-then-transaction order as the cart mutations
        with self.cart.exclusive(user_id), transaction.atomic():
            order = self.orders.create_with_items(
                user_id=user_id,
                company_id=company_id,
                delivery_mode=(delivery_mode or "").strip() or DEFAULT_DELIVERY_MODE,
                pickup_time=(pickup_time or "").strip(),
                lines=lines,
                prices=prices,
            )
            pruned = self.cart.remove_company_entries(user_id, company_id)
        self.logger.info(
            "Order confirmed",
            user_id=user_id,
            company_id=company_id,
            order_id=order.id,
            lines=len(lines),
            pruned=pruned,
        )
        return self.mapper.to_dto(order)

    def list_for_user(self, user_id: int) -> List[OrderDTO]:
        return self.mapper.many_to_dto(self.orders.list_for_user(user_id))
