from collections import OrderedDict
from typing import Dict, Iterable, List, Optional

from apps.common import get_logger

from .errors import GENERIC_ORDER_FAILURE, StorefrontError, VendorSubmissionFailed
from .items import ClientCartItem
from .reconcile import PruneVendorOp
from .results import OperationResult
from .store import CartStateStore
from .transport import CartApiClient

logger = get_logger(__name__).bind(component="storefront", layer="splitter")

DEFAULT_DELIVERY_MODE = "Pickup at store"


def group_by_vendor(
    items: Iterable[ClientCartItem],
) -> "OrderedDict[Optional[int], List[ClientCartItem]]":
    """Partition items by vendor id, keeping first-seen vendor order."""
    groups: "OrderedDict[Optional[int], List[ClientCartItem]]" = OrderedDict()
    for item in items:
        key = item.vendor_id if item.vendor_id is not None else (
            item.vendor.id if item.vendor is not None else None
        )
        groups.setdefault(key, []).append(item)
    return groups


def items_for_vendor(items: Iterable[ClientCartItem], vendor_id: int) -> List[ClientCartItem]:
    return [item for item in items if item.belongs_to(vendor_id)]


class OrderSplitter:
    """Submits one vendor's share of the mirrored cart as an order."""

    def __init__(self, api: CartApiClient, store: CartStateStore):
        self.api = api
        self.store = store

    def confirm(
        self,
        vendor_id: int,
        pickup_time: str,
        items: Optional[Iterable[ClientCartItem]] = None,
        delivery_mode: str = DEFAULT_DELIVERY_MODE,
    ) -> OperationResult:
        """Submit the order; on success drop that vendor's items from the mirror.

        On failure the mirror is left as it was and the result carries the
        server's message, or a generic one when the server gave none.
        """
        lines = list(items) if items is not None else items_for_vendor(self.store.state, vendor_id)
        payload: List[Dict[str, int]] = [
            {"productId": item.product_id, "quantity": item.quantity} for item in lines
        ]
        log = logger.bind(vendor_id=vendor_id, lines=len(payload))
        try:
            body = self.api.confirm_order(vendor_id, delivery_mode, pickup_time, payload)
        except VendorSubmissionFailed as exc:
            log.warning("Vendor order rejected", status=exc.status, code=exc.code)
            return OperationResult.failure(exc)
        except StorefrontError as exc:
            log.error("Vendor order could not be sent", error=exc.message)
            return OperationResult.failure(exc, GENERIC_ORDER_FAILURE)
        self.store.dispatch(PruneVendorOp(vendor_id))
        log.info("Vendor order confirmed")
        message = body.get("message", "") if isinstance(body, dict) else ""
        return OperationResult.success(message)
