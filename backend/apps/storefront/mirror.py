from typing import Any, Mapping, Optional

from apps.common import get_logger

from .errors import StorefrontError, TransientNetworkFailure
from .items import product_identity
from .reconcile import CartState, RemoveItemOp, SetQuantityOp, reconcile
from .results import OperationResult
from .splitter import DEFAULT_DELIVERY_MODE, OrderSplitter
from .store import CartStateStore
from .transport import CartApiClient

logger = get_logger(__name__).bind(component="storefront", layer="mirror")


class CartMirror:
    """Local, eventually consistent copy of the caller's server cart.

    Every operation runs its round trip to completion and returns an
    ``OperationResult``; transport failures are logged and returned, never
    raised, and nothing is retried.

    Responses are applied in the order they arrive. A slow response can
    therefore overwrite a newer optimistic quantity; callers that issue
    overlapping updates for the same product should ``refresh`` afterwards.
    """

    def __init__(
        self,
        api: CartApiClient,
        store: Optional[CartStateStore] = None,
        splitter: Optional[OrderSplitter] = None,
    ):
        self.api = api
        self.store = store or CartStateStore()
        self.splitter = splitter or OrderSplitter(api, self.store)

    @property
    def items(self):
        return self.store.state

    def refresh(self) -> OperationResult:
        try:
            state = self._server_state(self.api.get_cart())
        except StorefrontError as exc:
            logger.warning("Cart refresh failed", error=exc.message)
            return OperationResult.failure(exc)
        self.store.replace(state)
        return OperationResult.success()

    def add(self, product: Any, quantity: int = 1) -> OperationResult:
        """Add ``quantity`` of ``product``; the mirror waits for the server's merged list."""
        product_id, vendor = product_identity(product)
        supplied = {product_id: vendor} if vendor is not None else None
        try:
            body = self.api.add_item(product_id, quantity)
            state = self._server_state(_products(body), supplied)
        except StorefrontError as exc:
            logger.warning("Add to cart failed", product_id=product_id, error=exc.message)
            return OperationResult.failure(exc)
        self.store.replace(state)
        return OperationResult.success(_message(body))

    def set_quantity(self, product_id: int, quantity: int) -> OperationResult:
        if quantity < 1:
            return self.remove(product_id)
        before = self.store.state
        self.store.dispatch(SetQuantityOp(product_id, quantity))
        try:
            body = self.api.set_quantity(product_id, quantity)
            state = self._server_state(_products(body))
        except StorefrontError as exc:
            logger.warning(
                "Quantity update failed", product_id=product_id, quantity=quantity, error=exc.message
            )
            self.store.replace(before)
            return OperationResult.failure(exc)
        self.store.replace(state)
        return OperationResult.success(_message(body))

    def remove(self, product_id: int) -> OperationResult:
        try:
            body = self.api.remove_item(product_id)
        except StorefrontError as exc:
            logger.warning("Remove from cart failed", product_id=product_id, error=exc.message)
            return OperationResult.failure(exc)
        self.store.dispatch(RemoveItemOp(product_id))
        return OperationResult.success(_message(body))

    def clear(self) -> OperationResult:
        try:
            body = self.api.clear()
        except StorefrontError as exc:
            logger.warning("Clearing cart failed", error=exc.message)
            return OperationResult.failure(exc)
        self.store.replace(())
        return OperationResult.success(_message(body))

    def confirm_order(
        self,
        vendor_id: int,
        pickup_time: str,
        delivery_mode: str = DEFAULT_DELIVERY_MODE,
    ) -> OperationResult:
        return self.splitter.confirm(vendor_id, pickup_time, delivery_mode=delivery_mode)

    def _server_state(self, server_items: Any, supplied=None) -> CartState:
        """Reconcile against the server list, or raise if the list cannot be read."""
        if not isinstance(server_items, (list, tuple)):
            raise TransientNetworkFailure("Server returned an unreadable cart")
        try:
            return reconcile(self.store.state, server_items, supplied)
        except ValueError as exc:
            logger.error("Unreadable cart item in server response", error=str(exc))
            raise TransientNetworkFailure("Server returned an unreadable cart") from exc


def _products(body: Any) -> Any:
    return body.get("products") if isinstance(body, Mapping) else None


def _message(body: Any) -> str:
    message = body.get("message") if isinstance(body, Mapping) else None
    return message if isinstance(message, str) else ""
