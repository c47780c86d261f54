"""Consumer-side cart mirror and per-vendor checkout for the BeanQuick API."""

from .items import ClientCartItem, VendorInfo
from .mirror import CartMirror
from .results import OperationResult
from .splitter import OrderSplitter
from .store import CartStateStore
from .transport import CartApiClient

__all__ = [
    "CartApiClient",
    "CartMirror",
    "CartStateStore",
    "ClientCartItem",
    "OperationResult",
    "OrderSplitter",
    "VendorInfo",
]
