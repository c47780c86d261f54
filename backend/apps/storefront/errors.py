from typing import Any, Optional

GENERIC_ORDER_FAILURE = "Could not process the order"


class StorefrontError(Exception):
    """Base for failures surfaced by the cart API client."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details


class TransientNetworkFailure(StorefrontError):
    """The call did not complete: connection error, timeout or an unexpected answer."""


class CartRequestRejected(StorefrontError):
    """The server answered a cart call with an error envelope (4xx)."""


class VendorSubmissionFailed(StorefrontError):
    """The order for one vendor was not accepted."""
