from apps.api.exceptions import ApplicationError


class InvalidQuantityError(ApplicationError):
    """Quantity missing, not an integer, or below 1. Raised before any write."""

    code = "INVALID_QUANTITY"


class CartNotFoundError(ApplicationError):
    """Only raised when the missing-cart policy is ``error``."""

    code = "CART_NOT_FOUND"


class ProductNotFoundError(ApplicationError):
    code = "NOT_FOUND"
