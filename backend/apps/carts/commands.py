import re
from dataclasses import dataclass
from typing import Any

from .errors import InvalidQuantityError, ProductNotFoundError

_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)


def parse_quantity(raw: Any) -> int:
    """Accept an int (not bool) or a string of digits; anything else, or < 1, is rejected."""
    if isinstance(raw, bool) or raw is None:
        quantity = None
    elif isinstance(raw, int):
        quantity = raw
    elif isinstance(raw, str) and _INTEGER.fullmatch(raw.strip()):
        quantity = int(raw.strip())
    else:
        quantity = None
    if quantity is None:
        raise InvalidQuantityError(
            "Quantity must be an integer", details={"quantity": _echo(raw)}
        )
    if quantity < 1:
        raise InvalidQuantityError(
            "Quantity must be at least 1", details={"quantity": quantity}
        )
    return quantity


def _echo(raw: Any) -> Any:
    return raw if raw is None or isinstance(raw, (str, int, float, bool)) else repr(raw)


@dataclass(frozen=True)
class CartItemCommand:
    product_id: int
    quantity: int

    @staticmethod
    def from_raw(product_id: Any, quantity: Any) -> "CartItemCommand":
        checked = parse_quantity(quantity)
        try:
            pid = int(product_id)
        except (TypeError, ValueError):
            pid = 0
        if pid <= 0 or isinstance(product_id, bool):
            raise ProductNotFoundError(
                "Product not found", details={"productId": _echo(product_id)}
            )
        return CartItemCommand(product_id=pid, quantity=checked)
