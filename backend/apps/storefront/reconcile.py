"""Pure state transitions for the cart mirror.

A mutation is applied in two phases: ``apply_optimistic`` rewrites the local
state before the server answers, then ``reconcile`` replaces it with the
server's list. Neither function touches the network or the store.
"""
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from .items import ClientCartItem, VendorInfo

CartState = Tuple[ClientCartItem, ...]


@dataclass(frozen=True)
class SetQuantityOp:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class RemoveItemOp:
    product_id: int


@dataclass(frozen=True)
class PruneVendorOp:
    vendor_id: int


CartOp = Union[SetQuantityOp, RemoveItemOp, PruneVendorOp]


def resolve_vendor(
    server: Optional[VendorInfo],
    previous: Optional[VendorInfo],
    supplied: Optional[VendorInfo],
) -> Optional[VendorInfo]:
    """Server value, else what the mirror already knew, else what the caller supplied."""
    for candidate in (server, previous, supplied):
        if candidate is not None:
            return candidate
    return None


def apply_optimistic(state: CartState, op: CartOp) -> CartState:
    if isinstance(op, SetQuantityOp):
        if op.quantity < 1:
            return apply_optimistic(state, RemoveItemOp(op.product_id))
        return tuple(
            item.with_quantity(op.quantity) if item.product_id == op.product_id else item
            for item in state
        )
    if isinstance(op, RemoveItemOp):
        return tuple(item for item in state if item.product_id != op.product_id)
    if isinstance(op, PruneVendorOp):
        return tuple(item for item in state if not item.belongs_to(op.vendor_id))
    raise TypeError(f"Unsupported cart operation: {op!r}")


def reconcile(
    state: CartState,
    server_items: Iterable[Any],
    supplied: Optional[Mapping[int, VendorInfo]] = None,
) -> CartState:
    """Replace ``state`` with the server list, carrying vendor metadata forward.

    ``server_items`` may be raw API payloads or ``ClientCartItem`` instances.
    ``supplied`` maps product id to the vendor known by the operation that
    triggered the round trip (for example the product passed to ``add``).
    """
    previous = {item.product_id: item for item in state}
    supplied = supplied or {}
    merged = []
    for raw in server_items:
        item = raw if isinstance(raw, ClientCartItem) else ClientCartItem.from_payload(raw)
        known = previous.get(item.product_id)
        vendor = resolve_vendor(
            item.vendor,
            known.vendor if known is not None else None,
            supplied.get(item.product_id),
        )
        if item.vendor_id is None and known is not None and known.vendor_id is not None:
            item = replace(item, vendor_id=known.vendor_id)
        merged.append(item.with_vendor(vendor))
    return tuple(merged)
