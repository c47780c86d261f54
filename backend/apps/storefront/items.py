from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class VendorInfo:
    id: int
    name: str = ""
    logo: str = ""

    @classmethod
    def from_payload(cls, data: Any) -> Optional["VendorInfo"]:
        """Build from ``{"id", "name", "logo"}``; anything without an id is treated as absent."""
        if isinstance(data, VendorInfo):
            return data
        if not isinstance(data, Mapping) or data.get("id") is None:
            return None
        return cls(id=int(data["id"]), name=data.get("name") or "", logo=data.get("logo") or "")


@dataclass(frozen=True)
class ClientCartItem:
    product_id: int
    name: str
    price: Decimal
    quantity: int
    vendor_id: Optional[int] = None
    vendor: Optional[VendorInfo] = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "ClientCartItem":
        """Build from a server cart item; any malformed field raises ``ValueError``."""
        if not isinstance(data, Mapping):
            raise ValueError(f"Cart item must be an object, got {data!r}")
        try:
            vendor = VendorInfo.from_payload(data.get("vendor"))
            vendor_id = data.get("vendorId")
            if vendor_id is None and vendor is not None:
                vendor_id = vendor.id
            return cls(
                product_id=int(data["productId"]),
                name=data.get("name") or "",
                price=to_decimal(data.get("price")),
                quantity=int(data["quantity"]),
                vendor_id=int(vendor_id) if vendor_id is not None else None,
                vendor=vendor,
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed cart item: {data!r}") from exc

    def with_quantity(self, quantity: int) -> "ClientCartItem":
        return replace(self, quantity=quantity)

    def with_vendor(self, vendor: Optional[VendorInfo]) -> "ClientCartItem":
        vendor_id = self.vendor_id
        if vendor_id is None and vendor is not None:
            vendor_id = vendor.id
        return replace(self, vendor=vendor, vendor_id=vendor_id)

    def belongs_to(self, vendor_id: int) -> bool:
        if self.vendor_id is not None:
            return self.vendor_id == vendor_id
        return self.vendor is not None and self.vendor.id == vendor_id


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid price value: {value!r}") from exc


def product_identity(product: Any) -> Tuple[int, Optional[VendorInfo]]:
    """Return ``(product_id, vendor)`` from a catalog product payload or a ``ClientCartItem``.

    Catalog payloads carry their vendor under ``vendor`` or ``company``.
    """
    if isinstance(product, ClientCartItem):
        return product.product_id, product.vendor
    if isinstance(product, Mapping):
        raw_id = product.get("productId", product.get("id"))
        if raw_id is None:
            raise ValueError("Product payload has no id")
        vendor = VendorInfo.from_payload(product.get("vendor") or product.get("company"))
        return int(raw_id), vendor
    return int(product), None
