from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from apps.catalog.dtos import CompanyDTO


@dataclass(frozen=True)
class OrderLine:
    """A validated (product, quantity) pair submitted for one vendor."""

    product_id: int
    quantity: int


@dataclass
class OrderItemDTO:
    product_id: int
    name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


@dataclass
class OrderDTO:
    id: int
    company_id: int
    company: Optional[CompanyDTO]
    delivery_mode: str
    pickup_time: str
    status: str
    total: Decimal
    created_at: datetime
    items: List[OrderItemDTO] = field(default_factory=list)
