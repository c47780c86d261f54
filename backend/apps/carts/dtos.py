from dataclasses import dataclass, field
from typing import List

from apps.catalog.dtos import ProductDTO


@dataclass
class CartEntryDTO:
    product: ProductDTO
    quantity: int


@dataclass
class CartResult:
    """Outcome of a cart mutation: the confirmation message and the full cart view."""

    message: str
    items: List[CartEntryDTO] = field(default_factory=list)
