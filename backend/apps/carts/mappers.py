from typing import Iterable, List, Optional

from apps.catalog.mappers import ProductMapper

from .dtos import CartEntryDTO
from .models import CartEntry


class CartEntryMapper:
    def __init__(self, product_mapper: Optional[ProductMapper] = None) -> None:
        self.product_mapper = product_mapper or ProductMapper()

    def to_dto(self, entry: CartEntry) -> CartEntryDTO:
        return CartEntryDTO(
            product=self.product_mapper.to_dto(entry.product), quantity=entry.quantity
        )

    def many_to_dto(self, entries: Iterable[CartEntry]) -> List[CartEntryDTO]:
        return [self.to_dto(e) for e in entries]
