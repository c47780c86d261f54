from __future__ import annotations

from typing import TYPE_CHECKING, ContextManager, Iterable, List, Optional, Protocol

from .models import Cart, CartEntry

if TYPE_CHECKING:
    from apps.carts.dtos import CartEntryDTO
    from apps.catalog.models import Product


class CartRepositoryProtocol(Protocol):
    def get_for_user(self, user_id: int) -> Optional[Cart]:
        ...

    def get_or_create_for_user(self, user_id: int) -> Cart:
        ...

    def hold(self, user_id: int) -> ContextManager[None]:
        ...

    def locked(self, user_id: int, create: bool = True) -> ContextManager[Optional[Cart]]:
        ...


class CartEntryRepositoryProtocol(Protocol):
    def list_entries(self, cart: Cart) -> Iterable[CartEntry]:
        ...

    def find_entry(self, cart: Cart, product_id: int) -> Optional[CartEntry]:
        ...

    def upsert_entry(self, cart: Cart, product_id: int, quantity: int) -> CartEntry:
        ...

    def remove_entry(self, cart: Cart, product_id: int) -> int:
        ...

    def clear(self, cart: Cart) -> int:
        ...

    def remove_company_entries(self, cart: Cart, company_id: int) -> int:
        ...


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Product"]:
        ...


class CartEntryMapperProtocol(Protocol):
    def many_to_dto(self, entries: Iterable[CartEntry]) -> List["CartEntryDTO"]:
        ...
