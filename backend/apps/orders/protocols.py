from __future__ import annotations

from decimal import Decimal
from typing import Any, ContextManager, Iterable, List, Mapping, Optional, Protocol

from apps.catalog.models import Company, Product

from .dtos import OrderDTO, OrderLine
from .models import Order


class OrderRepositoryProtocol(Protocol):
    def list_for_user(self, user_id: int) -> Iterable[Order]:
        ...

    def create_with_items(
        self,
        *,
        user_id: int,
        company_id: int,
        delivery_mode: str,
        pickup_time: str,
        lines: Iterable[OrderLine],
        prices: Mapping[int, Decimal],
    ) -> Order:
        ...


class CompanyRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Company]:
        ...


class ProductRepositoryProtocol(Protocol):
    def list_for_company(self, company_id: int, product_ids=None) -> Iterable[Product]:
        ...


class VendorCartPrunerProtocol(Protocol):
    def exclusive(self, user_id: int) -> ContextManager[None]:
        ...

    def remove_company_entries(self, user_id: int, company_id: int) -> int:
        ...


class OrderMapperProtocol(Protocol):
    def to_dto(self, order: Any) -> OrderDTO:
        ...

    def many_to_dto(self, orders: Iterable[Any]) -> List[OrderDTO]:
        ...
