from __future__ import annotations

from apps.carts.container import build_cart_service
from apps.catalog.repositories import CompanyRepository, ProductRepository

from .mappers import OrderMapper
from .repositories import OrderRepository
from .services import OrderService


def build_order_service() -> OrderService:
    return OrderService(
        orders=OrderRepository(),
        companies=CompanyRepository(),
        products=ProductRepository(),
        cart=build_cart_service(),
        mapper=OrderMapper(),
    )
