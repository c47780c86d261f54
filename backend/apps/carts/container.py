from __future__ import annotations

from django.conf import settings

from apps.catalog.mappers import ProductMapper
from apps.catalog.repositories import ProductRepository

from .mappers import CartEntryMapper
from .repositories import CartEntryRepository, CartRepository
from .services import CartService


def build_cart_service() -> CartService:
    return CartService(
        carts=CartRepository(),
        entries=CartEntryRepository(),
        products=ProductRepository(),
        entry_mapper=CartEntryMapper(ProductMapper()),
        missing_cart_policy=getattr(settings, "CART_MISSING_POLICY", "ignore"),
    )
