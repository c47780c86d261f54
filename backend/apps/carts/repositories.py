from contextlib import contextmanager
from typing import ContextManager, Iterator, Optional

from django.db import transaction

from apps.common.repository import GenericRepository

from .locks import UserLockRegistry, cart_locks
from .models import Cart, CartEntry


class CartRepository(GenericRepository[Cart]):
    def __init__(self, locks: Optional[UserLockRegistry] = None):
        super().__init__(Cart)
        self.locks = locks or cart_locks

    def get_for_user(self, user_id: int) -> Optional[Cart]:
        return self.get(user_id=user_id)

    def get_or_create_for_user(self, user_id: int) -> Cart:
        # get_or_create re-reads on IntegrityError, so racing creators converge
        cart, _created = self.model.objects.get_or_create(user_id=user_id)
        return cart

    def hold(self, user_id: int) -> ContextManager[None]:
        """Hold the user's in-process lock without opening a transaction."""
        return self.locks.hold(user_id)

    @contextmanager
    def locked(self, user_id: int, create: bool = True) -> Iterator[Optional[Cart]]:
        """Yield the user's cart with every other mutation for that user excluded.

        The in-process lock serialises threads of this worker; the row lock
        taken by ``select_for_update`` covers other workers on databases that
        support it. Yields ``None`` when ``create`` is False and no cart exists.
        """
        with self.locks.hold(user_id):
            with transaction.atomic():
                cart = (
                    self.get_or_create_for_user(user_id)
                    if create
                    else self.get_for_user(user_id)
                )
                if cart is not None:
                    cart = self.model.objects.select_for_update().get(pk=cart.pk)
                yield cart


class CartEntryRepository(GenericRepository[CartEntry]):
    def __init__(self):
        super().__init__(CartEntry)

    def _queryset(self):
        return self.model.objects.select_related("product", "product__company")

    def list_entries(self, cart: Cart):
        return self._queryset().filter(cart=cart).order_by("id")

    def find_entry(self, cart: Cart, product_id: int) -> Optional[CartEntry]:
        return self._queryset().filter(cart=cart, product_id=product_id).first()

    def upsert_entry(self, cart: Cart, product_id: int, quantity: int) -> CartEntry:
        if quantity < 1:
            raise ValueError("Cart entry quantity must be at least 1")
        entry, _created = self.model.objects.update_or_create(
            cart=cart, product_id=product_id, defaults={"quantity": quantity}
        )
        return entry

    def remove_entry(self, cart: Cart, product_id: int) -> int:
        deleted, _ = self.model.objects.filter(cart=cart, product_id=product_id).delete()
        return deleted

    def clear(self, cart: Cart) -> int:
        deleted, _ = self.model.objects.filter(cart=cart).delete()
        return deleted

    def remove_company_entries(self, cart: Cart, company_id: int) -> int:
        deleted, _ = self.model.objects.filter(
            cart=cart, product__company_id=company_id
        ).delete()
        return deleted
