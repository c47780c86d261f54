from decimal import Decimal
from typing import Iterable, Mapping

from apps.common.repository import GenericRepository

from .dtos import OrderLine
from .models import Order, OrderItem


class OrderRepository(GenericRepository[Order]):
    def __init__(self):
        super().__init__(Order)

    def _queryset(self):
        return self.model.objects.select_related("company").prefetch_related(
            "items__product"
        )

    def list_for_user(self, user_id: int):
        return self._queryset().filter(user_id=user_id)

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
        """Insert the order and its items; ``prices`` maps product id to unit price.

        Callers own the surrounding transaction.
        """
        lines = list(lines)
        total = sum((prices[line.product_id] * line.quantity for line in lines), Decimal("0"))
        order = self.model.objects.create(
            user_id=user_id,
            company_id=company_id,
            delivery_mode=delivery_mode,
            pickup_time=pickup_time,
            total=total,
        )
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=prices[line.product_id],
                )
                for line in lines
            ]
        )
        return self._queryset().get(pk=order.pk)
