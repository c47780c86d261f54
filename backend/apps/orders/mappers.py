from typing import Iterable, List, Optional

from apps.catalog.mappers import CompanyMapper, normalize_price

from .dtos import OrderDTO, OrderItemDTO
from .models import Order, OrderItem


class OrderItemMapper:
    @staticmethod
    def to_dto(item: OrderItem) -> OrderItemDTO:
        unit_price = normalize_price(item.unit_price)
        return OrderItemDTO(
            product_id=item.product_id,
            name=item.product.name,
            quantity=item.quantity,
            unit_price=unit_price,
            subtotal=normalize_price(unit_price * item.quantity),
        )


class OrderMapper:
    def __init__(
        self,
        company_mapper: Optional[CompanyMapper] = None,
        item_mapper: Optional[OrderItemMapper] = None,
    ) -> None:
        self.company_mapper = company_mapper or CompanyMapper()
        self.item_mapper = item_mapper or OrderItemMapper()

    def to_dto(self, order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,
            company_id=order.company_id,
            company=self.company_mapper.to_dto(order.company),
            delivery_mode=order.delivery_mode,
            pickup_time=order.pickup_time,
            status=order.status,
            total=normalize_price(order.total),
            created_at=order.created_at,
            items=[self.item_mapper.to_dto(i) for i in order.items.all()],
        )

    def many_to_dto(self, orders: Iterable[Order]) -> List[OrderDTO]:
        return [self.to_dto(o) for o in orders]
