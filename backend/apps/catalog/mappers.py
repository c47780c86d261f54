from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional

from .dtos import CompanyDTO, ProductDTO
from .models import Company, Product

CENT = Decimal("0.01")


def normalize_price(value) -> Decimal:
    """Coerce a stored price (Decimal, str, int or float) into an exact 2dp Decimal."""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, TypeError) as exc:
            raise ValueError(f"Invalid price value: {value!r}") from exc
    return amount.quantize(CENT)


class CompanyMapper:
    @staticmethod
    def to_dto(company: Company) -> CompanyDTO:
        return CompanyDTO(id=company.id, name=company.name, logo=company.logo or "")


class ProductMapper:
    def __init__(self, company_mapper: Optional[CompanyMapper] = None) -> None:
        self.company_mapper = company_mapper or CompanyMapper()

    def to_dto(self, product: Product) -> ProductDTO:
        company = getattr(product, "company", None)
        return ProductDTO(
            id=product.id,
            name=product.name,
            price=normalize_price(product.price),
            description=product.description or "",
            image=product.image or "",
            company_id=product.company_id,
            company=self.company_mapper.to_dto(company) if company is not None else None,
        )

    def many_to_dto(self, products: Iterable[Product]) -> List[ProductDTO]:
        return [self.to_dto(p) for p in products]
