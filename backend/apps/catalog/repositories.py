from apps.common.repository import GenericRepository

from .models import Company, Product


class CompanyRepository(GenericRepository[Company]):
    def __init__(self):
        super().__init__(Company)


class ProductRepository(GenericRepository[Product]):
    """Read-only product lookups; the cart core never writes products."""

    def __init__(self):
        super().__init__(Product)

    def _queryset(self):
        return self.model.objects.select_related("company")

    def list_for_company(self, company_id: int, product_ids=None):
        qs = self._queryset().filter(company_id=company_id)
        if product_ids is not None:
            qs = qs.filter(id__in=list(product_ids))
        return qs
