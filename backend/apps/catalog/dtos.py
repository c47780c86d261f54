from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class CompanyDTO:
    id: int
    name: str
    logo: str


@dataclass
class ProductDTO:
    id: int
    name: str
    price: Decimal
    description: str
    image: str
    company_id: int
    company: Optional[CompanyDTO]
