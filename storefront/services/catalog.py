from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from storefront.db.models import Product
from storefront.schemas import parse_id


@dataclass(frozen=True)
class ResolvedProduct:
    product_id: int
    exists: bool
    price: Optional[float] = None
    name: Optional[str] = None


class CatalogLookup:
    """Read-only view of the product table used while placing orders.

    Every call hits the store, so the price returned is the one current at
    call time.
    """

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, product_id: int) -> ResolvedProduct:
        key = parse_id(product_id)
        product = self.db.get(Product, key) if key is not None else None
        if product is None:
            return ResolvedProduct(product_id=product_id, exists=False)
        return ResolvedProduct(product_id=product.id, exists=True, price=product.price, name=product.name)
