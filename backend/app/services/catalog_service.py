from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.product import Product
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.utils.transactions import smart_transaction


class CatalogException(Exception):
    pass


class ProductNotFound(CatalogException):
    pass


class CatalogService:
    """
    Direct reads and writes over stored products.
    create_product does not consult the identity resolver, so the same
    (title, category_id) pair may be created more than once through here.
    """

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)
        self.categories = CategoryRepository(db)

    def list_products(
        self, category_id: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Product]:
        return self.products.list(category_id=category_id, limit=limit)

    def get_product(self, product_id: int) -> Product:
        p = self.products.get(product_id)
        if not p:
            raise ProductNotFound(f"Product {product_id} not found")
        return p

    def _require_category(self, category_id: Optional[int]):
        if category_id is None or self.categories.get(category_id) is None:
            raise CatalogException(f"Category {category_id} does not exist")

    def create_product(self, fields: Dict) -> Product:
        with smart_transaction(self.db):
            self._require_category(fields["category_id"])
            p = self.products.create(**fields)
        self.db.refresh(p)
        return p

    def update_product(self, product_id: int, fields: Dict) -> Product:
        with smart_transaction(self.db):
            p = self.get_product(product_id)
            if "category_id" in fields:
                self._require_category(fields["category_id"])
            self.products.update(p, **fields)
        self.db.refresh(p)
        return p

    def delete_product(self, product_id: int):
        with smart_transaction(self.db):
            p = self.get_product(product_id)
            self.products.delete(p)
