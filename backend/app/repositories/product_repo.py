from typing import List, Optional

from app.models.product import Product
from sqlalchemy.orm import Session, joinedload


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: int) -> Optional[Product]:
        return (
            self.db.query(Product)
            .options(joinedload(Product.category))
            .filter(Product.id == product_id)
            .first()
        )

    def exists(self, title: str, category_id: int) -> bool:
        """
        True when any product carries exactly this title in this category.
        No case or whitespace folding is applied.
        """
        qry = self.db.query(Product.id).filter(
            Product.title == title, Product.category_id == category_id
        )
        return self.db.query(qry.exists()).scalar()

    def list(
        self, category_id: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Product]:
        query = self.db.query(Product).options(joinedload(Product.category))
        if category_id is not None:
            query = query.filter(Product.category_id == category_id)
        query = query.order_by(Product.id)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def list_all(self) -> List[Product]:
        return self.list()

    def create(self, **fields) -> Product:
        p = Product(**fields)
        self.db.add(p)
        self.db.flush()
        return p

    def update(self, product: Product, **fields) -> Product:
        for name, value in fields.items():
            setattr(product, name, value)
        self.db.flush()
        return product

    def delete(self, product: Product):
        self.db.delete(product)
        self.db.flush()
