from sqlalchemy.orm import Session

from app.repositories.product_repo import ProductRepository


class IdentityResolver:
    """
    Decides whether an incoming vendor product is already stored.
    Identity is the (title, category_id) pair; the vendor sends no product id.
    """

    def __init__(self, db: Session):
        self.products = ProductRepository(db)

    def exists(self, title: str, category_id: int) -> bool:
        return self.products.exists(title, category_id)
