"""Pydantic models describing the vendor product-list payload.

The document nests products under their category:

    {"products": [{"id", "name", "user_id", "products": [{..., "price": {"price"},
      "preview": {"content"}, "stock": {"stock"}}]}]}

Everything is decoded once at the client boundary so the ingestion service
never sees a missing nested object.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VendorBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PriceBlock(VendorBaseModel):
    price: float


class PreviewBlock(VendorBaseModel):
    content: Optional[str]


class StockBlock(VendorBaseModel):
    stock: int


class VendorProduct(VendorBaseModel):
    title: str
    slug: Optional[str] = None
    lang: Optional[str] = None
    auth_id: Optional[int] = None
    status: Optional[str] = None
    type: Optional[str] = None
    count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    price: PriceBlock
    preview: PreviewBlock
    stock: StockBlock

    def to_columns(self, category_id: int) -> dict:
        """Flatten into Product column values for the given category."""
        return {
            "title": self.title,
            "slug": self.slug,
            "lang": self.lang,
            "auth_id": self.auth_id,
            "status": self.status,
            "type": self.type,
            "count": self.count,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "category_id": category_id,
            "price": self.price.price,
            "preview": self.preview.content,
            "stock": self.stock.stock,
        }


class VendorCategory(VendorBaseModel):
    id: int
    name: str
    user_id: Optional[int] = None
    products: List[VendorProduct] = Field(default_factory=list)


class VendorCatalog(VendorBaseModel):
    products: List[VendorCategory]
