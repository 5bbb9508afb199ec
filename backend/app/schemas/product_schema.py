# backend/app/schemas/product_schema.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator
from pydantic import ConfigDict

class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    owner_id: Optional[int] = None

class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    title: str
    slug: Optional[str] = None
    lang: Optional[str] = None
    auth_id: Optional[int] = None
    status: Optional[str] = None
    type: Optional[str] = None
    count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category_id: int
    price: Optional[float] = None
    preview: Optional[str] = None
    stock: Optional[int] = None
    category: Optional[CategoryOut] = None

class ProductCreate(BaseModel):
    title: str
    slug: Optional[str] = None
    lang: Optional[str] = None
    auth_id: Optional[int] = None
    status: Optional[str] = None
    type: Optional[str] = None
    count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category_id: int
    price: Optional[float] = None
    preview: Optional[str] = None
    stock: Optional[int] = None

class ProductUpdate(BaseModel):
    # timestamps are not editable here
    title: Optional[str] = None
    slug: Optional[str] = None
    lang: Optional[str] = None
    auth_id: Optional[int] = None
    status: Optional[str] = None
    type: Optional[str] = None
    count: Optional[int] = None
    category_id: Optional[int] = None
    price: Optional[float] = None
    preview: Optional[str] = None
    stock: Optional[int] = None

    @field_validator("title")
    @classmethod
    def _title_not_null(cls, value):
        # omit title to leave it unchanged; null would clear a required column
        if value is None:
            raise ValueError("title cannot be null")
        return value
