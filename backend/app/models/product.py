from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    # (title, category_id) is unique per ingestion only; no DB constraint
    title = Column(String(512), nullable=False, index=True)
    slug = Column(String(512), nullable=True)
    lang = Column(String(16), nullable=True)
    auth_id = Column(Integer, nullable=True)
    status = Column(String(64), nullable=True)
    type = Column(String(64), nullable=True)
    count = Column(Integer, nullable=True, default=0)
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    price = Column(Float, nullable=True)
    preview = Column(Text, nullable=True)
    stock = Column(Integer, nullable=True, default=0)

    category = relationship("Category", back_populates="products")

    def __repr__(self):
        return f"<Product id={self.id} title={self.title} category_id={self.category_id}>"
