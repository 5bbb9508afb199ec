from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.db import Base


class Category(Base):
    __tablename__ = "categories"

    # assigned by the vendor, never autogenerated locally
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(256), nullable=False)
    owner_id = Column(Integer, nullable=True)

    products = relationship("Product", back_populates="category")

    def __repr__(self):
        return f"<Category id={self.id} name={self.name}>"
