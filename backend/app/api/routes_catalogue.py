import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.db import get_db
from app.schemas.product_schema import ProductCreate, ProductOut, ProductUpdate
from app.services.catalog_service import CatalogException, CatalogService, ProductNotFound

log = logging.getLogger(__name__)

router = APIRouter(tags=["catalogue"])

@router.get("", summary="List products", response_model=List[ProductOut])
def list_products(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    limit: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    svc = CatalogService(db)
    try:
        items = svc.list_products(category_id=category_id, limit=limit)
    except SQLAlchemyError:
        log.exception("Listing products failed")
        raise HTTPException(status_code=500, detail="Failed to load products")
    return [ProductOut.model_validate(p) for p in items]

@router.post("", summary="Create product", response_model=ProductOut)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    svc = CatalogService(db)
    try:
        p = svc.create_product(payload.model_dump())
    except CatalogException as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        log.exception("Creating product failed")
        raise HTTPException(status_code=500, detail="Failed to create product")
    return ProductOut.model_validate(p)

@router.put("/{product_id}", summary="Update product", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    svc = CatalogService(db)
    try:
        p = svc.update_product(product_id, payload.model_dump(exclude_unset=True))
    except ProductNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CatalogException as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        log.exception("Updating product %s failed", product_id)
        raise HTTPException(status_code=500, detail="Failed to update product")
    return ProductOut.model_validate(p)

@router.delete("/{product_id}", summary="Delete product")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    svc = CatalogService(db)
    try:
        svc.delete_product(product_id)
    except ProductNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        log.exception("Deleting product %s failed", product_id)
        raise HTTPException(status_code=500, detail="Failed to delete product")
    return {"message": "Product deleted", "id": product_id}
