import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.adapters.vendor_client import VendorCatalogClient, get_vendor_client
from app.db import get_db
from app.services.ingestion_service import CatalogIngestionService, IngestionError

log = logging.getLogger(__name__)

router = APIRouter(tags=["ingestion"])


@router.get("/fetch-data/{remote_id}", summary="Fetch the vendor catalog and store it")
def fetch_data(
    remote_id: str,
    db: Session = Depends(get_db),
    client: VendorCatalogClient = Depends(get_vendor_client),
):
    svc = CatalogIngestionService(db, client)
    try:
        result = svc.ingest(remote_id)
    except IngestionError as e:
        log.error("Ingestion of %s failed: %s", remote_id, e.reason, exc_info=e.cause)
        raise HTTPException(status_code=500, detail="Failed to fetch and store catalog data")
    return {
        "message": "Catalog data fetched and stored",
        "remote_id": result.remote_id,
        "categories_upserted": result.categories_upserted,
        "products_created": result.products_created,
        "products_skipped": result.products_skipped,
    }
