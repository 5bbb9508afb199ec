import logging
from typing import Callable, List

from apscheduler.schedulers.background import BackgroundScheduler

from app.adapters.vendor_client import VendorCatalogClient
from app.db import SessionLocal
from app.services.ingestion_service import CatalogIngestionService, IngestionError

log = logging.getLogger(__name__)


def run_sync(client: VendorCatalogClient, remote_ids: List[str], session_factory: Callable = SessionLocal) -> List[str]:
    """
    Ingest each remote id in order with its own session.
    A failed id is logged and does not stop the others; returns the ids that failed.
    """
    failed = []
    for remote_id in remote_ids:
        db = session_factory()
        try:
            CatalogIngestionService(db, client).ingest(remote_id)
        except IngestionError as e:
            log.error("Scheduled ingestion of %s failed: %s", remote_id, e.reason, exc_info=e.cause)
            failed.append(remote_id)
        finally:
            db.close()
    return failed


def start_sync_scheduler(client: VendorCatalogClient, remote_ids: List[str], interval_seconds: int) -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        run_sync,
        "interval",
        seconds=interval_seconds,
        args=[client, list(remote_ids)],
        id="catalog_sync",
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    log.info("Catalog sync scheduled every %ss for %s", interval_seconds, ", ".join(remote_ids))
    return scheduler
