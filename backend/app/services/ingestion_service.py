import logging
import os
import tempfile
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Optional

from filelock import FileLock, Timeout
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.adapters.vendor_client import VendorCatalogClient, VendorFetchError
from app.config import settings
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.vendor_schema import VendorCatalog, VendorCategory
from app.services.identity_resolver import IdentityResolver

log = logging.getLogger(__name__)


class IngestionError(Exception):
    """Ingestion aborted; `cause` holds the fetch or store error."""

    def __init__(self, reason: str, cause: Optional[BaseException] = None):
        super().__init__(reason)
        self.reason = reason
        self.cause = cause


@dataclass
class IngestionResult:
    remote_id: str
    categories_upserted: int = 0
    products_created: int = 0
    products_skipped: int = 0


def _default_lock_path() -> str:
    locks_dir = os.path.join(tempfile.gettempdir(), "catalog_sync_locks")
    os.makedirs(locks_dir, exist_ok=True)
    return os.path.join(locks_dir, "ingest.lock")


class CatalogIngestionService:
    """
    Merges a vendor catalog snapshot into the local store.

    Categories are upserted by their vendor id; products are inserted only
    when the identity resolver has no row with the same (title, category_id).
    Every write is committed on its own, so a store failure partway leaves
    the earlier rows in place. Nothing is ever deleted.
    """

    def __init__(
        self,
        db: Session,
        client: VendorCatalogClient,
        resolver: Optional[IdentityResolver] = None,
        use_lock: Optional[bool] = None,
        lock_path: Optional[str] = None,
    ):
        self.db = db
        self.client = client
        self.resolver = resolver or IdentityResolver(db)
        self.categories = CategoryRepository(db)
        self.products = ProductRepository(db)
        self.use_lock = settings.INGEST_LOCK_ENABLED if use_lock is None else use_lock
        self.lock_path = lock_path

    def _lock(self):
        if not self.use_lock:
            return nullcontext()
        lock = FileLock(self.lock_path or _default_lock_path())
        return lock.acquire(timeout=settings.INGEST_LOCK_TIMEOUT_SECONDS)

    def ingest(self, remote_id: str) -> IngestionResult:
        try:
            catalog = self.client.fetch_catalog(remote_id)
        except VendorFetchError as e:
            raise IngestionError(f"Could not fetch vendor catalog {remote_id!r}", e) from e

        result = IngestionResult(remote_id=remote_id)
        try:
            # serializes check-then-insert across concurrent ingestions on this host
            with self._lock():
                self._apply(catalog, result)
        except Timeout as e:
            raise IngestionError("Another ingestion holds the lock; try again", e) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise IngestionError(f"Store write failed while ingesting {remote_id!r}", e) from e

        log.info(
            "Ingested %s: %d categories upserted, %d products created, %d skipped",
            remote_id,
            result.categories_upserted,
            result.products_created,
            result.products_skipped,
        )
        return result

    def _apply(self, catalog: VendorCatalog, result: IngestionResult):
        for block in catalog.products:
            self._apply_category(block, result)

    def _apply_category(self, block: VendorCategory, result: IngestionResult):
        category = self.categories.upsert(block.id, block.name, block.user_id)
        self.db.commit()
        result.categories_upserted += 1

        for item in block.products:
            if self.resolver.exists(item.title, category.id):
                log.debug("Skipping existing product %r in category %s", item.title, category.id)
                result.products_skipped += 1
                continue
            self.products.create(**item.to_columns(category.id))
            self.db.commit()
            result.products_created += 1
