from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.vendor_client import VendorCatalogClient
from app.api.health import router as health_router
from app.api.routes_catalogue import router as catalogue_router
from app.api.routes_export import router as export_router
from app.api.routes_ingest import router as ingest_router
from app.config import settings
from app.db import init_db
from app.services.sync_scheduler import start_sync_scheduler
from app.utils.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    configure_logging(settings.LOG_LEVEL)
    init_db(reset=settings.RESET_DB)

    app.state.vendor_client = VendorCatalogClient()

    scheduler = None
    if settings.SYNC_REMOTE_IDS:
        scheduler = start_sync_scheduler(
            app.state.vendor_client,
            settings.SYNC_REMOTE_IDS,
            settings.SYNC_INTERVAL_SECONDS,
        )

    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)
        app.state.vendor_client.close()


app = FastAPI(title="Catalog Sync - Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(ingest_router, tags=["ingestion"])

app.include_router(catalogue_router, prefix="/products", tags=["catalogue"])

app.include_router(export_router, tags=["export"])


def run():
    uvicorn.run("app.main:app", host=settings.APP_HOST, port=settings.APP_PORT)


if __name__ == "__main__":
    run()
