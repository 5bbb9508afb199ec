import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db import get_db
from app.services.export_service import XLSX_MEDIA_TYPE, ExportService

log = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/xml", summary="Export products as XML")
def export_xml(db: Session = Depends(get_db)):
    try:
        body = ExportService(db).to_xml()
    except SQLAlchemyError:
        log.exception("Exporting products to XML failed")
        raise HTTPException(status_code=500, detail="Failed to export products to XML")
    return Response(
        content=body,
        media_type="text/xml",
        headers={"Content-Disposition": "attachment; filename=products.xml"},
    )


@router.get("/excel", summary="Export products as an Excel workbook")
def export_excel(db: Session = Depends(get_db)):
    try:
        body = ExportService(db).to_xlsx()
    except SQLAlchemyError:
        log.exception("Exporting products to Excel failed")
        raise HTTPException(status_code=500, detail="Failed to export products to Excel")
    return Response(
        content=body,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=products.xlsx"},
    )
