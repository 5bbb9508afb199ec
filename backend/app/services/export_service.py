import io
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import List, Tuple

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from sqlalchemy.orm import Session

from app.models.product import Product
from app.repositories.product_repo import ProductRepository

# (header, attribute) in sheet column order; category_name comes from the join
EXPORT_COLUMNS: List[Tuple[str, str]] = [
    ("ID", "id"),
    ("Title", "title"),
    ("Slug", "slug"),
    ("Lang", "lang"),
    ("Auth ID", "auth_id"),
    ("Status", "status"),
    ("Type", "type"),
    ("Count", "count"),
    ("Created At", "created_at"),
    ("Updated At", "updated_at"),
    ("Category ID", "category_id"),
    ("Category Name", "category_name"),
    ("Price", "price"),
    ("Preview", "preview"),
    ("Stock", "stock"),
]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _row_values(p: Product) -> List:
    values = []
    for _, attr in EXPORT_COLUMNS:
        if attr == "category_name":
            values.append(p.category.name if p.category else None)
        else:
            values.append(getattr(p, attr))
    return values


def _clean(value):
    # vendor text may carry control characters neither XML nor XLSX can hold
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    if isinstance(value, datetime):
        # openpyxl rejects tz-aware datetimes
        return value.replace(tzinfo=None)
    return value


def _xml_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return _clean(str(value))


class ExportService:
    def __init__(self, db: Session):
        self.products = ProductRepository(db)

    def to_xml(self) -> bytes:
        """
        <products><product>...<category>...</category></product></products>
        Product fields follow the spreadsheet column order.
        """
        root = ET.Element("products")
        for p in self.products.list_all():
            el = ET.SubElement(root, "product")
            for _, attr in EXPORT_COLUMNS:
                if attr == "category_name":
                    continue
                ET.SubElement(el, attr).text = _xml_text(getattr(p, attr))
            cat = ET.SubElement(el, "category")
            if p.category is not None:
                ET.SubElement(cat, "id").text = _xml_text(p.category.id)
                ET.SubElement(cat, "name").text = _xml_text(p.category.name)
                ET.SubElement(cat, "owner_id").text = _xml_text(p.category.owner_id)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    def to_xlsx(self) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = "Products"
        ws.append([header for header, _ in EXPORT_COLUMNS])
        for p in self.products.list_all():
            ws.append([_clean(v) for v in _row_values(p)])
        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()
