from datetime import datetime

import pytest
from filelock import FileLock
from sqlalchemy.exc import IntegrityError, OperationalError

from app.config import settings
from app.db import SessionLocal, init_db
from app.models.category import Category
from app.models.product import Product
from app.repositories.product_repo import ProductRepository
from app.services.identity_resolver import IdentityResolver
from app.services.ingestion_service import CatalogIngestionService, IngestionError


def setup_function(function):
    init_db(reset=True)


def _ingest(vendor, remote_id, **kwargs):
    db = SessionLocal()
    try:
        return CatalogIngestionService(db, vendor.client, **kwargs).ingest(remote_id)
    finally:
        db.close()


def _rows(model):
    db = SessionLocal()
    try:
        return db.query(model).order_by(model.id).all()
    finally:
        db.close()


def test_end_to_end_single_category(vendor, shirts_doc):
    vendor.documents["1"] = shirts_doc

    result = _ingest(vendor, "1")

    assert (result.categories_upserted, result.products_created, result.products_skipped) == (1, 1, 0)
    categories = _rows(Category)
    assert [(c.id, c.name, c.owner_id) for c in categories] == [(1, "Shirts", 9)]
    products = _rows(Product)
    assert len(products) == 1
    p = products[0]
    assert p.title == "Red Shirt"
    assert p.category_id == 1
    assert p.price == 20
    assert p.stock == 3
    assert p.preview == "desc"
    assert (p.slug, p.lang, p.auth_id, p.status, p.type, p.count) == ("red-shirt", "en", 9, "active", "simple", 10)
    assert p.created_at.replace(tzinfo=None) == datetime(2024, 1, 1)


def test_second_ingest_creates_no_duplicates(vendor, shirts_doc):
    vendor.documents["1"] = shirts_doc

    _ingest(vendor, "1")
    result = _ingest(vendor, "1")

    assert result.products_created == 0
    assert result.products_skipped == 1
    assert len(_rows(Product)) == 1
    assert len(_rows(Category)) == 1


def test_category_upsert_overwrites_in_place(vendor, shirts_doc):
    vendor.documents["1"] = shirts_doc
    _ingest(vendor, "1")

    renamed = {"products": [{"id": 1, "name": "Tops", "user_id": 11, "products": []}]}
    vendor.documents["2"] = renamed
    _ingest(vendor, "2")

    categories = _rows(Category)
    assert [(c.id, c.name, c.owner_id) for c in categories] == [(1, "Tops", 11)]
    # ingestion never removes products missing from a later document
    assert len(_rows(Product)) == 1


def test_nested_fields_are_flattened(vendor, make_product):
    item = make_product("Blue Shirt", price={"price": 19.99}, preview={"content": "x"}, stock={"stock": 5})
    vendor.documents["1"] = {"products": [{"id": 3, "name": "Shirts", "user_id": 1, "products": [item]}]}

    _ingest(vendor, "1")

    p = _rows(Product)[0]
    assert (p.price, p.preview, p.stock) == (19.99, "x", 5)


def test_products_land_in_their_own_category(vendor, make_product):
    vendor.documents["1"] = {
        "products": [
            {"id": 3, "name": "Shirts", "user_id": 1, "products": [make_product("Tee")]},
            {"id": 7, "name": "Hats", "user_id": 1, "products": [make_product("Cap"), make_product("Tee")]},
        ]
    }

    result = _ingest(vendor, "1")

    assert result.products_created == 3
    assert [(p.title, p.category_id) for p in _rows(Product)] == [("Tee", 3), ("Cap", 7), ("Tee", 7)]
    assert {c.id for c in _rows(Category)} == {3, 7}


def test_dangling_category_is_rejected_by_store():
    db = SessionLocal()
    try:
        with pytest.raises(IntegrityError):
            ProductRepository(db).create(title="Orphan", category_id=999)
        db.rollback()
    finally:
        db.close()


def test_repeated_title_in_one_document_is_inserted_once(vendor, make_product):
    vendor.documents["1"] = {
        "products": [{"id": 1, "name": "Shirts", "user_id": 1, "products": [make_product("Tee"), make_product("Tee", count=99)]}]
    }

    result = _ingest(vendor, "1")

    assert (result.products_created, result.products_skipped) == (1, 1)
    assert _rows(Product)[0].count == 10


def test_identity_is_exact_title_match(vendor, make_product):
    vendor.documents["1"] = {
        "products": [{"id": 1, "name": "Shirts", "user_id": 1, "products": [make_product("Red Shirt"), make_product("red shirt"), make_product("Red Shirt ")]}]
    }

    _ingest(vendor, "1")

    assert len(_rows(Product)) == 3
    db = SessionLocal()
    try:
        resolver = IdentityResolver(db)
        assert resolver.exists("Red Shirt", 1) is True
        assert resolver.exists("RED SHIRT", 1) is False
        assert resolver.exists("Red Shirt", 2) is False
    finally:
        db.close()


def test_fetch_failure_writes_nothing_and_keeps_earlier_rows(vendor, shirts_doc, make_product):
    vendor.documents["1"] = shirts_doc
    _ingest(vendor, "1")

    vendor.failures["2"] = (500, b"upstream exploded")
    with pytest.raises(IngestionError) as exc:
        _ingest(vendor, "2")
    assert exc.value.cause is not None

    vendor.failures["3"] = (200, b"{not json")
    with pytest.raises(IngestionError):
        _ingest(vendor, "3")

    # rows from the earlier successful run are still committed
    assert len(_rows(Category)) == 1
    assert len(_rows(Product)) == 1


def test_malformed_product_aborts_before_any_write(vendor, make_product):
    broken = make_product("Broken")
    broken["stock"] = {}
    vendor.documents["1"] = {
        "products": [
            {"id": 1, "name": "Shirts", "user_id": 1, "products": [make_product("Fine")]},
            {"id": 2, "name": "Hats", "user_id": 1, "products": [broken]},
        ]
    }

    with pytest.raises(IngestionError):
        _ingest(vendor, "1")

    assert _rows(Category) == []
    assert _rows(Product) == []


def test_store_failure_midway_keeps_prior_writes(vendor, make_product, monkeypatch):
    vendor.documents["1"] = {
        "products": [
            {"id": 1, "name": "Shirts", "user_id": 1, "products": [make_product("First")]},
            {"id": 2, "name": "Hats", "user_id": 1, "products": [make_product("Second")]},
        ]
    }
    original_create = ProductRepository.create
    calls = []

    def failing_create(self, **fields):
        calls.append(fields["title"])
        if fields["title"] == "Second":
            raise OperationalError("INSERT INTO products", {}, Exception("disk I/O error"))
        return original_create(self, **fields)

    monkeypatch.setattr(ProductRepository, "create", failing_create)

    with pytest.raises(IngestionError) as exc:
        _ingest(vendor, "1")

    assert isinstance(exc.value.cause, OperationalError)
    assert calls == ["First", "Second"]
    # no rollback of what was already committed
    assert [c.id for c in _rows(Category)] == [1, 2]
    assert [p.title for p in _rows(Product)] == ["First"]


def test_held_lock_fails_ingestion(vendor, shirts_doc, tmp_path, monkeypatch):
    vendor.documents["1"] = shirts_doc
    monkeypatch.setattr(settings, "INGEST_LOCK_TIMEOUT_SECONDS", 0)
    lock_path = str(tmp_path / "ingest.lock")

    with FileLock(lock_path):
        with pytest.raises(IngestionError, match="lock"):
            _ingest(vendor, "1", use_lock=True, lock_path=lock_path)

    assert _rows(Product) == []
    result = _ingest(vendor, "1", use_lock=True, lock_path=lock_path)
    assert result.products_created == 1


def test_unlocked_ingestion_still_deduplicates_sequentially(vendor, shirts_doc):
    vendor.documents["1"] = shirts_doc

    _ingest(vendor, "1", use_lock=False)
    _ingest(vendor, "1", use_lock=False)

    assert len(_rows(Product)) == 1
