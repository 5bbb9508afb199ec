import os

# must be set before app.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_catalog.db")

import copy

import httpx
import pytest

from app.adapters.vendor_client import VendorCatalogClient, get_vendor_client
from app.main import app

VENDOR_BASE_URL = "https://vendor.test/paneloresto/api/productlist"

RED_SHIRT = {
    "title": "Red Shirt",
    "slug": "red-shirt",
    "lang": "en",
    "auth_id": 9,
    "status": "active",
    "type": "simple",
    "count": 10,
    "created_at": "2024-01-01T00:00:00Z",
    "updated_at": "2024-01-01T00:00:00Z",
    "price": {"price": 20},
    "preview": {"content": "desc"},
    "stock": {"stock": 3},
}

SHIRTS_DOC = {
    "products": [
        {"id": 1, "name": "Shirts", "user_id": 9, "products": [RED_SHIRT]},
    ]
}


class VendorStub:
    """Serves vendor documents by remote id through an httpx MockTransport."""

    def __init__(self):
        self.documents = {}
        self.failures = {}
        self.requests = []
        self.client = VendorCatalogClient(
            base_url=VENDOR_BASE_URL,
            http_client=httpx.Client(transport=httpx.MockTransport(self._handle)),
        )

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        remote_id = request.url.path.rsplit("/", 1)[-1]
        if remote_id in self.failures:
            status, body = self.failures[remote_id]
            return httpx.Response(status, content=body)
        if remote_id not in self.documents:
            return httpx.Response(404, json={"message": "unknown list"})
        return httpx.Response(200, json=self.documents[remote_id])

    def close(self):
        self.client._client.close()


@pytest.fixture
def vendor():
    stub = VendorStub()
    app.dependency_overrides[get_vendor_client] = lambda: stub.client
    yield stub
    app.dependency_overrides.pop(get_vendor_client, None)
    stub.close()


@pytest.fixture
def shirts_doc():
    return copy.deepcopy(SHIRTS_DOC)


@pytest.fixture
def make_product():
    def _make(title, **overrides):
        item = copy.deepcopy(RED_SHIRT)
        item["title"] = title
        item["slug"] = title.lower().replace(" ", "-")
        item.update(overrides)
        return item

    return _make
