import logging
from typing import Optional

import httpx
from fastapi import Request
from pydantic import ValidationError

from app.config import settings
from app.schemas.vendor_schema import VendorCatalog

log = logging.getLogger(__name__)


class VendorFetchError(Exception):
    """Raised when the vendor catalog cannot be fetched or decoded."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    path = ".".join(str(part) for part in first["loc"])
    return f"{path}: {first['msg']} ({exc.error_count()} error(s))"


class VendorCatalogClient:
    """
    Synchronous client for the vendor product-list endpoint.
    fetch_catalog(remote_id) returns a validated VendorCatalog or raises
    VendorFetchError. The httpx.Client is injectable so tests can mount a
    MockTransport; when omitted one is created and owned by this instance.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or settings.VENDOR_BASE_URL).rstrip("/")
        timeout = timeout_seconds if timeout_seconds is not None else settings.VENDOR_TIMEOUT_SECONDS
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)

    def url_for(self, remote_id: str) -> str:
        # remote_id is forwarded verbatim as the last path segment
        return f"{self.base_url}/{remote_id}"

    def fetch_catalog(self, remote_id: str) -> VendorCatalog:
        url = self.url_for(remote_id)
        log.debug("GET %s", url)
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            raise VendorFetchError(f"Request to {url} failed: {e}") from e

        if not response.is_success:
            raise VendorFetchError(
                f"Vendor responded {response.status_code} for {url}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise VendorFetchError(f"Vendor returned a non-JSON body for {url}") from e

        try:
            return VendorCatalog.model_validate(payload)
        except ValidationError as e:
            raise VendorFetchError(
                f"Malformed vendor catalog for {url}: {_describe_validation_error(e)}"
            ) from e

    def close(self):
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def get_vendor_client(request: Request) -> VendorCatalogClient:
    """FastAPI dependency returning the client created in the app lifespan."""
    return request.app.state.vendor_client
