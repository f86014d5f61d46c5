# mapfeed/services/collection_client.py
# Transport for the paginated items endpoint (OGC API - Features style
# `offset`/`limit` paging). Returns status + JSON body; interpreting the
# status is left to PageLoader.

from typing import Any, Dict, Optional, Protocol

import httpx
import structlog

from mapfeed.core.config import settings
from mapfeed.core.errors import TransportError
from mapfeed.models.dto import SourceResponse

logger = structlog.get_logger(__name__)


class CollectionSource(Protocol):
    """Capability PageLoader fetches through."""
    async def fetch_page(self, offset: int, limit: int) -> SourceResponse: ...
    async def fetch_collection_meta(self) -> SourceResponse: ...


class HttpCollectionSource:
    """httpx-backed CollectionSource for a remote items endpoint."""

    def __init__(
        self,
        url: str = settings.COLLECTION_URL,
        api_key: Optional[str] = settings.API_KEY,
        timeout: float = settings.FETCH_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not url:
            raise ValueError("COLLECTION_URL is not set in the environment")
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _params(self, **extra: Any) -> Dict[str, Any]:
        params: Dict[str, Any] = dict(extra)
        if self.api_key:
            params["api_key"] = self.api_key
        return params

    async def fetch_page(self, offset: int, limit: int) -> SourceResponse:
        return await self._get(self._params(offset=offset, limit=limit))

    async def fetch_collection_meta(self) -> SourceResponse:
        return await self._get(self._params())

    async def _get(self, params: Dict[str, Any]) -> SourceResponse:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.url, params=params)
        except httpx.TimeoutException as e:
            logger.warning("collection_request_timeout", url=self.url, timeout=self.timeout)
            raise TransportError(e, message=f"Request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.warning("collection_request_failed", url=self.url, error=str(e))
            raise TransportError(e) from e

        if not response.is_success:
            # The body of an error response is not needed
            return SourceResponse(status=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            logger.warning("collection_body_not_json", url=self.url, status_code=response.status_code)
            raise TransportError(e, message="Response body is not valid JSON") from e
        return SourceResponse(status=response.status_code, body=body)
