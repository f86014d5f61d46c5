# mapfeed/services/page_loader.py
# Pages features in from a CollectionSource, one request at a time, into a
# bounded FeatureSet. Also owns the server-reported matched count.

from typing import Any, Awaitable, Callable, Iterator, List, Optional, Sequence

import structlog
from pydantic import ValidationError

from mapfeed.core.errors import BadStatusError, FetchError, TransportError
from mapfeed.core.events import Signal
from mapfeed.models.dto import (
    CollectionMeta,
    Feature,
    FeatureCollection,
    FeaturePage,
    LoaderState,
    PagingCursor,
    SourceResponse,
)
from mapfeed.services.collection_client import CollectionSource

logger = structlog.get_logger(__name__)


class FeatureSet:
    """Features in arrival order, never more than ``capacity`` of them."""

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._features: List[Feature] = []

    def __len__(self) -> int:
        return len(self._features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self._features)

    def __getitem__(self, index: int) -> Feature:
        return self._features[index]

    @property
    def remaining(self) -> int:
        return self.capacity - len(self._features)

    @property
    def is_full(self) -> bool:
        return self.remaining <= 0

    def merge_page(self, features: Sequence[Feature]) -> List[Feature]:
        """Append as many of ``features`` as still fit and return those kept."""
        kept = list(features[: max(self.remaining, 0)])
        self._features.extend(kept)
        return kept

    def clear(self) -> None:
        self._features = []

    def as_collection(self) -> FeatureCollection:
        return FeatureCollection(features=list(self._features))


class PageLoader:
    """Incremental loader for a paginated feature collection.

    States are Idle and Fetching. ``load_next_page`` is a no-op while a page
    request is in flight or once the FeatureSet is full. Failures are logged,
    stored in ``last_error`` and returned, never raised.

    Events:
        changed(LoaderState): after every published change.
        first_data((lon, lat)): once, when page 0 yields at least one feature.
    """

    def __init__(self, source: CollectionSource, page_size: int = 500, capacity: int = 10000):
        self.source = source
        self.features = FeatureSet(capacity)
        self.cursor = PagingCursor(page_size=page_size)
        self.number_matched: Optional[int] = None
        self.loading = False
        self.last_error: Optional[FetchError] = None

        self.changed = Signal("changed")
        self.first_data = Signal("first_data")

        self._first_data_sent = False
        # Bumped by reset() so results of requests issued before it are dropped
        self._generation = 0

    @property
    def capacity(self) -> int:
        return self.features.capacity

    @property
    def page_size(self) -> int:
        return self.cursor.page_size

    @property
    def can_load_more(self) -> bool:
        return not self.loading and not self.features.is_full

    @property
    def state(self) -> LoaderState:
        return LoaderState(
            loading=self.loading,
            number_matched=self.number_matched,
            feature_count=len(self.features),
            page_index=self.cursor.page_index,
            at_capacity=self.features.is_full,
            last_error=self.last_error.to_response() if self.last_error else None,
        )

    def _publish(self) -> None:
        self.changed.emit(self.state)

    async def load_next_page(self) -> Optional[FetchError]:
        """Fetch and merge the page under the cursor.

        Returns the FetchError on failure, otherwise None (including the
        no-op cases).
        """
        if self.loading:
            logger.debug("load_skipped_in_flight", page_index=self.cursor.page_index)
            return None
        if self.features.is_full:
            logger.debug("load_skipped_at_capacity", capacity=self.capacity)
            return None

        generation = self._generation
        page_index = self.cursor.page_index
        offset = self.cursor.offset
        self.loading = True
        self._publish()

        try:
            response = await self._request(self.source.fetch_page, offset, self.page_size)
            page = self._parse_page(response)
        except FetchError as e:
            if generation != self._generation:
                logger.info("stale_page_dropped", page_index=page_index)
                return None
            logger.warning(
                "page_fetch_failed",
                page_index=page_index,
                offset=offset,
                error=e.code,
                detail=str(e),
            )
            self.last_error = e
            self.loading = False
            self._publish()
            return e

        if generation != self._generation:
            logger.info("stale_page_dropped", page_index=page_index)
            return None

        kept = self.features.merge_page(page.features)
        self.cursor.advance()
        self.last_error = None
        self.loading = False
        logger.info(
            "page_loaded",
            page_index=page_index,
            received=len(page.features),
            kept=len(kept),
            total=len(self.features),
        )
        if len(kept) < len(page.features):
            logger.info("page_truncated_at_capacity", capacity=self.capacity, dropped=len(page.features) - len(kept))
        self._publish()

        if page_index == 0 and kept and not self._first_data_sent:
            self._first_data_sent = True
            self.first_data.emit(kept[0].coordinates)
        return None

    async def fetch_matched_count(self) -> Optional[FetchError]:
        """Fetch the collection's total matched count. Failures leave it unknown."""
        try:
            response = await self._request(self.source.fetch_collection_meta)
            if not response.ok:
                raise BadStatusError(response.status)
            meta = CollectionMeta.model_validate(response.body)
        except ValidationError as e:
            error: FetchError = TransportError(e, message="Collection response has no usable numberMatched")
            logger.warning("matched_count_failed", error=error.code, detail=str(error))
            return error
        except FetchError as e:
            logger.warning("matched_count_failed", error=e.code, detail=str(e))
            return e

        self.number_matched = meta.numberMatched
        logger.info("matched_count_loaded", number_matched=self.number_matched)
        self._publish()
        return None

    def reset(self) -> None:
        """Drop all loaded features and rewind to the first page."""
        self._generation += 1
        self.features.clear()
        self.cursor = PagingCursor(page_size=self.page_size)
        self.last_error = None
        self.loading = False
        self._first_data_sent = False
        logger.info("loader_reset")
        self._publish()

    @staticmethod
    async def _request(fetch: Callable[..., Awaitable[SourceResponse]], *args: Any) -> SourceResponse:
        # Whatever a source raises becomes a TransportError so loading is always cleared
        try:
            return await fetch(*args)
        except FetchError:
            raise
        except Exception as e:
            raise TransportError(e) from e

    @staticmethod
    def _parse_page(response: SourceResponse) -> FeaturePage:
        if not response.ok:
            raise BadStatusError(response.status)
        try:
            return FeaturePage.model_validate(response.body)
        except ValidationError as e:
            raise TransportError(e, message=f"Malformed page body ({e.error_count()} errors)") from e
