# mapfeed/services/map_session.py
# The UI-layer side of the controllers: one loader, one viewport, and the
# snapshot the rendering surface reads on every render.

import asyncio
from typing import Optional

import structlog

from mapfeed.core.config import Settings
from mapfeed.core.errors import FetchError
from mapfeed.models.dto import FeatureCollection, MapView
from mapfeed.services.collection_client import CollectionSource, HttpCollectionSource
from mapfeed.services.page_loader import PageLoader
from mapfeed.services.viewport import ViewportController

logger = structlog.get_logger(__name__)


class MapSession:
    def __init__(self, loader: PageLoader, viewport: ViewportController, style_url: Optional[str] = None):
        self.loader = loader
        self.viewport = viewport
        self.style_url = style_url
        loader.first_data.connect(viewport.on_first_data)

    @classmethod
    def from_settings(cls, settings: Settings, source: Optional[CollectionSource] = None) -> "MapSession":
        if source is None:
            source = HttpCollectionSource(
                url=settings.COLLECTION_URL,
                api_key=settings.API_KEY,
                timeout=settings.FETCH_TIMEOUT,
            )
        loader = PageLoader(source, page_size=settings.PAGE_SIZE, capacity=settings.CAPACITY)
        viewport = ViewportController(
            min_zoom=settings.MIN_ZOOM,
            max_zoom=settings.MAX_ZOOM,
            zoom_step=settings.ZOOM_STEP,
            zoom=settings.INITIAL_ZOOM,
            center=settings.INITIAL_CENTER,
            zoom_duration_ms=settings.ZOOM_ANIMATION_MS,
            recenter_duration_ms=settings.RECENTER_ANIMATION_MS,
        )
        return cls(loader, viewport, style_url=settings.STYLE_URL)

    async def start(self) -> None:
        """Initial load: matched count and first page, side by side."""
        logger.info("session_start", page_size=self.loader.page_size, capacity=self.loader.capacity)
        await asyncio.gather(self.loader.fetch_matched_count(), self.loader.load_next_page())

    async def load_more(self) -> Optional[FetchError]:
        return await self.loader.load_next_page()

    def zoom_in(self) -> bool:
        return self.viewport.zoom_in()

    def zoom_out(self) -> bool:
        return self.viewport.zoom_out()

    def reset(self) -> None:
        self.loader.reset()

    def feature_collection(self) -> FeatureCollection:
        return self.loader.features.as_collection()

    def view(self) -> MapView:
        state = self.loader.state
        return MapView(
            features=self.feature_collection(),
            camera=self.viewport.camera,
            loading=state.loading,
            number_matched=state.number_matched,
            feature_count=state.feature_count,
            last_error=state.last_error,
            can_load_more=self.loader.can_load_more,
            can_zoom_in=self.viewport.can_zoom_in,
            can_zoom_out=self.viewport.can_zoom_out,
            style_url=self.style_url,
        )
