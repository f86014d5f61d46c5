# mapfeed/services/viewport.py
# Owns the camera directive handed to the rendering surface. The surface's own
# camera state is never read back.

from typing import Sequence

import structlog

from mapfeed.core.events import Signal
from mapfeed.models.dto import AnimationMode, CameraAnimation, CameraDirective, Coordinates

logger = structlog.get_logger(__name__)


class ViewportController:
    """Zoom within fixed bounds and recenter once on the first data.

    A zoom request that cannot move the camera (already at the bound) is
    rejected and nothing is published.
    """

    def __init__(
        self,
        min_zoom: float = 0.0,
        max_zoom: float = 9.0,
        zoom_step: float = 0.5,
        zoom: float = 4.0,
        center: Sequence[float] = (0.0, 0.0),
        zoom_duration_ms: int = 300,
        recenter_duration_ms: int = 1000,
    ):
        if min_zoom > max_zoom:
            raise ValueError("min_zoom must not exceed max_zoom")
        if zoom_step <= 0:
            raise ValueError("zoom_step must be positive")
        if recenter_duration_ms <= zoom_duration_ms:
            raise ValueError("recenter_duration_ms must be longer than zoom_duration_ms")
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.zoom_step = zoom_step
        self.zoom_duration_ms = zoom_duration_ms
        self.recenter_duration_ms = recenter_duration_ms

        self.zoom = self._clamp(zoom)
        self.center: Coordinates = (float(center[0]), float(center[1]))
        self.has_recentered = False
        self._camera = CameraDirective(center=self.center, zoom=self.zoom)

        self.changed = Signal("camera_changed")

    @property
    def camera(self) -> CameraDirective:
        return self._camera

    @property
    def can_zoom_in(self) -> bool:
        return self.zoom < self.max_zoom

    @property
    def can_zoom_out(self) -> bool:
        return self.zoom > self.min_zoom

    def zoom_in(self) -> bool:
        return self._zoom_to(self.zoom + self.zoom_step)

    def zoom_out(self) -> bool:
        return self._zoom_to(self.zoom - self.zoom_step)

    def on_first_data(self, coordinates: Sequence[float]) -> bool:
        """Recenter on the first arrived feature. Later calls are ignored."""
        if self.has_recentered:
            logger.debug("recenter_ignored", coordinates=list(coordinates))
            return False
        self.has_recentered = True
        self.center = (float(coordinates[0]), float(coordinates[1]))
        logger.info("camera_recentered", center=list(self.center))
        self._publish(self.recenter_duration_ms)
        return True

    def _clamp(self, zoom: float) -> float:
        return min(max(zoom, self.min_zoom), self.max_zoom)

    def _zoom_to(self, target: float) -> bool:
        target = self._clamp(target)
        if target == self.zoom:
            logger.debug("zoom_rejected", zoom=self.zoom, min_zoom=self.min_zoom, max_zoom=self.max_zoom)
            return False
        self.zoom = target
        self._publish(self.zoom_duration_ms)
        return True

    def _publish(self, duration_ms: int) -> None:
        self._camera = CameraDirective(
            center=self.center,
            zoom=self.zoom,
            animation=CameraAnimation(mode=AnimationMode.EASE, duration_ms=duration_ms),
        )
        self.changed.emit(self._camera)
