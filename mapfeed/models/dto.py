# mapfeed/models/dto.py
# GeoJSON payloads consumed from the collection endpoint and the snapshots
# published to the rendering surface.

import math
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

Coordinates = Tuple[float, float]

# --- GeoJSON (consumed) ---

class PointGeometry(BaseModel):
    """GeoJSON Point. Only two-dimensional, finite positions are accepted."""
    model_config = ConfigDict(frozen=True)

    type: Literal["Point"] = "Point"
    coordinates: Coordinates = Field(..., description="[lon, lat]")

    @field_validator("coordinates", mode="before")
    @classmethod
    def numeric(cls, value: Any) -> Any:
        # Lax float parsing would accept "100.5"; positions must be JSON numbers
        if isinstance(value, (list, tuple)) and any(
            isinstance(v, bool) or not isinstance(v, (int, float)) for v in value
        ):
            raise ValueError("coordinates must be numbers")
        return value

    @field_validator("coordinates")
    @classmethod
    def finite(cls, value: Coordinates) -> Coordinates:
        if not all(math.isfinite(v) for v in value):
            raise ValueError("coordinates must be finite")
        return value

class Feature(BaseModel):
    """A single point of interest. Properties are opaque and passed through."""
    model_config = ConfigDict(frozen=True)

    id: Union[str, int] = Field(..., description="Opaque identifier, stable within a session.")
    type: Literal["Feature"] = "Feature"
    geometry: PointGeometry
    properties: Optional[Dict[str, Any]] = Field(default_factory=dict)

    @property
    def coordinates(self) -> Coordinates:
        return self.geometry.coordinates

class FeatureCollection(BaseModel):
    """GeoJSON FeatureCollection handed to the marker layer."""
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[Feature] = Field(default_factory=list)

class FeaturePage(BaseModel):
    """Body of one items response. Links and counters are ignored."""
    model_config = ConfigDict(extra="ignore")

    features: List[Feature]

class CollectionMeta(BaseModel):
    """The part of a collection response that carries the total match count."""
    model_config = ConfigDict(extra="ignore")

    numberMatched: int = Field(..., ge=0)

class SourceResponse(BaseModel):
    """Status and decoded JSON body returned by a collection transport."""
    status: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

# --- Paging ---

class PagingCursor(BaseModel):
    page_index: int = Field(0, ge=0)
    page_size: int = Field(..., gt=0)

    @property
    def offset(self) -> int:
        return self.page_index * self.page_size

    def advance(self) -> None:
        self.page_index += 1

# --- Camera ---

class AnimationMode(str, Enum):
    NONE = "none"
    EASE = "ease"

class CameraAnimation(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: AnimationMode = AnimationMode.NONE
    duration_ms: int = Field(0, ge=0)

class CameraDirective(BaseModel):
    """Center, zoom and transition for the map camera. Written, never read back."""
    model_config = ConfigDict(frozen=True)

    center: Coordinates
    zoom: float
    animation: CameraAnimation = Field(default_factory=CameraAnimation)

# --- Error Response Model ---

class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: str = Field(..., description="A machine-readable error code.")
    detail: str = Field(..., description="A human-readable explanation.")
    error_id: Optional[str] = Field(None, description="Correlation id for unexpected server errors.")

# --- Published snapshots ---

class LoaderState(BaseModel):
    """What PageLoader publishes after each change."""
    loading: bool
    number_matched: Optional[int] = None
    feature_count: int
    page_index: int
    at_capacity: bool
    last_error: Optional[ErrorResponse] = None

class MapView(BaseModel):
    """Everything the UI layer needs for one render."""
    features: FeatureCollection
    camera: CameraDirective
    loading: bool
    number_matched: Optional[int] = Field(None, description="Server-reported total, None while unknown.")
    feature_count: int
    last_error: Optional[ErrorResponse] = None
    can_load_more: bool
    can_zoom_in: bool
    can_zoom_out: bool
    style_url: Optional[str] = None
