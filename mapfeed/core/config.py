# mapfeed/core/config.py
# Environment-driven settings for the collection endpoint, paging and camera.

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, model_validator
from typing import List, Literal, Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "mapfeed"
    VERSION: str = "0.3.0"
    BRIEF_DESCRIPTION: str = "Incrementally pages point features from a remote collection and keeps a map camera in sync with them."

    ENV: str = Field("development", description="Application environment (e.g., production, development)")
    LOG_LEVEL: str = Field("INFO", description="Root log level name")
    LOG_FORMAT: Literal["auto", "console", "json"] = Field("auto", description="auto: console in development, JSON otherwise")

    # --- Remote collection ---
    COLLECTION_URL: str = Field(
        "https://v2k-dev.vallarismaps.com/core/api/features/1.1/collections/658cd4f88a4811f10a47cea7/items",
        description="Items endpoint of the paginated feature collection"
    )
    API_KEY: Optional[str] = Field(None, description="api_key query parameter sent with every collection request")
    FETCH_TIMEOUT: float = Field(10.0, description="Per-request timeout in seconds")

    # --- Paging ---
    PAGE_SIZE: int = Field(500, description="Features requested per page")
    CAPACITY: int = Field(10000, description="Maximum number of features held in memory")
    AUTOLOAD_ON_STARTUP: bool = Field(True, description="Fetch the matched count and first page when the app starts")

    # --- Camera ---
    STYLE_URL: str = Field("https://demotiles.maplibre.org/style.json", description="Map style for the rendering surface")
    ZOOM_STEP: float = 0.5
    MIN_ZOOM: float = 0.0
    MAX_ZOOM: float = 9.0
    INITIAL_ZOOM: float = 4.0
    INITIAL_CENTER: List[float] = Field(
        [0.0, 0.0], # [lon, lat]
        description="Camera center before any data has arrived [lon, lat]"
    )
    ZOOM_ANIMATION_MS: int = 300
    RECENTER_ANIMATION_MS: int = 1000

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

    @model_validator(mode="after")
    def check_bounds(self) -> "Settings":
        if self.PAGE_SIZE <= 0:
            raise ValueError("PAGE_SIZE must be positive")
        if self.CAPACITY <= 0:
            raise ValueError("CAPACITY must be positive")
        if self.ZOOM_STEP <= 0:
            raise ValueError("ZOOM_STEP must be positive")
        if not self.MIN_ZOOM <= self.INITIAL_ZOOM <= self.MAX_ZOOM:
            raise ValueError("INITIAL_ZOOM must lie within [MIN_ZOOM, MAX_ZOOM]")
        if len(self.INITIAL_CENTER) != 2:
            raise ValueError("INITIAL_CENTER must be a [lon, lat] pair")
        if self.RECENTER_ANIMATION_MS <= self.ZOOM_ANIMATION_MS:
            raise ValueError("RECENTER_ANIMATION_MS must be longer than ZOOM_ANIMATION_MS")
        return self

settings = Settings()
