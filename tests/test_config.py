import pytest
from pydantic import ValidationError

from mapfeed.core.config import Settings


def test_defaults():
    s = Settings(_env_file=None)
    assert s.PAGE_SIZE == 500
    assert s.CAPACITY == 10000
    assert s.ZOOM_STEP == 0.5
    assert (s.MIN_ZOOM, s.MAX_ZOOM) == (0, 9)
    assert s.INITIAL_ZOOM == 4
    assert s.RECENTER_ANIMATION_MS > s.ZOOM_ANIMATION_MS


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("PAGE_SIZE", "50")
    monkeypatch.setenv("COLLECTION_URL", "https://api.example/items")
    monkeypatch.setenv("API_KEY", "abc")
    s = Settings(_env_file=None)
    assert s.PAGE_SIZE == 50
    assert s.COLLECTION_URL == "https://api.example/items"
    assert s.API_KEY == "abc"


@pytest.mark.parametrize(
    "overrides",
    [
        {"PAGE_SIZE": 0},
        {"CAPACITY": -1},
        {"ZOOM_STEP": 0},
        {"INITIAL_ZOOM": 12},
        {"MIN_ZOOM": 5, "INITIAL_ZOOM": 4},
        {"INITIAL_CENTER": [1.0]},
        {"RECENTER_ANIMATION_MS": 100, "ZOOM_ANIMATION_MS": 300},
        {"RECENTER_ANIMATION_MS": 300, "ZOOM_ANIMATION_MS": 300},
    ],
)
def test_rejects_inconsistent_values(overrides):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
