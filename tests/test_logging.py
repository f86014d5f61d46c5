import logging

import pytest

from mapfeed.logging import _use_json, configure_logging


@pytest.mark.parametrize("log_format,expected", [("json", True), ("console", False)])
def test_explicit_format(log_format, expected):
    assert _use_json(log_format) is expected


def test_auto_format_follows_environment(monkeypatch):
    from mapfeed.core.config import settings

    monkeypatch.setattr(settings, "ENV", "production")
    assert _use_json("auto") is True
    monkeypatch.setattr(settings, "ENV", "development")
    assert _use_json("auto") is False


def test_http_client_loggers_are_quieted():
    configure_logging(level="DEBUG", log_format="console")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("uvicorn").propagate is True
    configure_logging(level="INFO")


def test_unknown_level_rejected():
    with pytest.raises(ValueError):
        configure_logging(level="CHATTY")
