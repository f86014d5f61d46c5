# mapfeed/logging.py
# structlog on top of stdlib logging. Loader and viewport events are logged as
# event names with key/value context (page_loaded, zoom_rejected, ...).

import logging
import sys
from typing import Optional

import structlog
from mapfeed.core.config import settings

# Third-party loggers that would otherwise repeat what the loader already logs
QUIET_LOGGERS = {"httpx": logging.WARNING, "httpcore": logging.WARNING}
FORWARDED_LOGGERS = ["uvicorn", "uvicorn.error", "uvicorn.access", "httpx", "httpcore"]

def _use_json(log_format: str) -> bool:
    if log_format == "json":
        return True
    if log_format == "console":
        return False
    # "auto": readable locally, JSON everywhere else
    return settings.ENV.lower() != "development"

def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Route structlog and stdlib records through one pipeline.

    Args:
        level: Root level name, defaults to settings.LOG_LEVEL.
        log_format: "console", "json" or "auto", defaults to settings.LOG_FORMAT.
    """
    level_no = logging.getLevelName((level or settings.LOG_LEVEL).upper())
    if not isinstance(level_no, int):
        raise ValueError(f"Unknown log level: {level or settings.LOG_LEVEL}")

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
    ]

    if _use_json(log_format or settings.LOG_FORMAT):
        renderers = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        renderers = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=shared_processors + renderers,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level_no)
    logging.getLogger().setLevel(level_no)

    for name in FORWARDED_LOGGERS:
        logger = logging.getLogger(name)
        logger.handlers = []
        logger.propagate = True
    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(quiet_level, level_no))
