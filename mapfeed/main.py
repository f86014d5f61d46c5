# mapfeed/main.py
# FastAPI application: builds the map session on startup and exposes it to the
# rendering surface.

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import uuid
import structlog

from mapfeed.core.config import settings
from mapfeed.logging import configure_logging
from mapfeed.api.routes import router as api_router
from mapfeed.middleware.logging import LoggingMiddleware
from mapfeed.models.dto import ErrorResponse
from mapfeed.services.map_session import MapSession

configure_logging()
logger = structlog.get_logger(__name__)

# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("app_startup", version=settings.VERSION, collection_url=settings.COLLECTION_URL)
    # Tests may install their own session before startup
    if getattr(app.state, "session", None) is None:
        app.state.session = MapSession.from_settings(settings)
    if settings.AUTOLOAD_ON_STARTUP:
        # Failures are recorded on the loader; startup continues either way
        await app.state.session.start()

    yield

    logger.info("app_shutdown", feature_count=len(app.state.session.loader.features))

# --- FastAPI Application Initialization ---
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.BRIEF_DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

# --- API Routes ---
app.include_router(api_router, prefix="/api")

# --- Health Check Endpoint ---
@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    session = getattr(request.app.state, "session", None)
    if session is None:
        return {"status": "starting"}
    state = session.loader.state
    return {
        "status": "ok",
        "loading": state.loading,
        "feature_count": state.feature_count,
        "number_matched": state.number_matched,
    }

# --- Global Exception Handler (for unhandled errors) ---
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    error_id = str(uuid.uuid4())
    logger.error("unhandled_exception", error_id=error_id, error=str(exc), exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": ErrorResponse(
                error="INTERNAL_SERVER_ERROR",
                detail="An unexpected error occurred. Please report this error ID.",
                error_id=error_id,
            ).model_dump()
        }
    )
