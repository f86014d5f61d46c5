# mapfeed/api/routes.py
# HTTP channel between the map session and the rendering surface: published
# state is read with GET, user actions arrive as POST.

from fastapi import APIRouter, Request, HTTPException, status, Depends
from fastapi.responses import Response
import logging

from mapfeed.models.dto import (
    CameraDirective,
    ErrorResponse,
    FeatureCollection,
    MapView,
)
from mapfeed.services.kmz_service import generate_kmz
from mapfeed.services.map_session import MapSession

router = APIRouter()
logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------
# Session dependency
# ----------------------------------------------------------------------
def get_session(request: Request) -> MapSession:
    """Return the MapSession created during application startup."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=ErrorResponse(
                error="SESSION_UNAVAILABLE",
                detail="The map session has not been initialised.",
            ).model_dump(),
        )
    return session

# ----------------------------------------------------------------------
# Published state
# ----------------------------------------------------------------------
@router.get("/view", response_model=MapView)
async def get_view(session: MapSession = Depends(get_session)):
    """Everything needed to render one frame."""
    return session.view()

@router.get("/features", response_model=FeatureCollection)
async def get_features(session: MapSession = Depends(get_session)):
    return session.feature_collection()

@router.get("/camera", response_model=CameraDirective)
async def get_camera(session: MapSession = Depends(get_session)):
    return session.viewport.camera

# ----------------------------------------------------------------------
# Actions
# ----------------------------------------------------------------------
@router.post(
    "/load-more",
    response_model=MapView,
    responses={502: {"model": ErrorResponse}},
)
async def load_more(session: MapSession = Depends(get_session)):
    """Fetch the next page. A no-op while loading or once at capacity."""
    error = await session.load_more()
    if error is not None:
        # Loader state is already consistent; the caller may simply retry
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=error.to_response().model_dump(exclude_none=True),
        )
    return session.view()

@router.post("/zoom-in", response_model=MapView)
async def zoom_in(session: MapSession = Depends(get_session)):
    session.zoom_in()
    return session.view()

@router.post("/zoom-out", response_model=MapView)
async def zoom_out(session: MapSession = Depends(get_session)):
    session.zoom_out()
    return session.view()

@router.post("/reset", response_model=MapView)
async def reset(session: MapSession = Depends(get_session)):
    session.reset()
    return session.view()

# ----------------------------------------------------------------------
# KMZ Download Endpoint
# ----------------------------------------------------------------------
@router.get(
    "/features.kmz",
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def download_kmz(session: MapSession = Depends(get_session)):
    """Stream a KMZ file of the features loaded so far."""
    features = list(session.loader.features)
    if not features:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorResponse(
                error="NO_FEATURES",
                detail="No features have been loaded yet.",
            ).model_dump(exclude_none=True),
        )

    try:
        kmz_content = generate_kmz(features)
    except Exception as e:
        logger.error(f"KMZ generation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=ErrorResponse(
                error="KMZ_DOWNLOAD_UNAVAILABLE",
                detail="Download temporarily unavailable due to generation error.",
            ).model_dump(exclude_none=True),
        )
    return Response(
        content=kmz_content,
        media_type="application/vnd.google-earth.kmz",
        headers={"Content-Disposition": "attachment; filename=features.kmz"},
    )
