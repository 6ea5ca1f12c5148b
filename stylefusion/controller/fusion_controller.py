"""API routes for the style fusion studio sessions."""

from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from stylefusion.config.options import Options
from stylefusion.models.fusion import (
    DescriptionUpdate,
    FlagUpdate,
    FusionSessionView,
    ImageRole,
)
from stylefusion.services.image_generation_service.main import ImageGeneration as ig
from stylefusion.services.session_service.main import StudioSessions as ss
from stylefusion.services.session_service.registry import SessionRegistry
from stylefusion.utility.logger import AppLogger

router = APIRouter(prefix="/api/fusion", tags=["Fusion"])
logger = AppLogger.get_logger(__name__)


@router.get("/options")
async def get_options(
    service: Options = Depends(ig.get_options),
) -> dict[str, Any]:
    """Return image roles, flags and accepted upload types."""
    return service.get_fusion_options()


@router.post("/sessions", response_model=FusionSessionView)
async def open_session(
    registry: SessionRegistry = Depends(ss.get_registry),
) -> FusionSessionView:
    """Open a new studio page with empty inputs."""
    session_id = registry.create()
    return registry.get(session_id).view(session_id)


@router.get("/sessions/{session_id}", response_model=FusionSessionView)
async def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(ss.get_registry),
) -> FusionSessionView:
    """Return the current page state, including the derived prompt."""
    return registry.get(session_id).view(session_id)


@router.delete("/sessions/{session_id}")
async def close_session(
    session_id: str,
    registry: SessionRegistry = Depends(ss.get_registry),
) -> dict[str, Any]:
    """Drop a studio page and its inputs."""
    registry.discard(session_id)
    return {"success": True}


@router.put("/sessions/{session_id}/images/{role}", response_model=FusionSessionView)
async def upload_image(
    session_id: str,
    role: ImageRole,
    file: UploadFile = File(...),
    registry: SessionRegistry = Depends(ss.get_registry),
) -> FusionSessionView:
    """Select a file for an image role, replacing any previous one."""
    controller = registry.get(session_id)
    await controller.set_image(role, file)
    return controller.view(session_id)


@router.delete(
    "/sessions/{session_id}/images/{role}", response_model=FusionSessionView
)
async def remove_image(
    session_id: str,
    role: ImageRole,
    registry: SessionRegistry = Depends(ss.get_registry),
) -> FusionSessionView:
    """Clear an image role."""
    controller = registry.get(session_id)
    controller.clear_image(role)
    return controller.view(session_id)


@router.put(
    "/sessions/{session_id}/descriptions/{role}", response_model=FusionSessionView
)
async def update_description(
    session_id: str,
    role: ImageRole,
    payload: DescriptionUpdate,
    registry: SessionRegistry = Depends(ss.get_registry),
) -> FusionSessionView:
    """Replace the free-text description of an image role."""
    controller = registry.get(session_id)
    controller.set_description(role, payload.text)
    return controller.view(session_id)


@router.put("/sessions/{session_id}/flags/{name}", response_model=FusionSessionView)
async def update_flag(
    session_id: str,
    name: str,
    payload: FlagUpdate,
    registry: SessionRegistry = Depends(ss.get_registry),
) -> FusionSessionView:
    """Toggle a generation flag such as print_quality."""
    controller = registry.get(session_id)
    try:
        controller.set_flag(name, payload.value)
    except KeyError as e:
        logger.error(f"Exception Occurred : {e}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown flag: {name}"
        ) from e
    return controller.view(session_id)


@router.post("/sessions/{session_id}/generate", response_model=FusionSessionView)
async def generate(
    session_id: str,
    registry: SessionRegistry = Depends(ss.get_registry),
) -> FusionSessionView:
    """
    Run the fusion request for the current inputs. Failures are reported in
    the returned panel status rather than as HTTP errors.
    """
    controller = registry.get(session_id)
    await controller.generate()
    return controller.view(session_id)
