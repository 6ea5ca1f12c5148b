"""API routes for the single-prompt text-to-image page."""

from typing import Any

from fastapi import APIRouter, Depends

from stylefusion.config.options import Options
from stylefusion.models.text_to_image import TextToImageRequest, TextToImageView
from stylefusion.services.image_generation_service.main import ImageGeneration as ig
from stylefusion.services.lifecycle_service.controller import TextToImageController
from stylefusion.services.session_service.main import StudioSessions as ss

router = APIRouter(prefix="/api/text-to-image", tags=["Text to image"])


@router.get("/options")
async def get_options(
    service: Options = Depends(ig.get_options),
) -> dict[str, Any]:
    """Return aspect ratios, output formats and image counts."""
    return service.get_text_to_image_options()


@router.post("/generate", response_model=TextToImageView)
async def generate(
    payload: TextToImageRequest,
    controller: TextToImageController = Depends(ss.get_text_to_image_controller),
) -> TextToImageView:
    """Generate an image for the prompt; failures come back in the panel status."""
    await controller.generate(prompt=payload.prompt, config=payload.config)
    return controller.view()
