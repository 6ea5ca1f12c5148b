"""Offline stand-ins for the Gemini clients, selected with RUN_MODE=mock."""

from PIL import Image

from stylefusion.models.fusion import ImageItem, RequestPayload
from stylefusion.models.text_to_image import TextToImageConfig
from stylefusion.handlers.error_handler import EmptyResultError
from stylefusion.utility.utils import Helper
from stylefusion.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

PLACEHOLDER_SIZES = {
    "1:1": (512, 512),
    "3:4": (384, 512),
    "4:3": (512, 384),
    "9:16": (288, 512),
    "16:9": (512, 288),
}


class MockFusionClient:
    """
    Return the base image unchanged instead of calling Gemini, so the
    page flow can be exercised without a network or a quota.
    """

    async def generate(self, payload: RequestPayload, credentials: str) -> ImageItem:
        logger.info("Running mock fusion (no external API call).")
        images = payload.images
        if len(images) < 2:
            raise EmptyResultError()
        base = images[1]
        return ImageItem(mime_type=base.mime_type, data_b64=base.data_b64)


class MockTextToImageClient:
    """Return a flat placeholder image sized to the requested aspect ratio."""

    def __init__(self):
        self.helper = Helper()

    async def generate(
        self, prompt: str, config: TextToImageConfig, credentials: str
    ) -> ImageItem:
        logger.info("Running mock text-to-image (no external API call).")
        size = PLACEHOLDER_SIZES.get(config.aspect_ratio, PLACEHOLDER_SIZES["1:1"])
        img = Image.new("RGB", size, color=(200, 200, 200))
        fmt = "JPEG" if config.output_mime_type == "image/jpeg" else "PNG"
        return self.helper.from_pil(img, fmt=fmt)
