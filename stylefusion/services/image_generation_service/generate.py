"""Gemini clients for the style fusion and text-to-image flows."""

import os
from typing import Any, Callable, Optional

from google import genai
from google.genai import types

from stylefusion.models.fusion import ImageItem, RequestPayload
from stylefusion.models.text_to_image import TextToImageConfig
from stylefusion.handlers.error_handler import EmptyResultError, MapExceptions
from stylefusion.services.request_service.builder import RequestBuilder
from stylefusion.utility.utils import Helper
from stylefusion.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

ClientFactory = Callable[..., Any]

DEFAULT_FUSION_MODEL = "gemini-2.5-flash-image"
DEFAULT_TEXT_TO_IMAGE_MODEL = "imagen-4.0-generate-001"


def read_api_key() -> Optional[str]:
    """Read the Gemini API key from the environment at call time."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None


class FusionClient:
    """Send a multi-image fusion payload to Gemini and return the first image.

    One call per request: no retry and no timeout beyond the transport's own.
    """

    DEFAULT_MIME_TYPE = "image/png"

    def __init__(
        self,
        model: Optional[str] = None,
        client_factory: ClientFactory = genai.Client,
    ):
        """Resolve the model name and keep a factory for per-call clients."""
        self.model = model or os.getenv("FUSION_MODEL", DEFAULT_FUSION_MODEL)
        self.client_factory = client_factory
        self.exceptions = MapExceptions()
        self.helper = Helper()

    async def generate(self, payload: RequestPayload, credentials: str) -> ImageItem:
        client = self.client_factory(api_key=credentials)
        try:
            logger.info(
                f"Generating fusion image with {self.model} "
                f"from {len(payload.images)} image(s)"
            )
            resp = await client.aio.models.generate_content(
                model=self.model,
                contents=RequestBuilder.to_contents(payload),
                config=types.GenerateContentConfig(
                    response_modalities=[types.Modality.IMAGE],
                ),
            )
        except Exception as e:
            raise self.exceptions.map_gemini_exception(e) from e

        return self.read_first_image(resp)

    def read_first_image(self, resp: Any) -> ImageItem:
        """
        Take the first part of the first candidate. Only inline image data
        counts; anything else means the prompt was declined.
        """
        candidates = getattr(resp, "candidates", None) or []
        content = getattr(candidates[0], "content", None) if candidates else None
        parts = getattr(content, "parts", None) or []
        inline = getattr(parts[0], "inline_data", None) if parts else None

        if inline is None or not getattr(inline, "data", None):
            logger.warning("Gemini returned no image data")
            raise EmptyResultError()

        return self.helper.from_bytes(
            inline.data, mime_type=inline.mime_type or self.DEFAULT_MIME_TYPE
        )


class TextToImageClient:
    """Generate an image from a single text prompt with Imagen."""

    def __init__(
        self,
        model: Optional[str] = None,
        client_factory: ClientFactory = genai.Client,
    ):
        """Resolve the model name and keep a factory for per-call clients."""
        self.model = model or os.getenv(
            "TEXT_TO_IMAGE_MODEL", DEFAULT_TEXT_TO_IMAGE_MODEL
        )
        self.client_factory = client_factory
        self.exceptions = MapExceptions()
        self.helper = Helper()

    async def generate(
        self, prompt: str, config: TextToImageConfig, credentials: str
    ) -> ImageItem:
        client = self.client_factory(api_key=credentials)
        try:
            logger.info(
                f"Generating {config.number_of_images} image(s) with {self.model} "
                f"at {config.aspect_ratio}"
            )
            resp = await client.aio.models.generate_images(
                model=self.model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=config.number_of_images,
                    output_mime_type=config.output_mime_type,
                    aspect_ratio=config.aspect_ratio,
                ),
            )
        except Exception as e:
            raise self.exceptions.map_gemini_exception(e) from e

        for generated in getattr(resp, "generated_images", None) or []:
            image = getattr(generated, "image", None)
            if image is not None and getattr(image, "image_bytes", None):
                return self.helper.from_bytes(
                    image.image_bytes,
                    mime_type=image.mime_type or config.output_mime_type,
                )

        logger.warning("Imagen returned no generated images")
        raise EmptyResultError()
