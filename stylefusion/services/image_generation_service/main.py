"""Factories for generation clients and option providers."""

import os

from stylefusion.config.options import Options
from stylefusion.services.image_generation_service.generate import (
    FusionClient,
    TextToImageClient,
)
from stylefusion.services.image_generation_service.mock import (
    MockFusionClient,
    MockTextToImageClient,
)


class ImageGeneration:
    """Expose dependency providers for the generation clients.

    RUN_MODE=mock swaps in clients that never touch the network.
    """

    @staticmethod
    def run_mode() -> str:
        return os.getenv("RUN_MODE", "actual")

    @staticmethod
    def get_fusion_client():
        """Provide the fusion client for the active run mode."""
        if ImageGeneration.run_mode() == "mock":
            return MockFusionClient()
        return FusionClient()

    @staticmethod
    def get_text_to_image_client():
        """Provide the text-to-image client for the active run mode."""
        if ImageGeneration.run_mode() == "mock":
            return MockTextToImageClient()
        return TextToImageClient()

    @staticmethod
    def get_options() -> Options:
        """Return the option catalog used by the studio endpoints."""
        return Options()
