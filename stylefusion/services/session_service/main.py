"""Service factories for studio sessions and page controllers."""

from stylefusion.services.image_generation_service.main import ImageGeneration as ig
from stylefusion.services.lifecycle_service.controller import (
    FusionController,
    TextToImageController,
)
from stylefusion.services.session_service.registry import SessionRegistry


def _new_fusion_controller() -> FusionController:
    return FusionController(client=ig.get_fusion_client())


_registry = SessionRegistry(controller_factory=_new_fusion_controller)


class StudioSessions:
    """Factory wrapper exposing dependency-injected session services."""

    @staticmethod
    def get_registry() -> SessionRegistry:
        """Provide the process-wide session registry."""
        return _registry

    @staticmethod
    def get_text_to_image_controller() -> TextToImageController:
        """
        Provide a fresh text-to-image page per request. The server has no
        key-selection dialog, so the static instructions are shown instead.
        """
        return TextToImageController(client=ig.get_text_to_image_client())
