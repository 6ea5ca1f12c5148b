"""Models for the single-prompt text-to-image flow."""

from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from stylefusion.models.fusion import ControlPanel, LifecycleState


class TextToImageConfig(BaseModel):
    """Generation options; every field has a default."""

    number_of_images: int = Field(default=1, ge=1, le=4, alias="numberOfImages")
    output_mime_type: Literal["image/jpeg", "image/png"] = Field(
        default="image/jpeg", alias="outputMimeType"
    )
    aspect_ratio: Literal["1:1", "3:4", "4:3", "9:16", "16:9"] = Field(
        default="1:1", alias="aspectRatio"
    )

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class TextToImageRequest(BaseModel):
    """Incoming prompt and optional config for the text-to-image trigger."""

    prompt: str = ""
    config: TextToImageConfig = Field(default_factory=TextToImageConfig)

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }

    @field_validator("prompt", mode="before")
    def normalize_prompt(cls, value: Optional[str]) -> str:
        """Treat a missing prompt as empty so the controller reports it."""
        return value or ""


class TextToImageView(BaseModel):
    """Outcome of one text-to-image trigger as rendered by the page."""

    state: LifecycleState
    prompt: str
    panel: ControlPanel
