"""Pydantic models for the style fusion inputs, request payload and session views."""

from enum import Enum
from typing import Dict, Literal, Optional, Tuple, Union
from pydantic import BaseModel, Field, model_validator


class ImageRole(str, Enum):
    """Image inputs of the fusion studio, declared in payload order."""

    STYLE = "style"
    BASE = "base"
    POSE = "pose"


ROLE_ORDER: Tuple[ImageRole, ...] = (ImageRole.STYLE, ImageRole.BASE, ImageRole.POSE)
REQUIRED_ROLES: Tuple[ImageRole, ...] = (ImageRole.STYLE, ImageRole.BASE)
ROLE_LABELS: Dict[ImageRole, str] = {
    ImageRole.STYLE: "Art Style",
    ImageRole.BASE: "Your Image",
    ImageRole.POSE: "Pose Reference",
}


class ImageItem(BaseModel):
    """Image blob encoded as base64 with MIME metadata."""

    mime_type: str = "image/png"
    data_b64: str = ""

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data_b64}"


class ImageSlot(BaseModel):
    """One optional user image. Raw bytes and their base64 form travel together."""

    raw: Optional[bytes] = None
    data_b64: Optional[str] = None
    mime_type: Optional[str] = None
    file_name: Optional[str] = None

    @model_validator(mode="after")
    def raw_and_encoded_together(self) -> "ImageSlot":
        """Reject slots where only one of raw/encoded is set."""
        if (self.raw is None) != (self.data_b64 is None):
            raise ValueError("raw and data_b64 must be both present or both absent")
        return self

    @classmethod
    def empty(cls) -> "ImageSlot":
        return cls()

    @property
    def is_populated(self) -> bool:
        return self.raw is not None and self.data_b64 is not None


class GenerationFlags(BaseModel):
    """Boolean options that only change prompt phrasing."""

    print_quality: bool = False


class TextSegment(BaseModel):
    kind: Literal["text"] = "text"
    text: str

    model_config = {"frozen": True}


class InlineSegment(BaseModel):
    kind: Literal["inline"] = "inline"
    data_b64: str
    mime_type: str

    model_config = {"frozen": True}


Segment = Union[TextSegment, InlineSegment]


class RequestPayload(BaseModel):
    """Ordered request body: text first, then inline images in role order."""

    segments: Tuple[Segment, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @property
    def text(self) -> str:
        return next(s.text for s in self.segments if isinstance(s, TextSegment))

    @property
    def images(self) -> Tuple[InlineSegment, ...]:
        return tuple(s for s in self.segments if isinstance(s, InlineSegment))


class LifecycleState(str, Enum):
    IDLE = "idle"
    BUSY = "busy"
    SUCCESS = "success"
    FAILED = "failed"


class ControlPanel(BaseModel):
    """Rendered affordances of a studio page: status line, controls and output."""

    status: str = ""
    status_is_error: bool = False
    controls_disabled: bool = False
    trigger_enabled: bool = False
    output: Optional[ImageItem] = None
    output_visible: bool = False

    def show_status(self, message: str, is_error: bool = False) -> None:
        self.status = message
        self.status_is_error = is_error

    def set_controls_disabled(self, disabled: bool, trigger_ready: bool) -> None:
        """Toggle inputs; the trigger additionally requires its inputs to be ready."""
        self.controls_disabled = disabled
        self.trigger_enabled = not disabled and trigger_ready

    def show_output(self, image: ImageItem) -> None:
        self.output = image
        self.output_visible = True

    def hide_output(self) -> None:
        self.output = None
        self.output_visible = False


class SlotView(BaseModel):
    """Preview of an image slot without its raw bytes."""

    populated: bool = False
    mime_type: Optional[str] = None
    file_name: Optional[str] = None
    preview: Optional[ImageItem] = None


class FusionSessionView(BaseModel):
    """Everything the fusion page renders for one session."""

    session_id: str
    state: LifecycleState
    prompt: str
    images: Dict[ImageRole, SlotView]
    descriptions: Dict[ImageRole, str]
    flags: GenerationFlags
    panel: ControlPanel


class DescriptionUpdate(BaseModel):
    text: str = ""


class FlagUpdate(BaseModel):
    value: bool
