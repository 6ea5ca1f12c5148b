"""Turn the studio inputs into an ordered Gemini request payload."""

from typing import List, Mapping

from google.genai import types

from stylefusion.models.fusion import (
    ImageRole,
    ImageSlot,
    InlineSegment,
    REQUIRED_ROLES,
    ROLE_ORDER,
    RequestPayload,
    Segment,
    TextSegment,
)
from stylefusion.handlers.error_handler import MissingRequiredImageError
from stylefusion.utility.utils import Helper
from stylefusion.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)


class RequestBuilder:
    """Compose request payloads and convert them to google-genai parts."""

    DEFAULT_MIME_TYPE = "image/png"

    def build(
        self, prompt: str, slots: Mapping[ImageRole, ImageSlot]
    ) -> RequestPayload:
        """
        Text segment first, then style, base and pose images.
        Raises MissingRequiredImageError when style or base is empty.
        """
        missing = [
            role.value
            for role in REQUIRED_ROLES
            if role not in slots or not slots[role].is_populated
        ]
        if missing:
            raise MissingRequiredImageError(details={"missing_roles": missing})

        segments: List[Segment] = [TextSegment(text=prompt)]
        for role in ROLE_ORDER:
            slot = slots.get(role)
            if slot is None or not slot.is_populated:
                continue
            segments.append(
                InlineSegment(
                    data_b64=slot.data_b64,
                    mime_type=slot.mime_type or self.DEFAULT_MIME_TYPE,
                )
            )

        logger.info(f"Built payload with {len(segments) - 1} image segment(s)")
        return RequestPayload(segments=tuple(segments))

    @staticmethod
    def to_contents(payload: RequestPayload) -> List[types.Part]:
        """Convert payload segments into google-genai parts, keeping order."""
        parts: List[types.Part] = []
        for segment in payload.segments:
            if isinstance(segment, TextSegment):
                parts.append(types.Part.from_text(text=segment.text))
            else:
                parts.append(
                    types.Part.from_bytes(
                        data=Helper.decode_b64(segment.data_b64),
                        mime_type=segment.mime_type,
                    )
                )
        return parts
