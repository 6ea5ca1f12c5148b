"""Holds the user's images, descriptions and flags for one fusion page."""

from typing import Awaitable, Callable, Dict, Optional, Protocol

from stylefusion.models.fusion import (
    GenerationFlags,
    ImageRole,
    ImageSlot,
    REQUIRED_ROLES,
    ROLE_ORDER,
)
from stylefusion.handlers.error_handler import DecodeError
from stylefusion.services.prompt_service.composer import PromptComposer
from stylefusion.utility.utils import Helper
from stylefusion.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

PromptListener = Callable[[str], None]


class BinaryHandle(Protocol):
    """A user-selected file. FastAPI's UploadFile satisfies this."""

    filename: Optional[str]
    content_type: Optional[str]

    def read(self) -> Awaitable[bytes]: ...


class InputCollector:
    """Own the mutable inputs and keep the composite prompt in sync.

    Every successful mutation recomputes the prompt and notifies the
    optional listener, so callers never refresh it by hand.
    """

    def __init__(
        self,
        composer: Optional[PromptComposer] = None,
        on_change: Optional[PromptListener] = None,
    ):
        self.composer = composer or PromptComposer()
        self.helper = Helper()
        self.on_change = on_change
        self.slots: Dict[ImageRole, ImageSlot] = {
            role: ImageSlot.empty() for role in ROLE_ORDER
        }
        self.descriptions: Dict[ImageRole, str] = {role: "" for role in ROLE_ORDER}
        self.flags = GenerationFlags()
        self.prompt = ""
        self._recompute()

    def _recompute(self) -> str:
        self.prompt = self.composer.compose(self.slots, self.descriptions, self.flags)
        if self.on_change is not None:
            self.on_change(self.prompt)
        return self.prompt

    @property
    def has_required_images(self) -> bool:
        return all(self.slots[role].is_populated for role in REQUIRED_ROLES)

    async def set_image(self, role: ImageRole, handle: BinaryHandle) -> ImageSlot:
        """
        Read and encode a selected file into the slot for `role`.

        The read is the only suspension point. The slot is replaced in one
        assignment after it resolves, so a failed decode leaves the previous
        slot untouched and the last decode to finish for a role wins.
        """
        slot = await self.decode(role, handle)
        self.store(role, slot)
        return slot

    async def decode(self, role: ImageRole, handle: BinaryHandle) -> ImageSlot:
        """Read and validate a selected file without touching any slot."""
        role = ImageRole(role)
        try:
            raw = await handle.read()
        except OSError as exc:
            raise DecodeError(details={"role": role.value, "reason": str(exc)}) from exc

        if not raw:
            raise DecodeError(details={"role": role.value, "reason": "empty file"})

        try:
            detected_mime, size = self.helper.sniff_image(raw)
        except ValueError as exc:
            logger.warning(f"Rejected {role.value} image: {exc}")
            raise DecodeError(details={"role": role.value, "reason": str(exc)}) from exc

        logger.info(
            f"Decoded {role.value} image {handle.filename!r} ({size[0]}x{size[1]})"
        )
        return ImageSlot(
            raw=raw,
            data_b64=self.helper.encode_b64(raw),
            mime_type=handle.content_type or detected_mime,
            file_name=handle.filename,
        )

    def store(self, role: ImageRole, slot: ImageSlot) -> None:
        """Put a decoded slot in place and refresh the prompt."""
        role = ImageRole(role)
        self.slots[role] = slot
        logger.info(f"Loaded {role.value} image {slot.file_name!r} ({slot.mime_type})")
        self._recompute()

    def clear_image(self, role: ImageRole) -> None:
        """Reset the slot for `role` to empty."""
        role = ImageRole(role)
        self.slots[role] = ImageSlot.empty()
        logger.info(f"Cleared {role.value} image")
        self._recompute()

    def set_description(self, role: ImageRole, text: str) -> None:
        self.descriptions[ImageRole(role)] = text
        self._recompute()

    def set_flag(self, name: str, value: bool) -> None:
        """Set a generation flag by name; unknown names raise KeyError."""
        if name not in GenerationFlags.model_fields:
            raise KeyError(f"Unknown flag: {name}")
        self.flags = self.flags.model_copy(update={name: bool(value)})
        self._recompute()
