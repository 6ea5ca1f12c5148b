"""Request lifecycle for the studio pages: idle, busy, success and failed.

The controller owns the page state and the control panel. It checks the
credential and the required inputs, disables the inputs for the single
in-flight request, and turns every outcome into a status line. No failure
escapes a trigger; the page always returns to an interactive state.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Protocol

from stylefusion.models.fusion import (
    ControlPanel,
    FusionSessionView,
    ImageItem,
    ImageRole,
    ImageSlot,
    LifecycleState,
    ROLE_ORDER,
    SlotView,
)
from stylefusion.models.text_to_image import TextToImageConfig, TextToImageView
from stylefusion.handlers.error_handler import (
    AuthorizationError,
    ControlsDisabledError,
    FusionError,
    MapExceptions,
    MissingCredentialError,
    MissingRequiredInputError,
    TransportError,
)
from stylefusion.services.input_service.collector import BinaryHandle, InputCollector
from stylefusion.services.request_service.builder import RequestBuilder
from stylefusion.services.image_generation_service.generate import (
    FusionClient,
    TextToImageClient,
    read_api_key,
)
from stylefusion.utility.utils import Helper
from stylefusion.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

CredentialSource = Callable[[], Optional[str]]
GenerationCall = Callable[[str], Awaitable[ImageItem]]


class KeySelector(Protocol):
    """Host-provided dialog that lets the user pick an API key."""

    async def open_select_key(self) -> None: ...


class LifecycleController(ABC):
    """State machine shared by the fusion and text-to-image pages."""

    missing_input_message = MissingRequiredInputError().message

    def __init__(
        self,
        credential_source: CredentialSource = read_api_key,
        helper: Optional[Helper] = None,
    ):
        self.read_credentials = credential_source
        self.helper = helper or Helper()
        self.exceptions = MapExceptions()
        self.state = LifecycleState.IDLE
        self.panel = ControlPanel()

    @property
    def busy(self) -> bool:
        return self.state == LifecycleState.BUSY

    @abstractmethod
    def inputs_ready(self) -> bool:
        """Whether the trigger has everything it needs."""

    @property
    def can_trigger(self) -> bool:
        return self.inputs_ready() and not self.busy

    def refresh_trigger(self) -> None:
        """Re-evaluate the trigger after an input change."""
        if not self.busy:
            self.panel.set_controls_disabled(False, self.inputs_ready())

    def ensure_editable(self) -> None:
        if self.busy:
            raise ControlsDisabledError()

    def _enter_busy(self) -> None:
        self.state = LifecycleState.BUSY
        self.panel.hide_output()
        self.panel.show_status(self.helper.status_message("busy"))
        self.panel.set_controls_disabled(True, self.inputs_ready())
        logger.info("Lifecycle -> busy")

    def _release(self) -> None:
        self.panel.set_controls_disabled(False, self.inputs_ready())

    def _succeed(self, image: ImageItem) -> None:
        self.state = LifecycleState.SUCCESS
        self.panel.show_output(image)
        self.panel.show_status(self.helper.status_message("success"))
        self._release()
        logger.info("Lifecycle -> success")

    def _report(self, error: FusionError) -> None:
        prefix = self.helper.status_message("error_prefix")
        self.panel.show_status(f"{prefix}{error.message}", is_error=True)

    async def _on_failure(self, error: FusionError) -> None:
        self.state = LifecycleState.FAILED
        self._report(error)
        self._release()
        logger.error(f"Lifecycle -> failed ({error})")

    async def _on_missing_credential(self, error: MissingCredentialError) -> None:
        self.state = LifecycleState.IDLE
        self._report(error)
        self._release()
        logger.warning("Generation skipped: no API key configured")

    async def _run(self, call: GenerationCall) -> LifecycleState:
        """Guarded idle/success/failed -> busy -> success/failed transition."""
        if self.busy:
            logger.warning("Generation already in progress; trigger ignored")
            return self.state

        credentials = self.read_credentials()
        if not credentials:
            await self._on_missing_credential(MissingCredentialError())
            return self.state

        if not self.inputs_ready():
            self.state = LifecycleState.IDLE
            self._report(MissingRequiredInputError(message=self.missing_input_message))
            self._release()
            return self.state

        self._enter_busy()
        try:
            image = await call(credentials)
        except FusionError as error:
            await self._on_failure(error)
        except Exception as exc:
            await self._on_failure(self.exceptions.map_gemini_exception(exc))
        else:
            self._succeed(image)
        finally:
            if self.busy:
                self._abandon()
        return self.state

    def _abandon(self) -> None:
        """Leave busy when the call was cancelled before it produced an outcome."""
        self.state = LifecycleState.FAILED
        self._report(TransportError(message="Generation was cancelled."))
        self._release()
        logger.warning("Lifecycle -> failed (generation cancelled)")


class FusionController(LifecycleController):
    """Drive the style fusion page for one session."""

    def __init__(
        self,
        collector: Optional[InputCollector] = None,
        builder: Optional[RequestBuilder] = None,
        client: Optional[FusionClient] = None,
        credential_source: CredentialSource = read_api_key,
    ):
        super().__init__(credential_source=credential_source)
        self.collector = collector or InputCollector()
        listener = self.collector.on_change

        def on_change(prompt: str) -> None:
            if listener is not None:
                listener(prompt)
            self.refresh_trigger()

        self.collector.on_change = on_change
        self.builder = builder or RequestBuilder()
        self.client = client or FusionClient()
        self.panel.show_status(self.helper.status_message("idle"))
        self.refresh_trigger()

    def inputs_ready(self) -> bool:
        return self.collector.has_required_images

    @property
    def prompt(self) -> str:
        return self.collector.prompt

    async def set_image(self, role: ImageRole, handle: BinaryHandle) -> ImageSlot:
        self.ensure_editable()
        slot = await self.collector.decode(role, handle)
        # a trigger may have fired while the file was being read
        self.ensure_editable()
        self.collector.store(role, slot)
        return slot

    def clear_image(self, role: ImageRole) -> None:
        self.ensure_editable()
        self.collector.clear_image(role)

    def set_description(self, role: ImageRole, text: str) -> None:
        self.ensure_editable()
        self.collector.set_description(role, text)

    def set_flag(self, name: str, value: bool) -> None:
        self.ensure_editable()
        self.collector.set_flag(name, value)

    async def _call(self, credentials: str) -> ImageItem:
        payload = self.builder.build(self.collector.prompt, self.collector.slots)
        return await self.client.generate(payload, credentials)

    async def generate(self) -> LifecycleState:
        return await self._run(self._call)

    def view(self, session_id: str) -> FusionSessionView:
        images = {}
        for role in ROLE_ORDER:
            slot = self.collector.slots[role]
            images[role] = SlotView(
                populated=slot.is_populated,
                mime_type=slot.mime_type,
                file_name=slot.file_name,
                preview=(
                    ImageItem(mime_type=slot.mime_type, data_b64=slot.data_b64)
                    if slot.is_populated
                    else None
                ),
            )
        return FusionSessionView(
            session_id=session_id,
            state=self.state,
            prompt=self.collector.prompt,
            images=images,
            descriptions=dict(self.collector.descriptions),
            flags=self.collector.flags,
            panel=self.panel.model_copy(),
        )


class TextToImageController(LifecycleController):
    """Drive the single-prompt page, with the key-selection recovery path."""

    missing_input_message = "Please enter a prompt."

    def __init__(
        self,
        client: Optional[TextToImageClient] = None,
        key_selector: Optional[KeySelector] = None,
        credential_source: CredentialSource = read_api_key,
    ):
        super().__init__(credential_source=credential_source)
        self.client = client or TextToImageClient()
        self.key_selector = key_selector
        self.prompt = ""
        self.config = TextToImageConfig()
        self.panel.show_status(self.helper.status_message("idle_text"))
        self.refresh_trigger()

    def inputs_ready(self) -> bool:
        return bool(self.prompt.strip())

    def set_prompt(self, prompt: str) -> None:
        self.ensure_editable()
        self.prompt = prompt
        self.refresh_trigger()

    def set_config(self, config: TextToImageConfig) -> None:
        self.ensure_editable()
        self.config = config

    async def select_key(self) -> None:
        """Open the host's key dialog, or explain how to configure a key."""
        if self.key_selector is not None:
            try:
                await self.key_selector.open_select_key()
                return
            except Exception as exc:
                logger.error("Key selection dialog failed", exc_info=exc)

        fallback = self.helper.status_message("key_selection_fallback")
        self.panel.show_status(f"{self.panel.status} {fallback}".strip(), is_error=True)

    async def _on_missing_credential(self, error: MissingCredentialError) -> None:
        await super()._on_missing_credential(error)
        await self.select_key()
        self.state = LifecycleState.IDLE

    async def _on_failure(self, error: FusionError) -> None:
        await super()._on_failure(error)
        if isinstance(error, AuthorizationError):
            await self.select_key()

    async def _call(self, credentials: str) -> ImageItem:
        return await self.client.generate(self.prompt, self.config, credentials)

    async def generate(
        self,
        prompt: Optional[str] = None,
        config: Optional[TextToImageConfig] = None,
    ) -> LifecycleState:
        if not self.busy:
            if prompt is not None:
                self.set_prompt(prompt)
            if config is not None:
                self.set_config(config)
        return await self._run(self._call)

    def view(self) -> TextToImageView:
        return TextToImageView(
            state=self.state,
            prompt=self.prompt,
            panel=self.panel.model_copy(),
        )
