"""Error taxonomy and helpers for mapping Gemini failures to studio errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from google.genai import errors as genai_errors
from stylefusion.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

# Lower-cased fragments Gemini puts in rejected-credential messages.
# Service-version dependent, so only used when no status code decides.
AUTHORIZATION_MARKERS = (
    "api key not valid",
    "api_key_invalid",
    "api key expired",
    "permission_denied",
    "permission denied",
    "unauthenticated",
    "requested entity was not found",
)


@dataclass
class FusionError(Exception):
    """
    Base error for all studio failures.
    Routes let it escape only for input errors; FastAPI renders it as JSON.
    """

    message: str
    status_code: int = 500
    error_type: str = "fusion_error"
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.error_type}: {self.message}"


class MissingCredentialError(FusionError):
    """No API key is configured in the environment."""

    def __init__(
        self,
        message: str = "API key is not configured. Please add your API key.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=401,
            error_type="missing_credential",
            details=details,
        )


class MissingRequiredInputError(FusionError):
    """A trigger was attempted without the inputs it needs."""

    def __init__(
        self,
        message: str = "Please provide at least a Style and a Base image.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_type="missing_input",
            details=details,
        )


class MissingRequiredImageError(MissingRequiredInputError):
    """The style or base image slot is empty when building a payload."""


class DecodeError(FusionError):
    """A selected file could not be read as an image."""

    def __init__(
        self,
        message: str = "Could not read the selected image.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=422,
            error_type="decode_error",
            details=details,
        )


class EmptyResultError(FusionError):
    """The service answered without an image, usually a blocked prompt."""

    def __init__(
        self,
        message: str = "No image was generated. The prompt may have been blocked.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=502,
            error_type="empty_result",
            details=details,
        )


class AuthorizationError(FusionError):
    """The service rejected the configured credential."""

    def __init__(
        self,
        message: str = "Your API key is invalid or lacks access. Please select a valid API key.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=403,
            error_type="authorization",
            details=details,
        )


class TransportError(FusionError):
    """Any other failure of the generation call."""

    def __init__(
        self,
        message: str = "An unknown error occurred.",
        status_code: int = 502,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type="transport",
            details=details,
        )


class ControlsDisabledError(FusionError):
    """An input was changed while a generation request is in flight."""

    def __init__(
        self,
        message: str = "Inputs are disabled while an image is being generated.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=409,
            error_type="controls_disabled",
            details=details,
        )


class MapExceptions:
    """Translate Gemini client failures into studio errors.

    Prefers the structured status code of google-genai errors and only
    then looks at message text.
    """

    @staticmethod
    def mentions_credential(text: str) -> bool:
        lowered = text.lower()
        return any(marker in lowered for marker in AUTHORIZATION_MARKERS)

    def map_gemini_exception(self, exc: Exception) -> FusionError:
        """
        Map a low-level exception raised around a Gemini call to a
        FusionError. Errors that are already classified pass through.
        """
        if isinstance(exc, FusionError):
            return exc

        logger.error("Gemini error during image generation", exc_info=exc)
        details = {"exception_type": exc.__class__.__name__}
        text = str(exc)

        if isinstance(exc, genai_errors.APIError):
            details["code"] = exc.code
            details["status"] = exc.status
            if exc.code in (401, 403) or self.mentions_credential(text):
                return AuthorizationError(details=details)
            return TransportError(
                message=exc.message or text or "Gemini request failed.",
                status_code=exc.code if exc.code and exc.code >= 400 else 502,
                details=details,
            )

        if self.mentions_credential(text):
            return AuthorizationError(details=details)

        return TransportError(
            message=text or "An unknown error occurred.",
            details=details,
        )

    @staticmethod
    def register_exception_handlers(app: FastAPI) -> None:
        """
        Call this once in the main FastAPI app to register handlers:

            app = FastAPI()
            MapExceptions.register_exception_handlers(app)
        """

        @app.exception_handler(FusionError)
        async def fusion_error_handler(
            request: Request, exc: FusionError
        ) -> JSONResponse:
            logger.error(
                "FusionError caught by FastAPI handler",
                extra={"type": exc.error_type},
            )

            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "status": "error",
                    "error_type": exc.error_type,
                    "message": exc.message,
                    "details": exc.details,
                },
            )
