"""In-memory registry of fusion studio sessions."""

import uuid
from typing import Callable, Dict

from stylefusion.handlers.error_handler import FusionError
from stylefusion.services.lifecycle_service.controller import FusionController
from stylefusion.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)


class SessionNotFoundError(FusionError):
    """No session exists for the requested id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            message=f"No session found with id {session_id}.",
            status_code=404,
            error_type="session_not_found",
            details={"session_id": session_id},
        )


class SessionRegistry:
    """Keep one FusionController per open studio page.

    State lives in process memory only and is lost on restart. Pages that
    are never closed are evicted oldest first once `max_sessions` is reached.
    """

    DEFAULT_MAX_SESSIONS = 256

    def __init__(
        self,
        controller_factory: Callable[[], FusionController],
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ):
        self.controller_factory = controller_factory
        self.max_sessions = max_sessions
        self._sessions: Dict[str, FusionController] = {}

    def create(self) -> str:
        while self._sessions and len(self._sessions) >= self.max_sessions:
            oldest = next(iter(self._sessions))
            del self._sessions[oldest]
            logger.warning(f"Evicted session {oldest}: limit of {self.max_sessions} reached")

        session_id = uuid.uuid4().hex
        self._sessions[session_id] = self.controller_factory()
        logger.info(f"Opened session {session_id}")
        return session_id

    def get(self, session_id: str) -> FusionController:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def discard(self, session_id: str) -> None:
        self.get(session_id)
        del self._sessions[session_id]
        logger.info(f"Closed session {session_id}")

    def __len__(self) -> int:
        return len(self._sessions)
