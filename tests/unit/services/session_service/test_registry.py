"""Unit tests for the in-memory session registry."""

import pytest

from stylefusion.services.lifecycle_service.controller import FusionController
from stylefusion.services.session_service.registry import (
    SessionNotFoundError,
    SessionRegistry,
)


def _registry():
    return SessionRegistry(
        controller_factory=lambda: FusionController(credential_source=lambda: "k")
    )


def test_create_returns_distinct_sessions():
    registry = _registry()

    first = registry.create()
    second = registry.create()

    assert first != second
    assert len(registry) == 2
    assert registry.get(first) is not registry.get(second)


def test_get_returns_same_controller():
    registry = _registry()
    session_id = registry.create()
    assert registry.get(session_id) is registry.get(session_id)


def test_unknown_session_raises_not_found():
    with pytest.raises(SessionNotFoundError) as exc_info:
        _registry().get("missing")
    assert exc_info.value.status_code == 404
    assert exc_info.value.details == {"session_id": "missing"}


def test_discard_removes_session():
    registry = _registry()
    session_id = registry.create()

    registry.discard(session_id)

    assert len(registry) == 0
    with pytest.raises(SessionNotFoundError):
        registry.discard(session_id)


def test_oldest_session_is_evicted_at_capacity():
    registry = SessionRegistry(
        controller_factory=lambda: FusionController(credential_source=lambda: "k"),
        max_sessions=2,
    )
    first = registry.create()
    second = registry.create()

    third = registry.create()

    assert len(registry) == 2
    with pytest.raises(SessionNotFoundError):
        registry.get(first)
    assert registry.get(second) is not registry.get(third)
