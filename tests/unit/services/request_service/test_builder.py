"""Unit tests for request payload construction."""

import base64

import pytest
from pydantic import ValidationError

from stylefusion.handlers.error_handler import (
    MissingRequiredImageError,
    MissingRequiredInputError,
)
from stylefusion.models.fusion import (
    ImageRole,
    ImageSlot,
    InlineSegment,
    ROLE_ORDER,
    TextSegment,
)
from stylefusion.services.request_service.builder import RequestBuilder


def _slot(raw: bytes, mime="image/png"):
    return ImageSlot(
        raw=raw, data_b64=base64.b64encode(raw).decode("utf-8"), mime_type=mime
    )


def _slots(**raws):
    slots = {role: ImageSlot.empty() for role in ROLE_ORDER}
    for name, raw in raws.items():
        slots[ImageRole(name)] = _slot(raw)
    return slots


def test_text_first_then_images_in_role_order():
    builder = RequestBuilder()
    slots = _slots(pose=b"P", base=b"B", style=b"S")

    payload = builder.build("the prompt", slots)

    assert isinstance(payload.segments[0], TextSegment)
    assert payload.text == "the prompt"
    assert [base64.b64decode(s.data_b64) for s in payload.images] == [b"S", b"B", b"P"]


def test_missing_pose_is_omitted():
    payload = RequestBuilder().build("p", _slots(style=b"S", base=b"B"))
    assert len(payload.segments) == 3
    assert all(isinstance(s, InlineSegment) for s in payload.segments[1:])


@pytest.mark.parametrize(
    "raws",
    [{"base": b"B"}, {"style": b"S"}, {"pose": b"P"}, {}],
)
def test_missing_required_image_raises(raws):
    with pytest.raises(MissingRequiredImageError) as exc_info:
        RequestBuilder().build("p", _slots(**raws))
    assert isinstance(exc_info.value, MissingRequiredInputError)
    assert exc_info.value.error_type == "missing_input"


def test_payload_is_frozen():
    payload = RequestBuilder().build("p", _slots(style=b"S", base=b"B"))
    with pytest.raises(ValidationError):
        payload.segments = ()


def test_slot_rejects_raw_without_encoding():
    with pytest.raises(ValidationError):
        ImageSlot(raw=b"x")


def test_to_contents_keeps_order_and_bytes():
    payload = RequestBuilder().build("p", _slots(style=b"S", base=b"B", pose=b"P"))

    parts = RequestBuilder.to_contents(payload)

    assert parts[0].text == "p"
    assert [p.inline_data.data for p in parts[1:]] == [b"S", b"B", b"P"]
    assert all(p.inline_data.mime_type == "image/png" for p in parts[1:])
