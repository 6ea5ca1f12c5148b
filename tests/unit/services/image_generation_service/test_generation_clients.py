"""Unit tests for the Gemini fusion and text-to-image clients."""

import asyncio
import base64
from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

from stylefusion.handlers.error_handler import (
    AuthorizationError,
    EmptyResultError,
    TransportError,
)
from stylefusion.models.fusion import ImageRole, ImageSlot, ROLE_ORDER
from stylefusion.models.text_to_image import TextToImageConfig
from stylefusion.services.image_generation_service.generate import (
    FusionClient,
    TextToImageClient,
    read_api_key,
)
from stylefusion.services.image_generation_service.mock import (
    MockFusionClient,
    MockTextToImageClient,
)
from stylefusion.services.request_service.builder import RequestBuilder


def _payload(with_pose=False):
    slots = {role: ImageSlot.empty() for role in ROLE_ORDER}
    roles = list(ROLE_ORDER) if with_pose else [ImageRole.STYLE, ImageRole.BASE]
    for role in roles:
        raw = role.value.encode()
        slots[role] = ImageSlot(
            raw=raw, data_b64=base64.b64encode(raw).decode("utf-8"), mime_type="image/jpeg"
        )
    return RequestBuilder().build("fuse these", slots)


def _content_response(parts):
    return SimpleNamespace(
        candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))]
    )


def _inline(data=b"result", mime_type="image/webp"):
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type))


class TestFusionClient:
    def test_returns_first_inline_image(self, genai_stub):
        factory = genai_stub(response=_content_response([_inline()]))
        client = FusionClient(model="test-model", client_factory=factory)

        image = asyncio.run(client.generate(_payload(with_pose=True), "key-123"))

        assert image.mime_type == "image/webp"
        assert base64.b64decode(image.data_b64) == b"result"
        assert factory.keys == ["key-123"]

        call = factory.calls[0]
        assert call["model"] == "test-model"
        assert [p.inline_data.data for p in call["contents"][1:]] == [
            b"style",
            b"base",
            b"pose",
        ]
        assert call["contents"][0].text == "fuse these"
        modalities = [getattr(m, "value", m) for m in call["config"].response_modalities]
        assert modalities == ["IMAGE"]

    def test_missing_mime_type_defaults_to_png(self, genai_stub):
        factory = genai_stub(response=_content_response([_inline(mime_type=None)]))
        image = asyncio.run(FusionClient(client_factory=factory).generate(_payload(), "k"))
        assert image.mime_type == "image/png"

    @pytest.mark.parametrize(
        "response",
        [
            SimpleNamespace(candidates=[]),
            SimpleNamespace(candidates=None),
            _content_response([]),
            _content_response([SimpleNamespace(inline_data=None, text="refused")]),
        ],
    )
    def test_no_image_is_empty_result(self, genai_stub, response):
        factory = genai_stub(response=response)
        with pytest.raises(EmptyResultError):
            asyncio.run(FusionClient(client_factory=factory).generate(_payload(), "k"))

    def test_only_first_part_is_considered(self, genai_stub):
        parts = [SimpleNamespace(inline_data=None, text="here you go"), _inline()]
        factory = genai_stub(response=_content_response(parts))
        with pytest.raises(EmptyResultError):
            asyncio.run(FusionClient(client_factory=factory).generate(_payload(), "k"))

    def test_rejected_key_maps_to_authorization(self, genai_stub):
        error = genai_errors.ClientError(
            400,
            {
                "error": {
                    "code": 400,
                    "message": "API key not valid. Please pass a valid API key.",
                    "status": "INVALID_ARGUMENT",
                }
            },
        )
        factory = genai_stub(error=error)
        with pytest.raises(AuthorizationError):
            asyncio.run(FusionClient(client_factory=factory).generate(_payload(), "k"))

    def test_network_failure_maps_to_transport(self, genai_stub):
        factory = genai_stub(error=ConnectionError("connection reset"))
        with pytest.raises(TransportError) as exc_info:
            asyncio.run(FusionClient(client_factory=factory).generate(_payload(), "k"))
        assert "connection reset" in exc_info.value.message


class TestTextToImageClient:
    def test_returns_first_generated_image(self, genai_stub):
        response = SimpleNamespace(
            generated_images=[
                SimpleNamespace(image=SimpleNamespace(image_bytes=b"one", mime_type=None)),
                SimpleNamespace(image=SimpleNamespace(image_bytes=b"two", mime_type=None)),
            ]
        )
        factory = genai_stub(response=response)
        config = TextToImageConfig(
            number_of_images=2, output_mime_type="image/png", aspect_ratio="16:9"
        )

        image = asyncio.run(
            TextToImageClient(model="imagen-test", client_factory=factory).generate(
                "a lighthouse at dusk", config, "k"
            )
        )

        assert base64.b64decode(image.data_b64) == b"one"
        assert image.mime_type == "image/png"
        call = factory.calls[0]
        assert call["model"] == "imagen-test"
        assert call["prompt"] == "a lighthouse at dusk"
        assert call["config"].number_of_images == 2
        assert call["config"].aspect_ratio == "16:9"

    def test_zero_images_is_empty_result(self, genai_stub):
        factory = genai_stub(response=SimpleNamespace(generated_images=[]))
        with pytest.raises(EmptyResultError):
            asyncio.run(
                TextToImageClient(client_factory=factory).generate(
                    "p", TextToImageConfig(), "k"
                )
            )


def test_read_api_key_prefers_gemini_variable(monkeypatch):
    monkeypatch.setenv("API_KEY", "fallback")
    monkeypatch.setenv("GEMINI_API_KEY", "primary")
    assert read_api_key() == "primary"

    monkeypatch.delenv("GEMINI_API_KEY")
    assert read_api_key() == "fallback"

    monkeypatch.delenv("API_KEY")
    assert read_api_key() is None


def test_mock_fusion_echoes_base_image():
    image = asyncio.run(MockFusionClient().generate(_payload(), "unused"))
    assert base64.b64decode(image.data_b64) == b"base"


def test_mock_text_to_image_respects_format():
    config = TextToImageConfig(output_mime_type="image/png", aspect_ratio="16:9")
    image = asyncio.run(MockTextToImageClient().generate("p", config, "unused"))
    assert image.mime_type == "image/png"
    assert image.data_b64
