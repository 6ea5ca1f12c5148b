"""Shared fixtures: tiny real images and file-upload stand-ins."""

import io
from types import SimpleNamespace

import pytest
from PIL import Image


def make_image_bytes(fmt: str = "PNG", color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color=color).save(buf, format=fmt)
    return buf.getvalue()


class FakeUpload:
    """Mimics the parts of UploadFile the collector uses."""

    def __init__(self, data: bytes, filename="image.png", content_type="image/png"):
        self.data = data
        self.filename = filename
        self.content_type = content_type

    async def read(self) -> bytes:
        return self.data


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes(fmt="JPEG", color=(20, 120, 220))


@pytest.fixture
def upload():
    """Factory for fake uploaded files."""

    def _make(data=None, filename="image.png", content_type="image/png"):
        return FakeUpload(
            make_image_bytes() if data is None else data,
            filename=filename,
            content_type=content_type,
        )

    return _make


@pytest.fixture
def genai_stub():
    """
    Build a stand-in for genai.Client whose aio.models methods return
    canned responses or raise, recording the kwargs they were called with.
    """

    def _make(response=None, error=None):
        calls = []

        async def _respond(**kwargs):
            calls.append(kwargs)
            if error is not None:
                raise error
            return response

        models = SimpleNamespace(generate_content=_respond, generate_images=_respond)
        keys = []

        def factory(api_key=None):
            keys.append(api_key)
            return SimpleNamespace(aio=SimpleNamespace(models=models))

        factory.calls = calls
        factory.keys = keys
        return factory

    return _make
