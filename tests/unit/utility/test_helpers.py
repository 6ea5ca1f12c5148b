"""Unit tests for utility helpers used across services."""

import io

import pytest
from PIL import Image

from stylefusion.config.options import Options
from stylefusion.utility.path_finder import Finder
from stylefusion.utility.utils import Helper


def test_templates_file_is_packaged():
    assert Finder().get_directory("templates").is_file()


def test_load_template_by_short_name():
    helper = Helper()
    assert helper.load_template("description_header") == "--- User Descriptions ---"
    assert "{label}" in helper.load_template("description_line")


def test_unknown_template_is_rejected():
    with pytest.raises(ValueError):
        Helper().load_template("nope")


def test_status_messages():
    helper = Helper()
    assert helper.status_message("busy") == "Generating image..."
    assert helper.status_message("error_prefix") == "Error: "


def test_sniff_image_detects_format(png_bytes, jpeg_bytes):
    assert Helper.sniff_image(png_bytes) == ("image/png", (4, 4))
    assert Helper.sniff_image(jpeg_bytes)[0] == "image/jpeg"


def test_sniff_image_rejects_garbage():
    with pytest.raises(ValueError):
        Helper.sniff_image(b"\x00\x01 not an image")


def test_from_bytes_builds_data_url():
    item = Helper().from_bytes(b"abc", mime_type="image/webp")
    assert item.data_b64 == "YWJj"
    assert item.data_url == "data:image/webp;base64,YWJj"
    assert Helper.decode_b64(item.data_b64) == b"abc"


def test_from_pil_uses_format_mime():
    item = Helper().from_pil(Image.new("RGB", (2, 2)), fmt="JPEG")
    assert item.mime_type == "image/jpeg"
    assert Helper.sniff_image(Helper.decode_b64(item.data_b64))[0] == "image/jpeg"


def test_sniff_image_rejects_oversized_images(monkeypatch, png_bytes):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 4)
    with pytest.raises(ValueError):
        Helper.sniff_image(png_bytes)


def test_every_advertised_upload_type_can_be_read():
    Image.init()
    formats = {mime: fmt for fmt, mime in Image.MIME.items()}
    for mime_type in Options().accepted_mime_types:
        buf = io.BytesIO()
        Image.new("RGB", (4, 4)).save(buf, format=formats[mime_type])
        assert Helper.sniff_image(buf.getvalue())[0] == mime_type
