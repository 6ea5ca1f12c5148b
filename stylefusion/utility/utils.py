"""Shared helper utilities for template handling and image serialization."""

import io
import base64
import yaml
from PIL import Image, UnidentifiedImageError
from typing import Any, Dict, Optional, Tuple
from stylefusion.utility.path_finder import Finder
from stylefusion.models.fusion import ImageItem


class Helper:
    """Provide reusable utilities for prompt templates and image encoding.

    Handles loading YAML templates and converting raw image bytes
    to API-friendly structures.
    """

    TEMPLATE_MAP = {
        "fusion_base": "FUSION_BASE_TEMPLATE",
        "pose_clause": "POSE_CLAUSE_TEMPLATE",
        "print_quality": "PRINT_QUALITY_TEMPLATE",
        "standard_quality": "STANDARD_QUALITY_TEMPLATE",
        "description_header": "DESCRIPTION_HEADER_TEMPLATE",
        "description_line": "DESCRIPTION_LINE_TEMPLATE",
        "status": "STATUS_MESSAGES",
    }

    def __init__(self):
        """Initialize the helper with access to configured paths."""
        self.path = Finder()
        self._templates: Optional[Dict[str, Any]] = None

    def _load_templates(self) -> Dict[str, Any]:
        if self._templates is None:
            with open(self.path.get_directory("templates"), "r", encoding="utf-8") as f:
                self._templates = yaml.safe_load(f)
        return self._templates

    def load_template(self, template: str) -> Any:
        """Load a prompt template or message table by its short name."""
        template_key = self.TEMPLATE_MAP.get(template)
        if not template_key:
            raise ValueError(f"Unknown template type: {template}")

        data = self._load_templates()
        if template_key not in data:
            raise KeyError(f"Template '{template_key}' missing in templates.yml")

        return data[template_key]

    def status_message(self, key: str) -> str:
        """Return a status line message from the template store."""
        return self.load_template("status")[key]

    @staticmethod
    def encode_b64(raw: bytes) -> str:
        return base64.b64encode(raw).decode("utf-8")

    @staticmethod
    def decode_b64(data_b64: str) -> bytes:
        return base64.b64decode(data_b64)

    @staticmethod
    def sniff_image(raw: bytes) -> Tuple[str, Tuple[int, int]]:
        """
        Verify that raw bytes hold a readable image.
        Returns (mime_type, size); raises ValueError when unreadable.
        """
        try:
            with Image.open(io.BytesIO(raw)) as img:
                mime_type = Image.MIME.get(img.format or "", "image/png")
                size = img.size
                img.verify()
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
        ) as exc:
            raise ValueError(f"Unreadable image data: {exc}") from exc
        return mime_type, size

    def from_bytes(self, raw: bytes, mime_type: str = "image/png") -> ImageItem:
        """Serialize raw image bytes into a base64-encoded ImageItem."""
        return ImageItem(mime_type=mime_type, data_b64=self.encode_b64(raw))

    def from_pil(self, img: Image.Image, fmt: str = "PNG") -> ImageItem:
        """Serialize a PIL image into base64-encoded ImageItem."""
        buf = io.BytesIO()
        img.save(buf, format=fmt)
        return self.from_bytes(buf.getvalue(), mime_type=f"image/{fmt.lower()}")
