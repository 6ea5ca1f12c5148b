"""Option catalogs exposed to clients for rendering the studio inputs."""

from typing import Any, Dict, List

from stylefusion.models.fusion import ROLE_LABELS, ROLE_ORDER, REQUIRED_ROLES


class Options:
    """Provide in-memory lists of selectable inputs for both studio flows.

    Keeps values static per process without persistence.
    """

    def __init__(self):
        """Initialize accepted upload types and text-to-image choices."""
        self.accepted_mime_types = [
            "image/png",
            "image/jpeg",
            "image/webp",
        ]
        self.flags = ["print_quality"]

        self.aspect_ratios = ["1:1", "3:4", "4:3", "9:16", "16:9"]
        self.output_mime_types = ["image/jpeg", "image/png"]
        self.image_counts = [1, 2, 3, 4]

    def get_fusion_options(self) -> Dict[str, Any]:
        """Return image roles, flags and accepted upload types."""
        roles: List[Dict[str, Any]] = [
            {
                "role": role.value,
                "label": ROLE_LABELS[role],
                "required": role in REQUIRED_ROLES,
            }
            for role in ROLE_ORDER
        ]
        return {
            "roles": roles,
            "flags": self.flags,
            "accepted_mime_types": self.accepted_mime_types,
        }

    def get_text_to_image_options(self) -> Dict[str, List[Any]]:
        """Return the configurable text-to-image generation choices."""
        return {
            "aspect_ratios": self.aspect_ratios,
            "output_mime_types": self.output_mime_types,
            "image_counts": self.image_counts,
        }
