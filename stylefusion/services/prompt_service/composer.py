"""Deterministic assembly of the style fusion prompt."""

from typing import Mapping

from stylefusion.models.fusion import (
    GenerationFlags,
    ImageRole,
    ImageSlot,
    ROLE_LABELS,
    ROLE_ORDER,
)
from stylefusion.utility.utils import Helper


class PromptComposer:
    """Build the composite prompt from image slots, descriptions and flags.

    Templates are read once at construction; compose() itself does no I/O,
    so identical inputs always give a byte-identical prompt.
    """

    def __init__(self, helper: Helper | None = None):
        """Load the prompt fragments from the template store."""
        helper = helper or Helper()
        self.base = helper.load_template("fusion_base")
        self.pose_clause = helper.load_template("pose_clause")
        self.print_quality = helper.load_template("print_quality")
        self.standard_quality = helper.load_template("standard_quality")
        self.description_header = helper.load_template("description_header")
        self.description_line = helper.load_template("description_line")

    def describe(self, descriptions: Mapping[ImageRole, str]) -> str:
        """Return the labeled description lines for roles with non-empty text."""
        lines = [
            self.description_line.format(label=ROLE_LABELS[role], text=text)
            for role in ROLE_ORDER
            if (text := descriptions.get(role, ""))
        ]
        return "\n".join(lines)

    def compose(
        self,
        slots: Mapping[ImageRole, ImageSlot],
        descriptions: Mapping[ImageRole, str],
        flags: GenerationFlags,
    ) -> str:
        summary = self.base

        pose = slots.get(ImageRole.POSE)
        if pose is not None and pose.is_populated:
            summary += f" {self.pose_clause}"

        if flags.print_quality:
            summary += f" {self.print_quality}"
        else:
            summary += f" {self.standard_quality}"

        described = self.describe(descriptions)
        if described:
            summary += f"\n\n{self.description_header}\n{described}"

        return summary.strip()
