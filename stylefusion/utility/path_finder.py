"""Resolve important filesystem paths relative to the project root."""

from pathlib import Path


class PathResolver:
    """
    Folder resolver that returns paths relative to the project root,
    independent of the current working directory.
    """

    # utility -> stylefusion -> project root
    PROJECT_ROOT = Path(__file__).resolve().parents[2]
    PACKAGE_ROOT = Path(__file__).resolve().parents[1]

    DIR_MAP = {
        "data": PROJECT_ROOT / "data",
        "logs": PROJECT_ROOT / "data" / "logs",
        "config": PACKAGE_ROOT / "config",
        "templates": PACKAGE_ROOT / "config" / "templates.yml",
        "root": PROJECT_ROOT,
    }

    @classmethod
    def get(cls, name: str) -> Path:
        """
        Returns absolute path from name key.
        Ensures directory exists if it's a folder.
        """
        if name not in cls.DIR_MAP:
            raise KeyError(
                f"Unknown directory key: '{name}'. Valid keys: {list(cls.DIR_MAP.keys())}"
            )

        path = cls.DIR_MAP[name]

        if path.suffix == "":
            path.mkdir(parents=True, exist_ok=True)

        return path


class Finder:
    """Thin wrapper exposing resolved directories for external callers."""

    def get_directory(self, name: str) -> Path:
        """Return a resolved, ensured directory path by logical name."""
        return PathResolver.get(name)
