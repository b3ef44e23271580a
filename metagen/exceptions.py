"""Exception hierarchy for manifest generation.

Only ``InvalidRootError`` prevents a watch session from starting. The
manifest errors fail a single regeneration attempt and are reported by the
pipeline; the watch session carries on.
"""

from pathlib import Path


class MetaGenError(Exception):
    """Base exception for the whole package."""


class InvalidRootError(MetaGenError):
    """The watch root does not exist or is not a directory."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Invalid path: {path}")


class ManifestParseError(MetaGenError):
    """The existing manifest is not a well-formed XML document."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse manifest {path}: {reason}")


class ManifestWriteError(MetaGenError):
    """The manifest could not be written to disk."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write manifest {path}: {reason}")
