"""Combines preserved manifest content with entries for the current files."""

import logging
from collections.abc import Iterable
from pathlib import Path

from .classifier import get_mapping
from .manifest import Manifest, ManifestEntry, PreservedContent
from .writer import is_temp_file

logger = logging.getLogger(__name__)


def relative_src(path: Path, root: Path) -> str:
    """Root-relative path with forward slashes and no leading slash."""
    return path.relative_to(root).as_posix().lstrip("/")


def build_manifest(
    preserved: PreservedContent,
    files: Iterable[Path],
    root: Path,
    manifest_path: Path,
) -> Manifest:
    """Create one entry per non-ignored file, in walk order, after the preserved content."""
    entries: list[ManifestEntry] = []

    for path in files:
        if path == manifest_path or is_temp_file(path, manifest_path):
            continue

        mapping = get_mapping(path.name)
        src = relative_src(path, root)
        logger.debug("Creating node for file: %s, mapping type: %s", src, mapping.file_type.name)

        entry = ManifestEntry.for_file(src, mapping.file_type)
        if entry is not None:
            entries.append(entry)

    return Manifest(preserved=preserved, entries=entries)
