"""Deterministic depth-first walk over the files of a watch root."""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


def _list_directory(directory: Path) -> tuple[list[Path], list[Path]]:
    """Split a directory's entries into files and subdirectories, sorted case-insensitively."""
    files: list[Path] = []
    subdirs: list[Path] = []
    with os.scandir(directory) as entries:
        for entry in sorted(entries, key=lambda e: (e.name.lower(), e.name)):
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(Path(entry.path))
                elif entry.is_file():
                    files.append(Path(entry.path))
            except OSError as e:
                logger.warning("Skipping %s: %s", entry.path, e)
    return files, subdirs


def iter_files(root: Path) -> Iterator[Path]:
    """
    Lazily yield every regular file under root.

    Each directory yields its own files before descending into its
    subdirectories, and a subdirectory is exhausted before its next sibling
    is visited. Directories that cannot be listed are logged and skipped.
    Symlinked directories are not followed.
    """
    stack: list[Path] = [Path(root)]

    while stack:
        current = stack.pop()
        try:
            files, subdirs = _list_directory(current)
        except OSError as e:
            logger.warning("Skipping directory %s: %s", current, e)
            continue

        yield from files
        stack.extend(reversed(subdirs))
