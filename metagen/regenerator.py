"""The regeneration pipeline: walk, classify, merge, build, write."""

import logging
import time
from pathlib import Path

from .builder import build_manifest
from .exceptions import ManifestParseError, ManifestWriteError
from .manifest import MANIFEST_FILE_NAME, RegenerationResult
from .merger import load_preserved
from .walker import iter_files
from .writer import write_manifest

logger = logging.getLogger(__name__)


def regenerate_manifest(root: Path, manifest_path: Path | None = None) -> RegenerationResult:
    """
    Regenerate the manifest for root and report the outcome.

    Parse and write failures are logged and returned as a failed result;
    when the existing manifest cannot be parsed it is left untouched.
    """
    start = time.perf_counter()
    root = Path(root)
    if manifest_path is None:
        manifest_path = root / MANIFEST_FILE_NAME

    logger.info("Regenerating meta file.")

    try:
        preserved = load_preserved(manifest_path)
    except ManifestParseError as e:
        logger.error("%s; leaving it untouched", e)
        return RegenerationResult(success=False, manifest_path=str(manifest_path), error=str(e))

    manifest = build_manifest(preserved, iter_files(root), root, manifest_path)

    logger.info("Writing XML file to: %s", manifest_path)
    try:
        write_manifest(manifest, manifest_path)
    except ManifestWriteError as e:
        logger.error(str(e))
        return RegenerationResult(success=False, manifest_path=str(manifest_path), error=str(e))

    duration = time.perf_counter() - start
    logger.info("Done regenerating.")
    logger.debug("Regeneration took %.3fs", duration)

    return RegenerationResult(
        success=True,
        manifest_path=str(manifest_path),
        entries=len(manifest.entries),
        preserved=len(preserved.nodes),
        duration=duration,
    )
