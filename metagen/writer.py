"""Serializes a manifest and atomically replaces the file on disk."""

import logging
import os
import stat
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path

from .exceptions import ManifestWriteError
from .manifest import Manifest

logger = logging.getLogger(__name__)

INDENT = "  "
TEMP_SUFFIX = ".tmp"


def temp_prefix(manifest_path: Path) -> str:
    """Prefix of the temporary files written next to the manifest."""
    return f".{manifest_path.name}."


def is_temp_file(path: Path, manifest_path: Path) -> bool:
    """True for a temporary write file of this manifest, finished or left behind."""
    return (
        path.parent == manifest_path.parent
        and path.name.startswith(temp_prefix(manifest_path))
        and path.name.endswith(TEMP_SUFFIX)
    )


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def target_mode(manifest_path: Path) -> int:
    """Permission bits the rewritten manifest should carry.

    An existing manifest keeps its mode; a new one gets the umask default
    a plain open() would give it.
    """
    try:
        return stat.S_IMODE(manifest_path.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_current_umask()


def serialize_manifest(manifest: Manifest) -> bytes:
    """Indented UTF-8 XML without an XML declaration."""
    root = manifest.to_element()
    ET.indent(root, space=INDENT)
    return ET.tostring(root, encoding="utf-8", xml_declaration=False) + b"\n"


def write_manifest(manifest: Manifest, manifest_path: Path) -> None:
    """Replace the file at manifest_path with the serialized manifest."""
    data = serialize_manifest(manifest)
    tmp_name: str | None = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=manifest_path.parent,
            prefix=temp_prefix(manifest_path),
            suffix=TEMP_SUFFIX,
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, target_mode(manifest_path))
        os.replace(tmp_name, manifest_path)
    except OSError as e:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
        raise ManifestWriteError(manifest_path, e.strerror or str(e)) from e

    logger.debug("Wrote %d bytes to %s", len(data), manifest_path)
