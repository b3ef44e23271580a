"""Loads the hand-authored content of an existing manifest."""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from .exceptions import ManifestParseError
from .manifest import PreservedContent

logger = logging.getLogger(__name__)

# "assembly" is no longer emitted but older manifests may still carry it.
GENERATED_TAG_NAMES: tuple[str, ...] = ("script", "assembly", "file")


def _local_name(tag: str) -> str:
    """Strip a '{namespace}' prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def is_generated_node(node: ET.Element) -> bool:
    """True if the node is an element previously written by this tool."""
    if not isinstance(node.tag, str):
        # comments and processing instructions
        return False
    name = _local_name(node.tag).lower()
    return name in GENERATED_TAG_NAMES


def _parse(manifest_path: Path) -> ET.Element:
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
    try:
        return ET.parse(manifest_path, parser=parser).getroot()
    except ET.ParseError as e:
        raise ManifestParseError(manifest_path, str(e)) from e
    except OSError as e:
        raise ManifestParseError(manifest_path, e.strerror or str(e)) from e


def load_preserved(manifest_path: Path) -> PreservedContent:
    """
    Return every top-level node of the manifest that this tool did not generate.

    A missing manifest yields empty content. An unreadable or malformed one
    raises ManifestParseError so the caller does not overwrite it.
    """
    if not manifest_path.is_file():
        return PreservedContent()

    root = _parse(manifest_path)
    nodes = [node for node in root if not is_generated_node(node)]
    text = root.text if root.text and root.text.strip() else None

    dropped = len(root) - len(nodes)
    logger.debug("Preserving %d node(s), dropping %d generated node(s)", len(nodes), dropped)

    return PreservedContent(nodes=nodes, attributes=dict(root.attrib), text=text)
