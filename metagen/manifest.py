"""Data contracts for the resource manifest."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum

MANIFEST_FILE_NAME = "meta.xml"
ROOT_TAG = "meta"


class FileType(Enum):
    """Category a resource file is classified into."""
    COMPILED = "compiled"
    CSHARP = "csharp"
    JAVASCRIPT = "javascript"
    IGNORE = "ignore"
    FILE = "file"


# file type -> (script target environment, script language)
SCRIPT_TARGETS: dict[FileType, tuple[str, str]] = {
    FileType.COMPILED: ("server", "compiled"),
    FileType.CSHARP: ("server", "csharp"),
    FileType.JAVASCRIPT: ("client", "javascript"),
}


@dataclass(frozen=True)
class ExtensionMapping:
    """Suffix rule mapping matching file names to a file type."""
    extension: str
    file_type: FileType

    def matches(self, file_name: str) -> bool:
        """Case-insensitive test of the end of the file name."""
        return file_name.lower().endswith(self.extension.lower())


@dataclass(frozen=True)
class ManifestEntry:
    """A generated <script> or <file> record for one resource file."""
    tag: str
    src: str
    type: str | None = None
    lang: str | None = None

    @classmethod
    def for_file(cls, src: str, file_type: FileType) -> "ManifestEntry | None":
        """Build the entry for a classified file, or None if it is ignored."""
        if file_type in SCRIPT_TARGETS:
            target, lang = SCRIPT_TARGETS[file_type]
            return cls(tag="script", src=src, type=target, lang=lang)
        if file_type == FileType.FILE:
            return cls(tag="file", src=src)
        return None

    def to_element(self) -> ET.Element:
        element = ET.Element(self.tag, {"src": self.src})
        if self.type is not None:
            element.set("type", self.type)
        if self.lang is not None:
            element.set("lang", self.lang)
        return element


@dataclass
class PreservedContent:
    """Hand-authored parts of a previous manifest, carried forward as-is."""
    nodes: list[ET.Element] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)
    text: str | None = None


@dataclass
class Manifest:
    """Preserved content followed by freshly generated entries."""
    preserved: PreservedContent = field(default_factory=PreservedContent)
    entries: list[ManifestEntry] = field(default_factory=list)

    def to_element(self) -> ET.Element:
        """Assemble a new <meta> root: preserved nodes first, then entries."""
        root = ET.Element(ROOT_TAG, dict(self.preserved.attributes))
        root.text = self.preserved.text
        root.extend(self.preserved.nodes)
        root.extend(entry.to_element() for entry in self.entries)
        return root


@dataclass
class RegenerationResult:
    """Outcome of one run of the regeneration pipeline."""
    success: bool
    manifest_path: str
    entries: int = 0
    preserved: int = 0
    duration: float = 0.0
    error: str | None = None
