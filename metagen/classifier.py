"""Maps resource file names to file types."""

from .manifest import ExtensionMapping, FileType

# Declaration order matters: first match wins, so a compound suffix must be
# listed before any shorter suffix it overlaps with.
CLASSIFICATION_RULES: tuple[ExtensionMapping, ...] = (
    ExtensionMapping(".cs", FileType.CSHARP),
    ExtensionMapping(".dll", FileType.COMPILED),
    ExtensionMapping(".pdb", FileType.IGNORE),
    ExtensionMapping(".config", FileType.IGNORE),
    ExtensionMapping(".js.map", FileType.IGNORE),
    ExtensionMapping(".js", FileType.JAVASCRIPT),
    ExtensionMapping(".ts", FileType.IGNORE),
    ExtensionMapping(".scss", FileType.IGNORE),
)

DEFAULT_MAPPING = ExtensionMapping("*.*", FileType.FILE)


def get_mapping(file_name: str) -> ExtensionMapping:
    """Return the first rule matching the file name, or the default rule."""
    for mapping in CLASSIFICATION_RULES:
        if mapping.matches(file_name):
            return mapping
    return DEFAULT_MAPPING


def classify(file_name: str) -> FileType:
    return get_mapping(file_name).file_type
