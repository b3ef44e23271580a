"""Metagen - keeps a resource directory's meta.xml in sync with its files."""

from .classifier import classify
from .config import WatchConfig
from .exceptions import InvalidRootError, ManifestParseError, ManifestWriteError, MetaGenError
from .manifest import FileType, Manifest, ManifestEntry, PreservedContent, RegenerationResult
from .regenerator import regenerate_manifest
from .scheduler import DebounceScheduler, SchedulerState
from .watcher import ResourceWatcher

__all__ = [
    "classify",
    "WatchConfig",
    "MetaGenError",
    "InvalidRootError",
    "ManifestParseError",
    "ManifestWriteError",
    "FileType",
    "Manifest",
    "ManifestEntry",
    "PreservedContent",
    "RegenerationResult",
    "regenerate_manifest",
    "DebounceScheduler",
    "SchedulerState",
    "ResourceWatcher",
]
