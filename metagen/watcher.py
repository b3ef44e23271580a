"""Watch session: filesystem events feeding the regeneration scheduler."""

import asyncio
import logging
import os
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .config import WatchConfig
from .exceptions import InvalidRootError
from .manifest import MANIFEST_FILE_NAME, RegenerationResult
from .regenerator import regenerate_manifest
from .scheduler import DebounceScheduler, SchedulerState
from .writer import is_temp_file


@dataclass(frozen=True)
class ChangeEvent:
    """A filesystem change observed under the watch root."""
    path: str
    change_type: str


class ManifestEventHandler(FileSystemEventHandler):
    """
    Forwards created, deleted and moved events to a callback.

    Runs on watchdog's observer thread, so the callback must be thread-safe.
    Events originating from the temporary files used to write the manifest
    are dropped; otherwise every manifest write would trigger another one.
    """

    def __init__(self, manifest_path: Path, callback: Callable[[ChangeEvent], None]) -> None:
        self.manifest_path = manifest_path
        self._callback = callback

    def _forward(self, event: FileSystemEvent) -> None:
        src_path = os.fsdecode(event.src_path)
        if is_temp_file(Path(src_path), self.manifest_path):
            return
        path = os.fsdecode(event.dest_path) if event.event_type == "moved" else src_path
        self._callback(ChangeEvent(path=path, change_type=event.event_type))

    def on_created(self, event: FileSystemEvent) -> None:
        self._forward(event)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._forward(event)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._forward(event)


class ResourceWatcher:
    """Keeps the manifest of one directory tree up to date while watching it."""

    MAX_RESULTS: int = 50

    def __init__(
        self,
        root: Path | str,
        config: WatchConfig | None = None,
        observer_factory: Callable[[], Observer] = Observer,
    ) -> None:
        path = Path(root)
        if not path.is_dir():
            raise InvalidRootError(root)

        self.root = path.resolve()
        self.manifest_path = self.root / MANIFEST_FILE_NAME
        self.config = config or WatchConfig()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.results: deque[RegenerationResult] = deque(maxlen=self.MAX_RESULTS)

        self._observer_factory = observer_factory
        self._observer: Observer | None = None
        self._scheduler: DebounceScheduler | None = None
        self._events: asyncio.Queue[ChangeEvent] | None = None
        self._consumer: asyncio.Task | None = None
        self._stopped: asyncio.Event | None = None
        self._stop_task: asyncio.Task | None = None

    @property
    def scheduler(self) -> DebounceScheduler | None:
        return self._scheduler

    @property
    def state(self) -> SchedulerState | None:
        return self._scheduler.state if self._scheduler else None

    async def regenerate(self) -> RegenerationResult:
        """Run the pipeline once in a worker thread."""
        result = await asyncio.to_thread(regenerate_manifest, self.root, self.manifest_path)
        self.results.append(result)
        return result

    async def start_watch(self) -> None:
        """Watch the root, regenerating on changes, until stop_watch() completes."""
        if self._stopped is not None:
            raise RuntimeError("Watch session already started")

        loop = asyncio.get_running_loop()
        self._stopped = asyncio.Event()
        self._events = asyncio.Queue()
        self._scheduler = DebounceScheduler(self.regenerate, self.config.quiet_period)

        def enqueue(event: ChangeEvent) -> None:
            loop.call_soon_threadsafe(self._events.put_nowait, event)

        handler = ManifestEventHandler(self.manifest_path, enqueue)
        self._observer = self._observer_factory()
        self._observer.schedule(handler, str(self.root), recursive=True)
        self._observer.start()

        self.logger.info("Watching directory: %s", self.root)

        self._consumer = loop.create_task(self._consume_events())
        self._scheduler.notify()

        await self._stopped.wait()

    async def _consume_events(self) -> None:
        while True:
            event = await self._events.get()
            self.logger.info("File changed: %s, change type: %s", event.path, event.change_type)
            self._scheduler.notify()

    async def stop_watch(self) -> None:
        """Tear down the subscription and wait for any active regeneration.

        Concurrent callers all wait for the same teardown to finish.
        """
        if self._stopped is None:
            return
        if self._stop_task is None:
            self._stop_task = asyncio.get_running_loop().create_task(self._teardown())
        await asyncio.shield(self._stop_task)

    async def _teardown(self) -> None:
        observer = self._observer
        if observer is not None:
            observer.stop()
            await asyncio.to_thread(observer.join)

        if self._consumer is not None:
            self._consumer.cancel()
            try:
                await self._consumer
            except asyncio.CancelledError:
                pass

        await self._scheduler.stop()
        self.logger.info("Stopped watching directory: %s", self.root)
        self._stopped.set()
