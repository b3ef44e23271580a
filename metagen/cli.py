"""Command line entry point."""

import argparse
import asyncio
import logging
import signal
import sys
from collections.abc import Callable
from pathlib import Path

from .config import WatchConfig
from .exceptions import InvalidRootError
from .manifest import MANIFEST_FILE_NAME
from .regenerator import regenerate_manifest
from .watcher import ResourceWatcher

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def choose_directory() -> Path | None:
    """Ask the user for a directory to watch. Returns None if cancelled."""
    import tkinter as tk
    from tkinter import filedialog

    root = tk.Tk()
    root.withdraw()
    try:
        selected = filedialog.askdirectory(title="Select a resource directory to watch")
    finally:
        root.destroy()
    return Path(selected) if selected else None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metagen",
        description=f"Watch a resource directory and keep its {MANIFEST_FILE_NAME} up to date.",
    )
    parser.add_argument("path", nargs="?", help="Directory to watch (prompts if omitted)")
    parser.add_argument("--once", action="store_true", help="Regenerate the manifest once and exit")
    parser.add_argument(
        "--quiet-period", type=int, metavar="MS",
        help="Delay after the last change before regenerating",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every file as it is classified")
    return parser


def _stop_requester(loop: asyncio.AbstractEventLoop, watcher: ResourceWatcher) -> Callable[[], None]:
    """Callback that schedules stop_watch, keeping the task referenced until done."""
    stop_tasks: set[asyncio.Task] = set()

    def request_stop() -> None:
        task = loop.create_task(watcher.stop_watch())
        stop_tasks.add(task)
        task.add_done_callback(stop_tasks.discard)

    return request_stop


def _install_stop_handler(loop: asyncio.AbstractEventLoop, watcher: ResourceWatcher) -> None:
    request_stop = _stop_requester(loop, watcher)

    try:
        loop.add_signal_handler(signal.SIGINT, request_stop)
    except NotImplementedError:
        # Windows event loops have no add_signal_handler
        signal.signal(signal.SIGINT, lambda *_: loop.call_soon_threadsafe(request_stop))


async def watch_directory(watcher: ResourceWatcher) -> None:
    _install_stop_handler(asyncio.get_running_loop(), watcher)
    await watcher.start_watch()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = WatchConfig.load()
    if args.quiet_period is not None:
        config.quiet_period_ms = args.quiet_period

    configure_logging("DEBUG" if args.verbose else config.log_level)

    path = Path(args.path) if args.path else choose_directory()
    if path is None:
        return 0

    try:
        watcher = ResourceWatcher(path, config)
    except InvalidRootError as e:
        logger.error(str(e))
        return 1

    if args.once:
        result = regenerate_manifest(watcher.root, watcher.manifest_path)
        return 0 if result.success else 1

    asyncio.run(watch_directory(watcher))
    return 0


if __name__ == "__main__":
    sys.exit(main())
