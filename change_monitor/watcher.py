"""File watching with interval-batched change reports.

This module monitors the watch root with the Watchdog library, feeds change
notifications for the configured files into a ChangeBatchingEngine and
flushes the engine on a fixed interval.

Architecture:
    Observer Thread (Watchdog):
        - Monitors the watch root, recursively only when a watched name
          lives in a subdirectory
        - Maps modified/created/deleted/moved events to change kinds
        - Hands each event to the engine's thread-safe ingestion entry point

    Async Flush Task:
        - Flushes immediately on start, then every flush_interval seconds
        - Runs each flush in a worker thread so file reads never block the loop
        - Overlapping flushes are skipped by the engine

    Shutdown:
        - Observer is stopped and joined
        - The flush task is signalled and awaited, so an in-flight flush
          finishes before the timer is released

Manual Flush:
    Call trigger_flush() to process queued changes without waiting for the
    next tick.
"""

import asyncio
import logging
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from .engine import ChangeBatchingEngine
from .errors import WatchRootError
from .models import ChangeKind, FlushReport

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_INTERVAL = 5.0


class WatchedFileHandler(FileSystemEventHandler):
    """Translates watchdog events into engine change notifications."""

    def __init__(self, engine: ChangeBatchingEngine):
        """Initialize file handler.

        Args:
            engine: Engine receiving the change notifications
        """
        self.engine = engine
        self.root = engine.watch_root.resolve()

    def _file_name(self, path: str | bytes) -> str | None:
        if isinstance(path, bytes):
            path = path.decode()
        try:
            return Path(path).resolve().relative_to(self.root).as_posix()
        except ValueError:
            return None

    def _collect(self, path: str | bytes, kind: ChangeKind):
        file_name = self._file_name(path)
        if file_name is not None:
            self.engine.collect_change(file_name, kind)

    def on_modified(self, event: FileSystemEvent):
        if event.is_directory:
            return
        self._collect(event.src_path, ChangeKind.modified)

    def on_created(self, event: FileSystemEvent):
        if event.is_directory:
            return
        self._collect(event.src_path, ChangeKind.created)

    def on_deleted(self, event: FileSystemEvent):
        if event.is_directory:
            return
        self._collect(event.src_path, ChangeKind.deleted)

    def on_moved(self, event: FileSystemEvent):
        """Handle file rename/move events.

        Editors that save through a temporary file show up as a move onto the
        watched name, so the destination counts as created and the source as
        deleted.
        """
        if event.is_directory:
            return
        self._collect(event.src_path, ChangeKind.deleted)
        self._collect(event.dest_path, ChangeKind.created)


class ChangeMonitor:
    """Watches the configured files and flushes change reports periodically."""

    def __init__(
        self,
        engine: ChangeBatchingEngine,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
        observer: BaseObserver | None = None,
    ):
        """Initialize change monitor.

        Args:
            engine: Engine holding the batch and content snapshots
            flush_interval: Seconds between flushes (default: 5.0)
            observer: Watchdog observer, a platform default when omitted
        """
        self.engine = engine
        self.flush_interval = flush_interval
        self.observer = observer or Observer()
        self.flush_task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None
        self._running = False

    def start(self, loop: asyncio.AbstractEventLoop):
        """Start the file observer and the periodic flush task.

        Args:
            loop: Event loop to run the flush task in
        """
        if self._running:
            logger.warning('Change monitor already running')
            return

        root = self.engine.watch_root
        if not root.is_dir():
            raise WatchRootError(str(root))

        self._running = True
        self._stop_event = asyncio.Event()

        self.observer.schedule(
            WatchedFileHandler(self.engine), str(root), recursive=self.engine.has_nested_files
        )
        self.observer.start()

        self.flush_task = loop.create_task(self._periodic_flush())
        logger.info(
            f'Watching {len(self.engine.watched_files)} file(s) in {root} '
            f'(flush interval: {self.flush_interval:.1f}s)'
        )

    async def stop(self):
        """Stop the observer and wait for the flush task to finish."""
        if not self._running:
            return

        self._running = False

        self.observer.stop()
        self.observer.join()

        if self._stop_event is not None:
            self._stop_event.set()
        if self.flush_task:
            await self.flush_task
            self.flush_task = None

        logger.info('Change monitor stopped')

    def is_running(self) -> bool:
        return self._running

    async def _periodic_flush(self):
        """Background task: flush, then wait for the next tick or stop."""
        while self._running:
            try:
                await asyncio.to_thread(self.engine.flush)
            except Exception as e:
                logger.error(f'Error flushing changes: {e}')

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.flush_interval)
            except asyncio.TimeoutError:
                continue

    async def trigger_flush(self) -> FlushReport | None:
        """Manually flush queued changes."""
        return await asyncio.to_thread(self.engine.flush)
