"""
Copyright 2024, Zep Software, Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import logging
import threading
from enum import Enum
from pathlib import Path

from .collector import ChangeCollector
from .content_store import ContentStore
from .diff import compute_added_lines
from .models import FileFlushResult, FileStatus, FlushReport, PendingChange, utc_now
from .reporting import ReportSink

logger = logging.getLogger(__name__)


class FlushState(str, Enum):
    idle = 'idle'
    flushing = 'flushing'


class Flusher:
    """Drains the collector and reports what changed in each file.

    Only one flush runs at a time. A flush requested while another is in
    progress is skipped rather than queued; the running flush already owns
    everything collected up to its detach, and anything collected later is
    picked up by the next tick.
    """

    def __init__(
        self,
        collector: ChangeCollector,
        store: ContentStore,
        watch_root: Path,
        sink: ReportSink,
        lock: threading.Lock,
    ):
        """Initialize flusher.

        Args:
            collector: Source of pending changes
            store: Snapshots used as the diff baseline
            watch_root: Directory the watched file names are relative to
            sink: Destination for per-file results and notices
            lock: Lock shared with the collector, guards store access
        """
        self.collector = collector
        self.store = store
        self.watch_root = Path(watch_root)
        self.sink = sink
        self._lock = lock
        self._guard = threading.Lock()
        self._state = FlushState.idle
        self.flush_count = 0
        self.skipped_ticks = 0

    @property
    def state(self) -> FlushState:
        return self._state

    def flush(self) -> FlushReport | None:
        """Process every change collected since the previous flush.

        Returns:
            FlushReport for a non-empty batch, None when the batch was empty
            or another flush was already running
        """
        if not self._guard.acquire(blocking=False):
            self.skipped_ticks += 1
            logger.debug('Flush already in progress, skipping tick')
            return None

        try:
            self._state = FlushState.flushing
            batch = self.collector.detach()
            if not batch:
                return None

            report = FlushReport()
            self.sink.notice(f'Processing {len(batch)} change(s)')
            for change in batch.changes:
                result = self._process_change(change)
                report.results.append(result)
                self.sink.report_file(result)

            report.finished_at = utc_now()
            self.flush_count += 1
            self.sink.notice(
                f'Flush complete: {len(report.changed_files)} changed, '
                f'{len(report.failed_files)} failed'
            )
            return report
        finally:
            self._state = FlushState.idle
            self._guard.release()

    def _process_change(self, change: PendingChange) -> FileFlushResult:
        file_name = change.file_name
        try:
            current = (self.watch_root / file_name).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f'Read failed for {file_name} ({change.change_kind.value}): {e}')
            return FileFlushResult(file_name=file_name, status=FileStatus.error, error=str(e))

        with self._lock:
            previous = self.store.get(file_name)

        if previous:
            diff = compute_added_lines(previous, current)
            if diff.unchanged:
                result = FileFlushResult(file_name=file_name, status=FileStatus.unchanged)
            else:
                result = FileFlushResult(
                    file_name=file_name,
                    status=FileStatus.changed,
                    added_lines=diff.added_lines,
                )
        else:
            result = FileFlushResult(file_name=file_name, status=FileStatus.baseline)

        with self._lock:
            self.store.set(file_name, current)

        return result
