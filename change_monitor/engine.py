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
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from .collector import ChangeCollector
from .content_store import ContentStore
from .flusher import Flusher, FlushState
from .models import ChangeKind, FlushReport
from .reporting import LoggingReportSink, ReportSink

logger = logging.getLogger(__name__)


class ChangeBatchingEngine:
    """Owns the pending-change batch, the content snapshots and their lock.

    Watchers feed it through collect_change(); a timer drives flush().

    Example:
        engine = ChangeBatchingEngine(Path('/data/watched'), ['file1.txt'])
        engine.seed_from_disk()
        engine.collect_change('file1.txt', ChangeKind.modified)
        report = engine.flush()
    """

    def __init__(
        self,
        watch_root: str | Path,
        watched_files: Iterable[str],
        sink: ReportSink | None = None,
    ):
        self._watch_root = Path(watch_root)
        self._watched_files = list(dict.fromkeys(watched_files))
        self.sink: ReportSink = sink or LoggingReportSink()

        self._lock = threading.Lock()
        self._store = ContentStore()
        self._collector = ChangeCollector(self._watched_files, lock=self._lock)
        self._flusher = Flusher(
            self._collector, self._store, self._watch_root, self.sink, lock=self._lock
        )

    @property
    def watch_root(self) -> Path:
        return self._watch_root

    @property
    def watched_files(self) -> list[str]:
        return list(self._watched_files)

    @property
    def has_nested_files(self) -> bool:
        """True when a watched name lives in a subdirectory of the watch root."""
        return any('/' in name for name in self._watched_files)

    @property
    def store(self) -> ContentStore:
        return self._store

    @property
    def flusher(self) -> Flusher:
        return self._flusher

    @property
    def pending_count(self) -> int:
        return self._collector.pending_count

    @property
    def state(self) -> FlushState:
        return self._flusher.state

    def collect_change(
        self,
        file_name: str,
        change_kind: ChangeKind | str,
        detected_at: datetime | None = None,
    ) -> bool:
        """Ingest one change notification. Safe to call from any thread."""
        return self._collector.collect(file_name, change_kind, detected_at)

    def flush(self) -> FlushReport | None:
        return self._flusher.flush()

    def seed(self, file_name: str, text: str) -> None:
        """Record a baseline snapshot before monitoring starts."""
        with self._lock:
            self._store.set(file_name, text)

    def seed_from_disk(self) -> list[str]:
        """Capture the initial content of every watched file that exists.

        Unreadable files are reported to the sink and left without a
        baseline.

        Returns:
            Names of the files that were seeded
        """
        seeded: list[str] = []
        for file_name in self._watched_files:
            path = self._watch_root / file_name
            if not path.exists():
                continue
            try:
                text = path.read_text(encoding='utf-8')
            except (OSError, UnicodeDecodeError) as e:
                self.sink.report_error(file_name, str(e))
                continue
            self.seed(file_name, text)
            seeded.append(file_name)

        logger.debug(f'Seeded {len(seeded)} of {len(self._watched_files)} watched files')
        return seeded
