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
from dataclasses import dataclass, field
from datetime import datetime

from .models import ChangeKind, PendingChange, utc_now

logger = logging.getLogger(__name__)

DedupKey = tuple[str, ChangeKind]


@dataclass
class Batch:
    """Pending changes and their dedup keys, detached as one unit."""

    changes: list[PendingChange] = field(default_factory=list)
    keys: set[DedupKey] = field(default_factory=set)

    def __len__(self) -> int:
        return len(self.changes)


class ChangeCollector:
    """Accumulates change notifications for the next flush.

    Called from watcher threads, so every mutation happens under the shared
    lock. A (file, change kind) pair is queued at most once per batch.
    """

    def __init__(self, watched_files: Iterable[str], lock: 'threading.Lock | None' = None):
        """Initialize change collector.

        Args:
            watched_files: File names, relative to the watch root, to accept
            lock: Lock shared with the flusher and content store updates
        """
        self._watched = frozenset(watched_files)
        self._lock = lock if lock is not None else threading.Lock()
        self._batch = Batch()

    @property
    def watched_files(self) -> frozenset[str]:
        return self._watched

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._batch)

    def collect(
        self,
        file_name: str,
        change_kind: ChangeKind | str,
        detected_at: datetime | None = None,
    ) -> bool:
        """Queue a change unless it is unwatched or already queued.

        Args:
            file_name: File name relative to the watch root
            change_kind: Kind of change reported by the watcher
            detected_at: Detection time, defaults to now

        Returns:
            True if a new pending change was queued
        """
        if file_name not in self._watched:
            return False

        try:
            kind = ChangeKind(change_kind)
        except ValueError:
            logger.debug(f'Ignoring unknown change kind {change_kind!r} for {file_name}')
            return False

        key = (file_name, kind)
        with self._lock:
            if key in self._batch.keys:
                return False
            self._batch.keys.add(key)
            self._batch.changes.append(
                PendingChange(
                    file_name=file_name,
                    change_kind=kind,
                    detected_at=detected_at or utc_now(),
                )
            )
        return True

    def detach(self) -> Batch:
        """Take ownership of the current batch, leaving an empty one behind."""
        with self._lock:
            batch = self._batch
            self._batch = Batch()
        return batch
