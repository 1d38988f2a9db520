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

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChangeKind(str, Enum):
    """Classification of a filesystem notification."""

    modified = 'modified'
    created = 'created'
    deleted = 'deleted'


class FileStatus(str, Enum):
    """Outcome of processing one pending change during a flush."""

    changed = 'changed'
    unchanged = 'unchanged'
    baseline = 'baseline'  # no previous snapshot to compare against
    error = 'error'


class PendingChange(BaseModel):
    """A change notification queued for the next flush."""

    model_config = ConfigDict(frozen=True)

    file_name: str = Field(description='file name relative to the watch root')
    change_kind: ChangeKind = Field(description='kind of change reported by the watcher')
    detected_at: datetime = Field(
        default_factory=utc_now, description='when the notification was collected'
    )

    @property
    def dedup_key(self) -> tuple[str, ChangeKind]:
        return self.file_name, self.change_kind


class FileFlushResult(BaseModel):
    file_name: str
    status: FileStatus
    added_lines: list[str] = Field(default_factory=list)
    error: str | None = None


class FlushReport(BaseModel):
    """Everything one flush did, in buffer order."""

    started_at: datetime = Field(default_factory=utc_now)
    finished_at: datetime | None = None
    results: list[FileFlushResult] = Field(default_factory=list)

    @property
    def changed_files(self) -> list[str]:
        return [r.file_name for r in self.results if r.status == FileStatus.changed]

    @property
    def failed_files(self) -> list[str]:
        return [r.file_name for r in self.results if r.status == FileStatus.error]
