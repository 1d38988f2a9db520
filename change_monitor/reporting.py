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
from typing import Protocol

from .models import FileFlushResult, FileStatus

logger = logging.getLogger(__name__)


class ReportSink(Protocol):
    """Destination for diff results, per-file errors and lifecycle notices."""

    def report_file(self, result: FileFlushResult) -> None: ...

    def report_error(self, file_name: str, error: str) -> None: ...

    def notice(self, message: str) -> None: ...


class LoggingReportSink:
    """Writes reports through the logging module."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def report_file(self, result: FileFlushResult) -> None:
        if result.status == FileStatus.changed:
            self.log.info(f'{result.file_name}: {len(result.added_lines)} added line(s)')
            for line in result.added_lines:
                self.log.info(f'  + {line}')
        elif result.status == FileStatus.unchanged:
            self.log.info(f'{result.file_name}: no content change')
        elif result.status == FileStatus.baseline:
            self.log.info(f'{result.file_name}: captured baseline content')
        else:
            self.report_error(result.file_name, result.error or 'unknown error')

    def report_error(self, file_name: str, error: str) -> None:
        self.log.warning(f'Could not read {file_name}: {error}')

    def notice(self, message: str) -> None:
        self.log.info(message)


class RecordingReportSink:
    """Keeps every report in memory."""

    def __init__(self):
        self._lock = threading.Lock()
        self.results: list[FileFlushResult] = []
        self.errors: list[tuple[str, str]] = []
        self.notices: list[str] = []

    def report_file(self, result: FileFlushResult) -> None:
        with self._lock:
            self.results.append(result)

    def report_error(self, file_name: str, error: str) -> None:
        with self._lock:
            self.errors.append((file_name, error))

    def notice(self, message: str) -> None:
        with self._lock:
            self.notices.append(message)
