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

import pytest

from change_monitor.engine import ChangeBatchingEngine
from change_monitor.reporting import RecordingReportSink

WATCHED_FILES = ['file1.txt', 'file2.txt']


@pytest.fixture
def watch_root(tmp_path):
    """Watch folder with file1.txt = 'a\\nb' and file2.txt = 'x'."""
    root = tmp_path / 'watched'
    root.mkdir()
    (root / 'file1.txt').write_text('a\nb', encoding='utf-8')
    (root / 'file2.txt').write_text('x', encoding='utf-8')
    return root


@pytest.fixture
def sink():
    return RecordingReportSink()


@pytest.fixture
def engine(watch_root, sink):
    engine = ChangeBatchingEngine(watch_root, WATCHED_FILES, sink=sink)
    engine.seed_from_disk()
    return engine
