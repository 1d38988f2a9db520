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

import threading

from change_monitor.content_store import ContentStore
from change_monitor.engine import ChangeBatchingEngine
from change_monitor.models import ChangeKind
from change_monitor.reporting import LoggingReportSink


def test_content_store_get_set():
    store = ContentStore()
    assert store.get('file1.txt') is None
    assert 'file1.txt' not in store

    store.set('file1.txt', 'a')
    store.set('file1.txt', 'b')

    assert store.get('file1.txt') == 'b'
    assert 'file1.txt' in store
    assert len(store) == 1
    assert store.snapshot() == {'file1.txt': 'b'}


def test_seed_from_disk_skips_missing_files(watch_root, sink):
    engine = ChangeBatchingEngine(watch_root, ['file1.txt', 'missing.txt'], sink=sink)

    seeded = engine.seed_from_disk()

    assert seeded == ['file1.txt']
    assert engine.store.snapshot() == {'file1.txt': 'a\nb'}
    assert sink.errors == []


def test_seed_from_disk_reports_unreadable_files(watch_root, sink):
    (watch_root / 'file2.txt').write_bytes(b'\xff\xfe\xfa')
    engine = ChangeBatchingEngine(watch_root, ['file1.txt', 'file2.txt'], sink=sink)

    seeded = engine.seed_from_disk()

    assert seeded == ['file1.txt']
    assert [name for name, _ in sink.errors] == ['file2.txt']
    assert 'file2.txt' not in engine.store


def test_seed_before_flush(watch_root, sink):
    engine = ChangeBatchingEngine(watch_root, ['file1.txt'], sink=sink)
    engine.seed('file1.txt', 'a')
    engine.collect_change('file1.txt', ChangeKind.modified)

    assert engine.flush().results[0].added_lines == ['b']


def test_watched_files_are_deduplicated(watch_root):
    engine = ChangeBatchingEngine(watch_root, ['file1.txt', 'file1.txt', 'file2.txt'])
    assert engine.watched_files == ['file1.txt', 'file2.txt']
    assert isinstance(engine.sink, LoggingReportSink)


def test_concurrent_notifications_across_flushes_are_not_lost(engine):
    """Notifications racing with flushes each show up in exactly one batch."""
    stop = threading.Event()
    reports = []

    def flush_loop():
        while not stop.is_set():
            report = engine.flush()
            if report is not None:
                reports.append(report)

    flusher = threading.Thread(target=flush_loop)
    flusher.start()

    def notify(name):
        engine.collect_change(name, ChangeKind.modified)

    notifiers = [threading.Thread(target=notify, args=(name,)) for name in engine.watched_files]
    for thread in notifiers:
        thread.start()
    for thread in notifiers:
        thread.join()

    stop.set()
    flusher.join()
    final = engine.flush()
    if final is not None:
        reports.append(final)

    names = [r.file_name for report in reports for r in report.results]
    assert sorted(names) == ['file1.txt', 'file2.txt']
