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
from datetime import datetime, timezone

import pytest

from change_monitor.collector import ChangeCollector
from change_monitor.models import ChangeKind


@pytest.fixture
def collector():
    return ChangeCollector(['file1.txt', 'file2.txt'])


class TestCollect:
    def test_queues_watched_file(self, collector):
        detected_at = datetime(2024, 1, 1, tzinfo=timezone.utc)

        assert collector.collect('file1.txt', ChangeKind.modified, detected_at) is True

        batch = collector.detach()
        assert len(batch) == 1
        change = batch.changes[0]
        assert change.file_name == 'file1.txt'
        assert change.change_kind == ChangeKind.modified
        assert change.detected_at == detected_at
        assert batch.keys == {('file1.txt', ChangeKind.modified)}

    def test_ignores_unwatched_file(self, collector):
        assert collector.collect('other.txt', ChangeKind.modified) is False
        assert collector.pending_count == 0

    def test_ignores_unknown_change_kind(self, collector):
        assert collector.collect('file1.txt', 'renamed') is False
        assert collector.pending_count == 0

    def test_accepts_kind_as_string(self, collector):
        assert collector.collect('file1.txt', 'deleted') is True
        assert collector.detach().changes[0].change_kind == ChangeKind.deleted

    def test_duplicate_pair_is_absorbed(self, collector):
        assert collector.collect('file1.txt', ChangeKind.modified) is True
        assert collector.collect('file1.txt', ChangeKind.modified) is False
        assert collector.collect('file1.txt', ChangeKind.modified) is False

        assert len(collector.detach()) == 1

    def test_different_kinds_for_same_file_are_both_queued(self, collector):
        collector.collect('file1.txt', ChangeKind.modified)
        collector.collect('file1.txt', ChangeKind.deleted)

        batch = collector.detach()
        assert [c.change_kind for c in batch.changes] == [ChangeKind.modified, ChangeKind.deleted]

    def test_buffer_keeps_arrival_order(self, collector):
        collector.collect('file2.txt', ChangeKind.modified)
        collector.collect('file1.txt', ChangeKind.modified)

        assert [c.file_name for c in collector.detach().changes] == ['file2.txt', 'file1.txt']


class TestDetach:
    def test_detach_resets_buffer_and_dedup_set(self, collector):
        collector.collect('file1.txt', ChangeKind.modified)
        collector.detach()

        assert collector.pending_count == 0
        # Same pair is accepted again in the next batch window
        assert collector.collect('file1.txt', ChangeKind.modified) is True

    def test_detach_of_empty_batch(self, collector):
        batch = collector.detach()
        assert len(batch) == 0
        assert not batch.keys


def test_concurrent_collection_loses_and_duplicates_nothing():
    files = [f'file{i}.txt' for i in range(8)]
    collector = ChangeCollector(files)
    barrier = threading.Barrier(len(files))

    def notify(name):
        barrier.wait()
        for _ in range(200):
            collector.collect(name, ChangeKind.modified)

    threads = [threading.Thread(target=notify, args=(name,)) for name in files]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    batch = collector.detach()
    assert sorted(c.file_name for c in batch.changes) == sorted(files)
    assert len(batch.keys) == len(files)


def test_collection_during_detach_lands_in_one_batch():
    collector = ChangeCollector(['file1.txt', 'file2.txt'])
    batches = []
    done = threading.Event()

    def drain():
        while not done.is_set():
            batches.append(collector.detach())

    drainer = threading.Thread(target=drain)
    drainer.start()
    collector.collect('file1.txt', ChangeKind.modified)
    collector.collect('file2.txt', ChangeKind.modified)
    done.set()
    drainer.join()
    batches.append(collector.detach())

    names = [c.file_name for batch in batches for c in batch.changes]
    assert sorted(names) == ['file1.txt', 'file2.txt']


def test_collect_waits_on_shared_lock():
    lock = threading.Lock()
    collector = ChangeCollector(['file1.txt'], lock=lock)
    queued = []

    with lock:
        worker = threading.Thread(
            target=lambda: queued.append(collector.collect('file1.txt', ChangeKind.modified))
        )
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert queued == []

    worker.join(timeout=5)
    assert queued == [True]
    assert collector.pending_count == 1
