"""Tests for the reader/writer access guard."""

from __future__ import annotations

import threading
import time

import pytest

from expiring_cache.core.guard import ReadWriteLock


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    inside = threading.Barrier(3, timeout=2.0)

    def reader() -> None:
        with lock.read_locked():
            # All three readers must be inside at once to pass the barrier
            inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    with lock.read_locked():
        inside.wait()
        assert lock.readers >= 1
    for t in threads:
        t.join(timeout=2.0)

    assert lock.readers == 0


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    reader_done = threading.Event()

    lock.acquire_write()

    def reader() -> None:
        with lock.read_locked():
            reader_done.set()

    t = threading.Thread(target=reader)
    t.start()
    assert not reader_done.wait(0.05)

    lock.release_write()
    assert reader_done.wait(2.0)
    t.join(timeout=2.0)


def test_writer_waits_for_readers():
    lock = ReadWriteLock()
    writer_done = threading.Event()

    lock.acquire_read()

    def writer() -> None:
        with lock.write_locked():
            writer_done.set()

    t = threading.Thread(target=writer)
    t.start()
    assert not writer_done.wait(0.05)

    lock.release_read()
    assert writer_done.wait(2.0)
    t.join(timeout=2.0)
    assert not lock.write_held


def test_waiting_writer_blocks_new_readers():
    lock = ReadWriteLock()
    order = []
    writer_started = threading.Event()

    lock.acquire_read()

    def writer() -> None:
        writer_started.set()
        with lock.write_locked():
            order.append("writer")

    def late_reader() -> None:
        with lock.read_locked():
            order.append("reader")

    w = threading.Thread(target=writer)
    w.start()
    writer_started.wait(2.0)
    # Give the writer time to register as waiting
    time.sleep(0.05)

    r = threading.Thread(target=late_reader)
    r.start()
    time.sleep(0.05)
    assert order == []

    lock.release_read()
    w.join(timeout=2.0)
    r.join(timeout=2.0)
    assert order == ["writer", "reader"]


def test_release_without_acquire_raises():
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()
