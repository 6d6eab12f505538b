from __future__ import annotations

import threading
import time

import pytest

from prep_tracker.core.locks import KeyedLock


def test_idle_keys_are_dropped() -> None:
    locks = KeyedLock()

    with locks.hold("application:1"):
        with locks.hold("application:1"):
            assert len(locks) == 1
        with locks.hold("application:2"):
            assert len(locks) == 2
        assert len(locks) == 1

    assert len(locks) == 0


def test_same_key_is_exclusive_while_waiters_keep_it_alive() -> None:
    locks = KeyedLock()
    inside = []
    overlaps = []

    def worker():
        with locks.hold("progress:u-1"):
            if inside:
                overlaps.append(True)
            inside.append(True)
            time.sleep(0.01)
            inside.pop()

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert overlaps == []
    assert len(locks) == 0


def test_released_on_error() -> None:
    locks = KeyedLock()

    with pytest.raises(RuntimeError):
        with locks.hold("application:9"):
            raise RuntimeError("write failed")

    assert len(locks) == 0
