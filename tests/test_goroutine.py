import threading
import time

import pytest

from elasticbuf import goroutine


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_submitted_task_runs():
    pool = goroutine.Pool(4)
    done = threading.Event()
    pool.submit(done.set)
    assert done.wait(5)
    pool.release()


def test_default_pool_capacity():
    pool = goroutine.default()
    assert pool.cap() == 1 << 18
    pool.release()


def test_nonblocking_pool_overloads():
    pool = goroutine.Pool(1)
    gate = threading.Event()
    pool.submit(lambda: gate.wait(5))
    with pytest.raises(goroutine.PoolOverloadError):
        pool.submit(lambda: None)
    gate.set()
    pool.release()


def test_blocking_pool_bounds_workers():
    pool = goroutine.Pool(2, nonblocking=False)
    lock = threading.Lock()
    results = []
    seen_running = []

    def task(i):
        with lock:
            results.append(i)
            seen_running.append(pool.running())

    for i in range(10):
        pool.submit(lambda i=i: task(i))
    assert _wait_until(lambda: len(results) == 10)
    assert sorted(results) == list(range(10))
    assert max(seen_running) <= pool.cap()
    pool.release()


def test_released_pool_rejects_tasks():
    pool = goroutine.Pool(2)
    pool.release()
    with pytest.raises(RuntimeError):
        pool.submit(lambda: None)


def test_idle_workers_expire():
    pool = goroutine.Pool(1, expiry_duration=0.05)
    done = threading.Event()
    pool.submit(done.set)
    assert done.wait(5)
    assert _wait_until(lambda: pool.running() == 0)
    pool.release()


def test_failing_task_does_not_kill_pool():
    pool = goroutine.Pool(1, nonblocking=False)

    def bad():
        raise RuntimeError("task failure")

    done = threading.Event()
    pool.submit(bad)
    pool.submit(done.set)
    assert done.wait(5)
    pool.release()


def test_negative_expiry_rejected():
    with pytest.raises(ValueError):
        goroutine.Pool(1, expiry_duration=-1)