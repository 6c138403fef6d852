"""A bounded pool of reusable worker threads."""

from __future__ import annotations

import queue
import threading
from typing import Callable

from . import logging as elog

DEFAULT_POOL_SIZE = 1 << 18
EXPIRY_DURATION = 10.0
NONBLOCKING = True

_DEFAULT_CLEAN_INTERVAL = 1.0


class PoolOverloadError(Exception):
    """Raised when a non-blocking pool has no free worker for a task."""

    def __init__(self, message: str = "too many workers are busy and the pool is non-blocking") -> None:
        super().__init__(message)


class _Worker:
    def __init__(self, pool: Pool) -> None:
        self._pool = pool
        self._tasks: queue.SimpleQueue[Callable[[], object] | None] = queue.SimpleQueue()
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self, task: Callable[[], object]) -> None:
        self._tasks.put(task)
        self._thread.start()

    def assign(self, task: Callable[[], object] | None) -> None:
        self._tasks.put(task)

    def _run(self) -> None:
        pool = self._pool
        while True:
            try:
                task = self._tasks.get(timeout=pool._expiry)
            except queue.Empty:
                if pool._retire_idle(self):
                    return
                continue
            if task is None:
                pool._exit()
                return
            try:
                task()
            except Exception as exc:
                elog.errorf("worker recovered from a failing task: %s", exc)
            if not pool._park(self):
                return


class Pool:
    """Runs submitted callables on at most ``size`` worker threads.

    Idle workers are kept for ``expiry_duration`` seconds. A size of zero or
    less means the pool is unbounded.
    """

    def __init__(self, size: int, expiry_duration: float = EXPIRY_DURATION, nonblocking: bool = NONBLOCKING) -> None:
        if expiry_duration < 0:
            raise ValueError("invalid expiry duration for pool")
        self._capacity = size if size > 0 else -1
        self._expiry = expiry_duration or _DEFAULT_CLEAN_INTERVAL
        self._nonblocking = nonblocking
        self._cond = threading.Condition()
        self._idle: list[_Worker] = []
        self._running = 0
        self._closed = False

    def submit(self, task: Callable[[], object]) -> None:
        """Run ``task`` on a worker; raise PoolOverloadError if none is free and the pool is non-blocking."""
        with self._cond:
            while True:
                if self._closed:
                    raise RuntimeError("this pool has been closed")
                if self._idle:
                    self._idle.pop().assign(task)
                    return
                if self._capacity < 0 or self._running < self._capacity:
                    self._running += 1
                    worker = _Worker(self)
                    break
                if self._nonblocking:
                    raise PoolOverloadError()
                self._cond.wait()
        worker.start(task)

    def running(self) -> int:
        """Return the number of live workers."""
        with self._cond:
            return self._running

    def cap(self) -> int:
        """Return the capacity of the pool, -1 when unbounded."""
        return self._capacity

    def release(self) -> None:
        """Close the pool; idle workers stop now, busy ones after their task."""
        with self._cond:
            self._closed = True
            idle, self._idle = self._idle, []
            for worker in idle:
                worker.assign(None)
            self._cond.notify_all()

    def _retire_idle(self, worker: _Worker) -> bool:
        with self._cond:
            if worker in self._idle:
                self._idle.remove(worker)
                self._running -= 1
                self._cond.notify()
                return True
            return False

    def _park(self, worker: _Worker) -> bool:
        with self._cond:
            if self._closed:
                self._running -= 1
                self._cond.notify_all()
                return False
            self._idle.append(worker)
            self._cond.notify()
            return True

    def _exit(self) -> None:
        with self._cond:
            self._running -= 1
            self._cond.notify_all()


def default() -> Pool:
    """Return a non-blocking pool of the default capacity."""
    return Pool(DEFAULT_POOL_SIZE, expiry_duration=EXPIRY_DURATION, nonblocking=NONBLOCKING)