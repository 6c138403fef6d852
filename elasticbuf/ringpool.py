"""A self-calibrating pool of ring buffers."""

from __future__ import annotations

import threading
from collections import deque

from .ring import RingBuffer

_MIN_BIT_SIZE = 6  # 2**6 = 64, a CPU cache line
_STEPS = 20
_MIN_SIZE = 1 << _MIN_BIT_SIZE
_CALIBRATE_CALLS_THRESHOLD = 42000
_MAX_PERCENTILE = 0.95
_MAX_POOLED = 1024


def _index(n: int) -> int:
    n = (n - 1) >> _MIN_BIT_SIZE
    idx = n.bit_length() if n > 0 else 0
    return min(idx, _STEPS - 1)


class Pool:
    """Hands out ring buffers and learns which sizes are worth keeping.

    Buffers given back are counted by size; every so often the pool works out
    the most common size, used for new buffers, and the largest size still
    worth keeping, beyond which returned buffers are dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls = [0] * _STEPS
        self._calibrating = False
        self._default_size = 0
        self._max_size = 0
        self._free: deque[RingBuffer] = deque(maxlen=_MAX_POOLED)

    def get(self) -> RingBuffer:
        """Return an empty ring buffer, reused when one is available."""
        with self._lock:
            if self._free:
                return self._free.pop()
            size = self._default_size
        return RingBuffer(size)

    def put(self, b: RingBuffer) -> None:
        """Give a ring buffer back; it must not be used afterwards."""
        idx = _index(b.length())
        with self._lock:
            self._calls[idx] += 1
            over = self._calls[idx] > _CALIBRATE_CALLS_THRESHOLD
        if over:
            self._calibrate()
        with self._lock:
            max_size = self._max_size
            if max_size == 0 or b.cap() <= max_size:
                b.reset()
                self._free.append(b)

    def _calibrate(self) -> None:
        with self._lock:
            if self._calibrating:
                return
            self._calibrating = True
            counts = self._calls
            self._calls = [0] * _STEPS

        stats = sorted(
            ((calls, _MIN_SIZE << i) for i, calls in enumerate(counts)),
            key=lambda item: item[0],
            reverse=True,
        )
        default_size = stats[0][1]
        max_size = default_size
        max_sum = int(sum(counts) * _MAX_PERCENTILE)
        cumulative = 0
        for calls, size in stats:
            if cumulative > max_sum:
                break
            cumulative += calls
            max_size = max(max_size, size)

        with self._lock:
            self._default_size = default_size
            self._max_size = max_size
            self._calibrating = False


_builtin_pool = Pool()


def get() -> RingBuffer:
    """Return an empty ring buffer from the built-in pool."""
    return _builtin_pool.get()


def put(b: RingBuffer) -> None:
    """Return a ring buffer to the built-in pool."""
    _builtin_pool.put(b)