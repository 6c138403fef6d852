"""A pool of byte arrays bucketed by powers of two."""

from __future__ import annotations

from collections import deque

_MAX_INT32 = 2**31 - 1
_CLASSES = 32
_MAX_PER_CLASS = 64


def _index(n: int) -> int:
    return (n - 1).bit_length()


class Pool:
    """Reuses byte arrays; bucket ``i`` holds arrays of at least ``2**i`` bytes."""

    def __init__(self) -> None:
        self._classes: list[deque[bytearray]] = [deque(maxlen=_MAX_PER_CLASS) for _ in range(_CLASSES)]

    def get(self, size: int) -> bytearray:
        """Return a byte array of exactly ``size`` bytes, reused when possible."""
        if size <= 0:
            return bytearray()
        if size > _MAX_INT32:
            return bytearray(size)
        try:
            buf = self._classes[_index(size)].pop()
        except IndexError:
            return bytearray(size)
        del buf[size:]
        return buf

    def put(self, buf: bytearray) -> None:
        """Give a byte array back for reuse; other objects are ignored."""
        if not isinstance(buf, bytearray):
            return
        size = len(buf)
        if size == 0 or size > _MAX_INT32:
            return
        idx = _index(size)
        if size != 1 << idx:
            idx -= 1
        self._classes[idx].append(buf)


_builtin_pool = Pool()


def get(size: int) -> bytearray:
    """Return a byte array of ``size`` bytes from the built-in pool."""
    return _builtin_pool.get(size)


def put(buf: bytearray) -> None:
    """Return a byte array to the built-in pool."""
    _builtin_pool.put(buf)