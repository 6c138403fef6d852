"""A growable byte buffer and a pool of them."""

from __future__ import annotations

from collections import deque

_MAX_POOLED = 1024


class ByteBuffer:
    """An append-only byte buffer that can be reset and reused."""

    __slots__ = ("_buf",)

    def __init__(self, data: bytes = b"") -> None:
        self._buf = bytearray(data)

    def write(self, data) -> int:
        """Append bytes and return how many were written."""
        before = len(self._buf)
        self._buf += data
        return len(self._buf) - before

    def write_string(self, s: str) -> int:
        """Append the UTF-8 encoding of ``s``."""
        return self.write(s.encode("utf-8"))

    def write_byte(self, c: int) -> None:
        """Append a single byte value."""
        self._buf.append(c)

    def set(self, data) -> None:
        """Replace the contents with ``data``."""
        self._buf[:] = data

    def set_string(self, s: str) -> None:
        """Replace the contents with the UTF-8 encoding of ``s``."""
        self.set(s.encode("utf-8"))

    def bytes(self) -> bytes:
        """Return a copy of the contents."""
        return bytes(self._buf)

    def reset(self) -> None:
        """Drop all contents."""
        self._buf.clear()

    def __len__(self) -> int:
        return len(self._buf)

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def __str__(self) -> str:
        return self._buf.decode("utf-8", errors="replace")


_pool: deque[ByteBuffer] = deque(maxlen=_MAX_POOLED)


def get() -> ByteBuffer:
    """Return an empty byte buffer, reused from the pool when possible."""
    try:
        return _pool.pop()
    except IndexError:
        return ByteBuffer()


def put(b: ByteBuffer | None) -> None:
    """Return a byte buffer to the pool; None is ignored."""
    if b is None:
        return
    b.reset()
    _pool.append(b)