"""A byte buffer made of a list of chunks."""

from __future__ import annotations

import errno
from collections import deque

from . import byteslice

_MAX_INT32 = 2**31 - 1
_MIN_READ = 512


def _fill(reader, region: memoryview) -> int:
    readinto = getattr(reader, "readinto", None)
    if readinto is not None:
        m = readinto(region) or 0
    else:
        chunk = reader.read(len(region))
        if not chunk:
            return 0
        m = len(chunk)
        if m <= len(region):
            region[:m] = chunk
    if m < 0 or m > len(region):
        raise ValueError("reader returned an invalid count from read")
    return m


class LinkedListBuffer:
    """A FIFO of byte chunks; data is copied in and consumed from the front."""

    def __init__(self) -> None:
        self._nodes: deque[bytearray] = deque()
        self._bytes = 0

    def read(self, size: int = -1) -> bytes:
        """Consume and return up to ``size`` bytes, all of them when ``size`` is negative."""
        if size == 0:
            return b""
        want = self._bytes if size < 0 else size
        parts = []
        while want > 0 and self._nodes:
            node = self._nodes[0]
            if len(node) <= want:
                self._nodes.popleft()
                parts.append(bytes(node))
                want -= len(node)
                self._bytes -= len(node)
                byteslice.put(node)
            else:
                parts.append(bytes(node[:want]))
                del node[:want]
                self._bytes -= want
                want = 0
        return b"".join(parts)

    def _copy(self, p) -> bytearray | None:
        with memoryview(p) as view, view.cast("B") as src:
            n = len(src)
            if n == 0:
                return None
            node = byteslice.get(n)
            node[:] = src
        return node

    def push_front(self, p) -> None:
        """Put a copy of ``p`` in front of the buffered data."""
        node = self._copy(p)
        if node is not None:
            self._nodes.appendleft(node)
            self._bytes += len(node)

    def push_back(self, p) -> None:
        """Append a copy of ``p`` to the buffered data."""
        node = self._copy(p)
        if node is not None:
            self._nodes.append(node)
            self._bytes += len(node)

    def peek(self, max_bytes: int) -> list[bytes]:
        """Return whole chunks covering at least ``max_bytes`` bytes (all when <= 0) without consuming them."""
        return self.peek_with_bytes(max_bytes)

    def peek_with_bytes(self, max_bytes: int, *args) -> list[bytes]:
        """Like peek, but with the non-empty ``args`` placed ahead of the buffered chunks."""
        if max_bytes <= 0:
            max_bytes = _MAX_INT32
        out: list[bytes] = []
        cumulative = 0
        for b in args:
            if len(b) > 0:
                out.append(bytes(b))
                cumulative += len(b)
                if cumulative >= max_bytes:
                    return out
        for node in self._nodes:
            out.append(bytes(node))
            cumulative += len(node)
            if cumulative >= max_bytes:
                break
        return out

    def discard(self, n: int) -> int:
        """Drop the next ``n`` bytes; return how many were dropped."""
        discarded = 0
        while n > 0 and self._nodes:
            node = self._nodes[0]
            if n < len(node):
                del node[:n]
                self._bytes -= n
                discarded += n
                break
            self._nodes.popleft()
            n -= len(node)
            discarded += len(node)
            self._bytes -= len(node)
            byteslice.put(node)
        return discarded

    def read_from(self, r) -> int:
        """Read from a file-like object until its end; return the number of bytes read."""
        total = 0
        while True:
            node = byteslice.get(_MIN_READ)
            with memoryview(node) as region:
                m = _fill(r, region)
            if m == 0:
                byteslice.put(node)
                return total
            del node[m:]
            self._nodes.append(node)
            self._bytes += m
            total += m

    def write_to(self, w) -> int:
        """Write all buffered bytes to a file-like object; return how many were written.

        A writer that accepts fewer bytes than offered raises BlockingIOError,
        whose ``characters_written`` tells how many went out; the rest stay buffered.
        """
        total = 0
        while self._nodes:
            node = self._nodes[0]
            size = len(node)
            m = w.write(bytes(node))
            if m is None:
                m = size
            if m < 0 or m > size:
                raise ValueError("writer returned an invalid count from write")
            total += m
            self._bytes -= m
            if m < size:
                del node[:m]
                raise BlockingIOError(errno.EAGAIN, "short write", total)
            self._nodes.popleft()
            byteslice.put(node)
        return total

    def length(self) -> int:
        """Return the number of chunks."""
        return len(self._nodes)

    def buffered(self) -> int:
        """Return the number of bytes that can be read."""
        return self._bytes

    def is_empty(self) -> bool:
        """Tell whether the buffer holds no chunks."""
        return not self._nodes

    def reset(self) -> None:
        """Drop all data."""
        while self._nodes:
            byteslice.put(self._nodes.popleft())
        self._bytes = 0