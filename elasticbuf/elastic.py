"""Elastic buffers: a pooled ring buffer that spills over into a chunk list."""

from __future__ import annotations

from . import ringpool
from .errors import NegativeSizeError
from .linkedlist import LinkedListBuffer
from .ring import BufferEmptyError, RingBuffer

_MAX_INT32 = 2**31 - 1


def _view(data) -> memoryview:
    return memoryview(data).cast("B")


class ElasticRingBuffer:
    """A ring buffer taken from the pool on first write and given back once drained."""

    def __init__(self) -> None:
        self._rb: RingBuffer | None = None

    def _instance(self) -> RingBuffer:
        if self._rb is None:
            self._rb = ringpool.get()
        return self._rb

    def _release_if_drained(self) -> None:
        if self._rb is not None and self._rb.is_empty():
            ringpool.put(self._rb)
            self._rb = None

    def _require(self) -> RingBuffer:
        if self._rb is None:
            raise BufferEmptyError()
        return self._rb

    def done(self) -> None:
        """Give the underlying ring buffer back to the pool."""
        if self._rb is not None:
            ringpool.put(self._rb)
            self._rb = None

    def peek(self, n: int) -> tuple[bytes, bytes]:
        """Return up to ``n`` bytes as (head, tail) without consuming them; all bytes when n <= 0."""
        if self._rb is None:
            return b"", b""
        return self._rb.peek(n)

    def discard(self, n: int) -> int:
        """Skip the next ``n`` bytes; return how many were skipped."""
        rb = self._require()
        try:
            return rb.discard(n)
        finally:
            self._release_if_drained()

    def read(self, size: int = -1) -> bytes:
        """Consume and return up to ``size`` bytes, all of them when ``size`` is negative."""
        rb = self._require()
        try:
            return rb.read(size)
        finally:
            self._release_if_drained()

    def read_byte(self) -> int:
        """Consume and return the next byte."""
        rb = self._require()
        try:
            return rb.read_byte()
        finally:
            self._release_if_drained()

    def write(self, data) -> int:
        """Append bytes; return how many were written."""
        view = _view(data)
        if len(view) == 0:
            return 0
        return self._instance().write(view)

    def write_byte(self, c: int) -> None:
        """Append one byte value."""
        self._instance().write_byte(c)

    def buffered(self) -> int:
        """Return the number of bytes available to read."""
        return 0 if self._rb is None else self._rb.buffered()

    def length(self) -> int:
        """Return the length of the underlying storage."""
        return 0 if self._rb is None else self._rb.length()

    def cap(self) -> int:
        """Return the capacity of the underlying ring."""
        return 0 if self._rb is None else self._rb.cap()

    def available(self) -> int:
        """Return the number of bytes that can be written without growing."""
        return 0 if self._rb is None else self._rb.available()

    def write_string(self, s: str) -> int:
        """Append the UTF-8 encoding of ``s``."""
        if not s:
            return 0
        return self._instance().write_string(s)

    def bytes(self) -> bytes:
        """Return a copy of all readable bytes without consuming them."""
        return b"" if self._rb is None else self._rb.bytes()

    def read_from(self, r) -> int:
        """Read from a file-like object until its end; return the number of bytes read."""
        return self._instance().read_from(r)

    def write_to(self, w) -> int:
        """Write all readable bytes to a file-like object; return how many were written."""
        rb = self._require()
        try:
            return rb.write_to(w)
        finally:
            self._release_if_drained()

    def is_full(self) -> bool:
        """Tell whether the ring has no room left."""
        return False if self._rb is None else self._rb.is_full()

    def is_empty(self) -> bool:
        """Tell whether the ring holds no data."""
        return True if self._rb is None else self._rb.is_empty()

    def reset(self) -> None:
        """Drop all data and rewind the pointers."""
        if self._rb is not None:
            self._rb.reset()


class ElasticBuffer:
    """A ring buffer of bounded size backed by a chunk list for overflow.

    Data goes into the ring until it holds ``max_static_bytes``; from then on,
    and for as long as the list holds anything, new data goes into the list.
    """

    def __init__(self, max_static_bytes: int) -> None:
        if max_static_bytes <= 0:
            raise NegativeSizeError()
        self.max_static_bytes = max_static_bytes
        self.ring_buffer = ElasticRingBuffer()
        self.list_buffer = LinkedListBuffer()

    def _spilling(self) -> bool:
        return not self.list_buffer.is_empty() or self.ring_buffer.buffered() >= self.max_static_bytes

    def read(self, size: int = -1) -> bytes:
        """Consume and return up to ``size`` bytes, all of them when ``size`` is negative."""
        if size == 0:
            return b""
        head = b"" if self.ring_buffer.is_empty() else self.ring_buffer.read(size)
        if size >= 0 and len(head) == size:
            return head
        rest = self.list_buffer.read(size - len(head) if size >= 0 else -1)
        return head + rest

    def peek(self, n: int) -> list[bytes]:
        """Return chunks covering up to ``n`` bytes (all when n <= 0) without consuming them."""
        if n <= 0:
            n = _MAX_INT32
        head, tail = self.ring_buffer.peek(n)
        if self.ring_buffer.buffered() >= n:
            return [head, tail]
        return self.list_buffer.peek_with_bytes(n, head, tail)

    def discard(self, n: int) -> int:
        """Drop the next ``n`` bytes; return how many were dropped."""
        if n <= 0:
            return 0
        discarded = 0 if self.ring_buffer.is_empty() else self.ring_buffer.discard(n)
        if n <= discarded:
            return discarded
        return discarded + self.list_buffer.discard(n - discarded)

    def write(self, data) -> int:
        """Append bytes; return how many were written."""
        view = _view(data)
        n = len(view)
        if self._spilling():
            self.list_buffer.push_back(view)
            return n
        if self.ring_buffer.length() >= self.max_static_bytes:
            writable = self.ring_buffer.available()
            if n > writable:
                self.ring_buffer.write(view[:writable])
                self.list_buffer.push_back(view[writable:])
                return n
        return self.ring_buffer.write(view)

    def writev(self, bs) -> int:
        """Append several byte strings in order; return the total written."""
        if self._spilling():
            total = 0
            for b in bs:
                view = _view(b)
                self.list_buffer.push_back(view)
                total += len(view)
            return total

        if self.ring_buffer.length() < self.max_static_bytes:
            writable = self.max_static_bytes - self.ring_buffer.buffered()
        else:
            writable = self.ring_buffer.available()
        total = 0
        blocks = iter(bs)
        for b in blocks:
            view = _view(b)
            total += len(view)
            if len(view) > writable:
                self.ring_buffer.write(view[:writable])
                self.list_buffer.push_back(view[writable:])
                break
            writable -= self.ring_buffer.write(view)
        for b in blocks:
            view = _view(b)
            total += len(view)
            self.list_buffer.push_back(view)
        return total

    def read_from(self, r) -> int:
        """Read from a file-like object until its end; return the number of bytes read."""
        if self._spilling():
            return self.list_buffer.read_from(r)
        return self.ring_buffer.read_from(r)

    def write_to(self, w) -> int:
        """Write all buffered bytes to a file-like object; return how many were written.

        Raises BufferEmptyError when the ring part holds nothing, and
        BlockingIOError, with ``characters_written`` set, on a short write.
        """
        n = self.ring_buffer.write_to(w)
        try:
            return n + self.list_buffer.write_to(w)
        except BlockingIOError as exc:
            exc.characters_written += n
            raise

    def buffered(self) -> int:
        """Return the number of bytes that can be read."""
        return self.ring_buffer.buffered() + self.list_buffer.buffered()

    def is_empty(self) -> bool:
        """Tell whether the buffer holds no data."""
        return self.ring_buffer.is_empty() and self.list_buffer.is_empty()

    def reset(self, max_static_bytes: int) -> None:
        """Drop all data; a positive ``max_static_bytes`` replaces the current limit."""
        self.ring_buffer.reset()
        self.list_buffer.reset()
        if max_static_bytes > 0:
            self.max_static_bytes = max_static_bytes

    def release(self) -> None:
        """Drop all data and give the ring buffer back to the pool."""
        self.ring_buffer.done()
        self.list_buffer.reset()