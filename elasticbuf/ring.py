"""A growable circular byte buffer."""

from __future__ import annotations

import errno
import os

from . import byteslice
from .errors import Error, NegativeSizeError

MIN_READ = 512
DEFAULT_BUFFER_SIZE = 1024
_GROW_THRESHOLD = 4 * 1024


class BufferEmptyError(Error):
    """Raised when reading from an empty ring buffer."""

    default_message = "ring-buffer is empty"


def _ceil_to_power_of_two(n: int) -> int:
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def _fill(reader, region: memoryview) -> int:
    """Read from ``reader`` into ``region``; return the count, 0 at end of input."""
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


def _emit(writer, chunk: bytes) -> int:
    m = writer.write(chunk)
    if m is None:
        m = len(chunk)
    if m < 0 or m > len(chunk):
        raise ValueError("writer returned an invalid count from write")
    return m


class RingBuffer:
    """A circular byte buffer that grows when more room is needed."""

    def __init__(self, size: int = 0) -> None:
        if size < 0:
            raise NegativeSizeError()
        self._size = _ceil_to_power_of_two(size) if size else 0
        self._buf = bytearray(self._size)
        self._r = 0
        self._w = 0
        self._is_empty = True

    def peek(self, n: int) -> tuple[bytes, bytes]:
        """Return up to ``n`` bytes as (head, tail) without consuming them; all bytes when n <= 0."""
        if self._is_empty:
            return b"", b""
        if n <= 0:
            return self._peek_all()
        buf, r, w, size = self._buf, self._r, self._w, self._size
        if w > r:
            m = min(w - r, n)
            return bytes(buf[r:r + m]), b""
        m = min(size - r + w, n)
        if r + m <= size:
            return bytes(buf[r:r + m]), b""
        return bytes(buf[r:]), bytes(buf[:m - (size - r)])

    def _peek_all(self) -> tuple[bytes, bytes]:
        buf, r, w = self._buf, self._r, self._w
        if w > r:
            return bytes(buf[r:w]), b""
        return bytes(buf[r:]), bytes(buf[:w])

    def discard(self, n: int) -> int:
        """Skip the next ``n`` bytes; return how many were skipped."""
        if n <= 0:
            return 0
        discarded = self.buffered()
        if n < discarded:
            self._r = (self._r + n) % self._size
            return n
        self.reset()
        return discarded

    def _take(self, n: int) -> bytes:
        """Consume and return ``n`` bytes; ``n`` must not exceed what is buffered."""
        buf, r, w, size = self._buf, self._r, self._w, self._size
        if w > r:
            out = bytes(buf[r:r + n])
            self._r = r + n
        else:
            if r + n <= size:
                out = bytes(buf[r:r + n])
            else:
                out = bytes(buf[r:]) + bytes(buf[:n - (size - r)])
            self._r = (r + n) % size
        if self._r == self._w:
            self.reset()
        return out

    def read(self, size: int = -1) -> bytes:
        """Consume and return up to ``size`` bytes, all of them when ``size`` is negative."""
        if size == 0:
            return b""
        if self._is_empty:
            raise BufferEmptyError()
        available = self.buffered()
        return self._take(available if size < 0 else min(size, available))

    def read_byte(self) -> int:
        """Consume and return the next byte."""
        if self._is_empty:
            raise BufferEmptyError()
        b = self._buf[self._r]
        self._r += 1
        if self._r == self._size:
            self._r = 0
        if self._r == self._w:
            self.reset()
        return b

    def write(self, data) -> int:
        """Append bytes, growing the buffer if needed; return how many were written."""
        with memoryview(data) as view, view.cast("B") as src:
            n = len(src)
            if n == 0:
                return 0
            free = self.available()
            if n > free:
                self._grow(self._size + n - free)
            buf, w = self._buf, self._w
            if w >= self._r:
                c1 = self._size - w
                if c1 >= n:
                    buf[w:w + n] = src
                    w += n
                else:
                    buf[w:] = src[:c1]
                    buf[:n - c1] = src[c1:]
                    w = n - c1
            else:
                buf[w:w + n] = src
                w += n
        if w == self._size:
            w = 0
        self._w = w
        self._is_empty = False
        return n

    def write_byte(self, c: int) -> None:
        """Append one byte value."""
        if self.available() < 1:
            self._grow(1)
        self._buf[self._w] = c
        self._w += 1
        if self._w == self._size:
            self._w = 0
        self._is_empty = False

    def buffered(self) -> int:
        """Return the number of bytes available to read."""
        r, w = self._r, self._w
        if r == w:
            return 0 if self._is_empty else self._size
        if w > r:
            return w - r
        return self._size - r + w

    def length(self) -> int:
        """Return the length of the underlying storage."""
        return len(self._buf)

    def cap(self) -> int:
        """Return the capacity of the ring."""
        return self._size

    def available(self) -> int:
        """Return the number of bytes that can be written without growing."""
        r, w = self._r, self._w
        if r == w:
            return self._size if self._is_empty else 0
        if w < r:
            return r - w
        return self._size - w + r

    def write_string(self, s: str) -> int:
        """Append the UTF-8 encoding of ``s``."""
        return self.write(s.encode("utf-8"))

    def bytes(self) -> bytes:
        """Return a copy of all readable bytes without consuming them."""
        if self._is_empty:
            return b""
        buf, r, w = self._buf, self._r, self._w
        if w > r:
            return bytes(buf[r:w])
        return bytes(buf[r:]) + bytes(buf[:w])

    def read_from(self, r) -> int:
        """Read from a file-like object until its end; return the number of bytes read."""
        total = 0
        while True:
            if self.available() < MIN_READ:
                self._grow(self.buffered() + MIN_READ)
            start = self._w
            end = self._size if self._w >= self._r else self._r
            with memoryview(self._buf) as whole, whole[start:end] as region:
                m = _fill(r, region)
            if m == 0:
                return total
            self._is_empty = False
            self._w = (self._w + m) % self._size
            total += m

    def write_to(self, w) -> int:
        """Write all readable bytes to a file-like object; return how many were written.

        A writer that accepts fewer bytes than offered raises BlockingIOError,
        whose ``characters_written`` tells how many went out; the rest stay buffered.
        """
        if self._is_empty:
            raise BufferEmptyError()
        remaining = self.buffered()
        if self._w > self._r:
            segments = [(self._r, self._w)]
        else:
            segments = [(self._r, self._size)]
            if self._w:
                segments.append((0, self._w))
        total = 0
        for start, end in segments:
            m = _emit(w, bytes(self._buf[start:end]))
            total += m
            remaining -= m
            self._r = (self._r + m) % self._size
            if remaining == 0:
                self.reset()
            if m < end - start:
                raise BlockingIOError(errno.EAGAIN, "short write", total)
        return total

    def is_full(self) -> bool:
        """Tell whether the ring has no room left."""
        return self._r == self._w and not self._is_empty

    def is_empty(self) -> bool:
        """Tell whether the ring holds no data."""
        return self._is_empty

    def reset(self) -> None:
        """Drop all data and rewind the pointers."""
        self._is_empty = True
        self._r = 0
        self._w = 0

    def copy_from_socket(self, fd: int) -> int:
        """Read once from file descriptor ``fd`` into the ring; return the byte count."""
        if self._r == self._w:
            if not self._is_empty:
                self._grow(self._size + self._size // 2)
                n = self._readv(fd, [(self._w, self._size)])
                if n > 0:
                    self._w = (self._w + n) % self._size
                return n
            self._r = self._w = 0
            n = self._readv(fd, [(0, self._size)])
            if n > 0:
                self._w = n % self._size
                self._is_empty = False
            return n
        if self._w < self._r:
            n = self._readv(fd, [(self._w, self._r)])
        else:
            n = self._readv(fd, [(self._w, self._size), (0, self._r)])
        if n > 0:
            self._w = (self._w + n) % self._size
        return n

    def _readv(self, fd: int, spans: list[tuple[int, int]]) -> int:
        with memoryview(self._buf) as whole:
            views = [whole[a:b] for a, b in spans]
            try:
                return os.readv(fd, views)
            finally:
                for view in views:
                    view.release()

    def rewind(self) -> int:
        """Move the data to the front of the storage, growing it when that is cheaper."""
        if self._is_empty:
            self.reset()
            return 0
        size, r, w = self._size, self._r, self._w
        if w == 0:
            if r < size - r:
                self._grow(size + size - r)
                return size - r
            n = size - r
            self._buf[:n] = self._buf[r:]
            self._r, self._w = 0, n
            return n
        if w > r and size - w < DEFAULT_BUFFER_SIZE:
            if r < w - r:
                self._grow(size + w - r)
                return w - r
            n = w - r
            self._buf[:n] = self._buf[r:w]
            self._r, self._w = 0, n
            return n
        return 0

    def _grow(self, new_cap: int) -> None:
        n = self._size
        if n == 0:
            new_cap = DEFAULT_BUFFER_SIZE if new_cap <= DEFAULT_BUFFER_SIZE else _ceil_to_power_of_two(new_cap)
        else:
            double_cap = n + n
            if new_cap <= double_cap:
                if n < _GROW_THRESHOLD:
                    new_cap = double_cap
                else:
                    while n < new_cap:
                        n += n // 4
                    new_cap = n
        new_buf = byteslice.get(new_cap)
        data = self.bytes()
        new_buf[:len(data)] = data
        byteslice.put(self._buf)
        self._buf = new_buf
        self._r = 0
        self._w = len(data)
        self._size = new_cap
        self._is_empty = len(data) == 0