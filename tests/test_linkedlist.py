import io
import random

import pytest

from elasticbuf.linkedlist import LinkedListBuffer


def _blocks(rng, count):
    out = []
    for _ in range(count):
        n = rng.randrange(1024) + 128
        out.append(rng.randbytes(n))
    return out


def test_basic():
    rng = random.Random(1)
    llb = LinkedListBuffer()
    blocks = _blocks(rng, 100)
    for data in blocks:
        llb.push_back(data)
    buf = b"".join(blocks)
    cum = len(buf)
    assert llb.length() == 100
    assert llb.buffered() == cum

    p = b"".join(llb.peek(cum // 4))
    pn = len(p)
    assert pn >= cum // 4
    assert p == buf[:pn]

    tmp_a = rng.randbytes(cum // 16)
    tmp_b = rng.randbytes(cum // 16)
    p = b"".join(llb.peek_with_bytes(cum // 4, tmp_a, tmp_b))
    pn = len(p)
    assert pn >= cum // 4
    assert p == tmp_a + tmp_b + buf[: pn - len(tmp_a) - len(tmp_b)]

    pn = llb.discard(pn)
    rest = buf[pn:]
    got = llb.read(cum - pn)
    assert len(got) == cum - pn
    assert got == rest
    assert llb.is_empty()


def test_read_from():
    rng = random.Random(2)
    llb = LinkedListBuffer()
    data_len = 4 * 1024
    data = rng.randbytes(data_len)
    n = llb.read_from(io.BytesIO(data))
    assert n == data_len
    assert llb.buffered() == data_len

    llb.reset()
    head = rng.randbytes(256)
    llb.push_back(head)
    data = rng.randbytes(data_len)
    n = llb.read_from(io.BytesIO(data))
    assert n == data_len
    assert llb.buffered() == 256 + data_len
    got = llb.read(256 + data_len)
    assert got == head + data
    assert llb.is_empty()


def test_write_to():
    rng = random.Random(3)
    llb = LinkedListBuffer()
    blocks = _blocks(rng, 20)
    for data in blocks:
        llb.push_back(data)
    buf = b"".join(blocks)
    cum = len(buf)
    assert llb.length() == 20
    assert llb.buffered() == cum

    out = io.BytesIO()
    assert llb.write_to(out) == cum
    assert out.getvalue() == buf

    llb.reset()
    blocks = _blocks(rng, 20)
    for data in blocks:
        llb.push_back(data)
    buf = b"".join(blocks)
    cum = len(buf)
    assert llb.length() == 20
    assert llb.buffered() == cum

    discarded = llb.discard(cum // 2)
    out = io.BytesIO()
    assert llb.write_to(out) == cum - discarded
    assert out.getvalue() == buf[discarded:]
    assert llb.is_empty()


def test_push_front_goes_first():
    llb = LinkedListBuffer()
    llb.push_back(b"world")
    llb.push_front(b"hello ")
    llb.push_back(b"")
    assert llb.length() == 2
    assert llb.read(-1) == b"hello world"


def test_read_partial_chunk_and_empty_reads():
    llb = LinkedListBuffer()
    assert llb.read(10) == b""
    llb.push_back(b"abcdef")
    assert llb.read(0) == b""
    assert llb.read(2) == b"ab"
    assert llb.buffered() == 4
    assert llb.peek(-1) == [b"cdef"]
    assert llb.read(100) == b"cdef"
    assert llb.is_empty()


def test_discard_more_than_buffered():
    llb = LinkedListBuffer()
    llb.push_back(b"abc")
    llb.push_back(b"def")
    assert llb.discard(0) == 0
    assert llb.discard(100) == 6
    assert llb.buffered() == 0
    assert llb.is_empty()


class _ShortWriter:
    def __init__(self, limit):
        self.limit = limit
        self.data = bytearray()

    def write(self, b):
        chunk = b[: self.limit]
        self.data += chunk
        return len(chunk)


def test_short_write_keeps_remainder():
    llb = LinkedListBuffer()
    llb.push_back(b"abcdef")
    llb.push_back(b"ghi")
    writer = _ShortWriter(4)
    with pytest.raises(BlockingIOError) as info:
        llb.write_to(writer)
    assert info.value.characters_written == 4
    assert bytes(writer.data) == b"abcd"
    assert llb.buffered() == 5
    assert llb.read(-1) == b"efghi"


class _ChunkedReader:
    def __init__(self, data, step):
        self._data = data
        self._step = step

    def read(self, n):
        n = min(n, self._step)
        chunk, self._data = self._data[:n], self._data[n:]
        return chunk


def test_read_from_plain_reader():
    data = bytes(range(256)) * 5
    llb = LinkedListBuffer()
    assert llb.read_from(_ChunkedReader(data, 100)) == len(data)
    assert b"".join(llb.peek(0)) == data
    assert llb.read(-1) == data
    assert llb.is_empty()