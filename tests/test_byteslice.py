import pytest

from elasticbuf import byteslice


def test_byte_slice_reuse():
    buf = byteslice.get(8)
    buf[:2] = b"ff"
    assert bytes(buf[:2]) == b"ff"
    byteslice.put(buf)
    new_buf = byteslice.get(7)
    assert new_buf is buf
    assert bytes(new_buf[:2]) == b"ff"
    assert len(new_buf) == 7


@pytest.mark.parametrize("size", [0, -1, -100])
def test_non_positive_size_gives_empty(size):
    assert byteslice.Pool().get(size) == bytearray()


@pytest.mark.parametrize("size", [1, 5, 64, 1000])
def test_get_returns_requested_length(size):
    assert len(byteslice.Pool().get(size)) == size


def test_odd_length_goes_to_lower_bucket():
    pool = byteslice.Pool()
    buf = bytearray(7)
    pool.put(buf)
    assert pool.get(8) is not buf
    reused = pool.get(4)
    assert reused is buf
    assert len(reused) == 4


def test_empty_and_foreign_objects_are_ignored():
    pool = byteslice.Pool()
    pool.put(bytearray())
    pool.put(b"abcd")
    fresh = pool.get(4)
    assert fresh == bytearray(4)


def test_last_put_is_reused_first():
    pool = byteslice.Pool()
    first, second = bytearray(16), bytearray(16)
    pool.put(first)
    pool.put(second)
    assert pool.get(16) is second
    assert pool.get(16) is first