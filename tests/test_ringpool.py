from elasticbuf import ringpool
from elasticbuf.ring import DEFAULT_BUFFER_SIZE, RingBuffer


def test_get_from_fresh_pool_is_empty():
    pool = ringpool.Pool()
    rb = pool.get()
    assert rb.is_empty()
    assert rb.buffered() == 0


def test_put_then_get_reuses_and_resets():
    pool = ringpool.Pool()
    rb = pool.get()
    rb.write(b"hello world")
    assert rb.buffered() == 11
    pool.put(rb)
    again = pool.get()
    assert again is rb
    assert again.is_empty()
    assert again.bytes() == b""


def test_reused_buffer_keeps_capacity():
    pool = ringpool.Pool()
    rb = RingBuffer(DEFAULT_BUFFER_SIZE)
    pool.put(rb)
    again = pool.get()
    assert again.cap() == DEFAULT_BUFFER_SIZE
    assert again.available() == DEFAULT_BUFFER_SIZE


def test_calibration_sets_default_and_max_size():
    pool = ringpool.Pool()
    rb = RingBuffer(DEFAULT_BUFFER_SIZE)
    for _ in range(42001):
        pool.put(rb)
        assert pool.get() is rb
    fresh = pool.get()
    assert fresh is not rb
    assert fresh.cap() == DEFAULT_BUFFER_SIZE

    big = RingBuffer(2 * DEFAULT_BUFFER_SIZE)
    pool.put(big)
    assert pool.get() is not big

    small = RingBuffer(DEFAULT_BUFFER_SIZE)
    pool.put(small)
    assert pool.get() is small


def test_module_level_get_put_round_trip():
    rb = ringpool.get()
    rb.write(b"abc")
    ringpool.put(rb)
    again = ringpool.get()
    assert again.is_empty()
    again.write(b"xyz")
    assert again.bytes() == b"xyz"