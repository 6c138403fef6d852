# elasticbuf

Byte buffers for event-driven network code: a power-of-two ring buffer that
grows on demand, a linked-list buffer for large backlogs, and an elastic
buffer that combines both. Size-classed pools keep allocation churn down.
There are no runtime dependencies.

## Installing

```
pip install elasticbuf
```

To run the test suite:

```
pip install "elasticbuf[test]"
pytest
```

## Modules

- `elasticbuf.ring` – `RingBuffer(size=0)`, a circular buffer whose capacity
  is rounded up to a power of two. `write`, `write_byte` and `write_string`
  grow it when it runs out of room. `read`, `read_byte`, `peek`, `discard`
  and `bytes` take data out or look at it. Reading an empty buffer raises
  `BufferEmptyError`. `buffered`, `available`, `length`, `cap`, `is_empty`,
  `is_full` and `reset` report on or clear the buffer. `read_from(r)` reads
  from a file-like object until its end. `write_to(w)` writes everything to
  a file-like object; if the writer takes fewer bytes than offered, it
  raises `BlockingIOError` with `characters_written` set, and the rest stays
  buffered. `copy_from_socket(fd)` does one `os.readv` from a file
  descriptor, so it works only where `os.readv` exists (Unix). `rewind`
  moves the data to the front of the storage.
- `elasticbuf.linkedlist` – `LinkedListBuffer`, a queue of copied byte
  chunks with `push_back`, `push_front`, `peek`, `peek_with_bytes`,
  `discard`, `read`, `read_from`, `write_to`, `length` (number of chunks),
  `buffered` (number of bytes), `is_empty` and `reset`.
- `elasticbuf.elastic` – `ElasticRingBuffer`, which takes a ring buffer from
  the pool on first write and gives it back once it is drained, and
  `ElasticBuffer(max_static_bytes)`, which keeps data in a ring buffer up to
  that limit and puts anything beyond it into a linked list. `writev`
  appends several byte strings at once; `release` drops all data and gives
  the ring buffer back to the pool. A limit that is not positive raises
  `NegativeSizeError`.
- `elasticbuf.byteslice` – a pool of byte arrays in power-of-two size
  classes: `get(size)` and `put(buf)`, or your own `Pool`.
- `elasticbuf.ringpool` – a pool of ring buffers that counts the sizes
  given back to it and adjusts the size of new buffers and the largest size
  worth keeping: `get()` and `put(b)`, or your own `Pool`.
- `elasticbuf.bytebuffer` – `ByteBuffer`, a reusable growable byte buffer
  (`write`, `write_string`, `write_byte`, `set`, `set_string`, `bytes`,
  `reset`, `len()`), with pooled `get()` and `put(b)`.
- `elasticbuf.goroutine` – `Pool(size, expiry_duration=10.0,
  nonblocking=True)`, a bounded pool of worker threads. `submit(task)` runs
  a callable on a worker; when every worker is busy a non-blocking pool
  raises `PoolOverloadError`, a blocking one waits. Idle workers stop after
  the expiry duration. `running()`, `cap()` and `release()` report on and
  close the pool; submitting to a released pool raises `RuntimeError`.
  `default()` returns a non-blocking pool of 262,144 workers.
- `elasticbuf.logging` – a small logging facade with `Level`, `Logger` and
  the functions `debugf`, `infof`, `warnf`, `errorf`, `fatalf` (which logs
  and then raises `SystemExit(1)`), `error`, `get_default_logger`,
  `log_level`, `create_logger_as_local_file` (a log file rotated at 100 MB
  with two backups) and `cleanup`. The default logger writes to standard
  error at INFO level; the environment variable `ELASTICBUF_LOGGING_LEVEL`
  sets its integer level (-1 debug up to 5 fatal), and
  `ELASTICBUF_LOGGING_FILE` sends it to a file instead.
- `elasticbuf.errors` – the exception hierarchy rooted at `Error`, such as
  `NegativeSizeError`.

## Example

```python
from elasticbuf.elastic import ElasticBuffer

buf = ElasticBuffer(4 * 1024)
buf.write(b"hello, ")
buf.writev([b"world", b"!"])

print(b"".join(buf.peek(-1)))   # b'hello, world!'
buf.discard(7)
print(buf.read(6))              # b'world!'
print(buf.is_empty())           # True
```

```python
from elasticbuf.ring import RingBuffer

rb = RingBuffer(64)
rb.write(b"abcd" * 4)
head, tail = rb.peek(8)
print(head + tail)              # b'abcdabcd'
print(rb.buffered(), rb.available())  # 16 48
```

## What it does not do

This package holds the buffers, pools and helpers a network server is built
on, not a server. There is no event loop, no socket listener and no
connection handling. Some exceptions in `elasticbuf.errors`, such as
`EngineShutdownError` or `UnsupportedProtocolError`, are defined for code
that uses the package; nothing in the package itself raises them.