# basflow

Building blocks for asynchronous network services: a mutable byte string,
a thread-safe pool of reusable handlers with watermarks, a group of worker
pools that start and stop together, and the work state machines that drive
a server session and the client connection it may open on its behalf.

## Installation

```
pip install basflow
```

To run the test suite:

```
pip install "basflow[test]"
pytest
```

## Modules

### `basflow.byte_string`

`ByteString` is a growable byte buffer. It accepts `bytes`, `bytearray`,
`memoryview`, `str` (encoded as UTF-8) or another `ByteString`.

- `assign(data)` replaces the content; `append(data)` appends, and an
  integer appends a single byte (0–255).
- `fill(byte)` sets every byte; `clear()` empties the buffer.
- `substr(position=0, length=None)` returns a copy of a section; a span that
  is out of range or empty gives an empty `ByteString`.
- `replace(position, length, other)` and `erase(position=0, length=None)`
  change a section; an invalid span leaves the content unchanged.
- `hash_value()` returns a 64-bit hash that combines the bytes in order.
- Indexing and slicing, `len()`, `bytes()`, iteration, `+`, `+=`, and
  equality and ordering against `ByteString` and bytes-like values. The
  object is mutable and therefore not hashable.

### `basflow.error_count`

`ErrorCount` holds two counters guarded by a lock: `timeout()` and
`error()` increment them, `get_timeout()` and `get_error()` read them, and
`reset()` sets both to zero.

### `basflow.app_param`

`load_params(config_file)` reads an INI-style file and returns an
`AppParam` dataclass. Only options in the `[server]` section are used;
others are ignored, and missing ones keep their defaults. Lines may carry
`#` comments. Numeric options must be non-negative integers (`port` at most
65535); a bad value, a line without `=`, or an option given twice raises
`ValueError`. A file that cannot be opened raises `ConfigFileNotFound`, a
subclass of `FileNotFoundError`.

```
[server]
ip = 127.0.0.1
port = 2012
accept_queue_size = 250
io_thread_size = 4
work_thread_init = 4
work_thread_high = 32
work_thread_load = 100
handler_pool_init = 1000
handler_pool_low = 0
handler_pool_high = 5000
handler_pool_inc = 50
handler_pool_max = 9999
read_buffer_size = 256
write_buffer_size = 0
session_timeout = 30
io_timeout = 0
```

The values above are the defaults, except `ip`, which defaults to an empty
string.

### `basflow.handler_pool`

`ServiceHandlerPool(factory, init_size, low_watermark, high_watermark,
increment, maximum)` keeps idle handlers made by `factory`.

- `init()` opens the pool and creates `init_size` handlers.
- `acquire()` returns an idle handler, first creating `increment` more when
  the idle count has fallen to `low_watermark` and fewer than `maximum`
  exist. It returns `None` when the pool is closed or nothing is available.
- `release(handler)` calls the handler's `clear()` if it has one and puts it
  back; it is dropped instead when the pool is closed or already holds
  `high_watermark` idle handlers.
- `get_load()` is the number of handlers in use; `handler_count()` the
  number the pool owns. `close()` drops every idle handler.

The constructor raises `ValueError` unless `0 < init_size`,
`low_watermark <= init_size`, `low_watermark < high_watermark < maximum`
and `increment > 0`.

### `basflow.service_group`

`ServiceGroup(pool_factory, group_size=2, force_stop=False)` holds
`group_size` pools (at least two), addressed by `PoolIndex.IO_POOL` and
`PoolIndex.WORK_POOL` or any index via `get(index)`. Each pool must provide
`start()`, `stop(force)` and `idle()`.

- `start()` starts every pool, last to first.
- `stop()` stops every pool; when not forced, it restarts and stops them
  again until all report idle.
- `set_force_stop(force_stop)` changes the stop mode, but only while the
  group is stopped. `started` and `force_stop` are read-only properties.
- `close()`, also called on leaving a `with` block, stops the group and
  releases the pools.

### `basflow.client_work`

`EventKind` and `Event(kind, value, error)` are the messages passed between
a server handler and its child handler. `ClientWork` is the child side: it
reports open, read, write and close to its parent through `child_post`, and
`on_parent(handler, event)` carries out the parent's requests (`CLOSE`,
`WRITE`, `WRITE_READ`, `READ`). After a `WRITE_READ` request, a completed
write starts a read instead of being reported.

### `basflow.server_work`

- `State` holds the state machine codes (`DO_*` requests, `ON_*` outcomes).
- `Status` records the state, bytes transferred, error and endpoints;
  `clear()` resets it and `set(state, bytes_transferred, error)` updates it.
- `BizEcho(bgs=None, out=None)` is the echo business logic: after open or
  write it asks to read, after a read it asks to write back, and for any
  other outcome it asks to close. On close it prints `C` for aborted, reset
  or refused connections, `T` for timeouts and `O` for other errors, to
  `out` or standard output; no error or `EOFError` prints nothing.
- `BgsNone` is a business storage that holds nothing; `init()` and
  `close()` only flip its `active` flag.
- `ServerWork(biz, client=None)` runs a session: each event updates the
  status, calls `biz.process(status, input, output)` and then `do_io`
  starts what the new state asks for, including opening, feeding and
  closing a child connection through `client.connect(handler, peer,
  local)`. Requests that need a missing client or child close the session;
  a child buffer that is full or too small is reported back as an `OSError`
  with `errno.ENOBUFS`.

### `basflow.echo_client`

`EchoClientWork(counter, pause_time=0, timer_factory=None)` writes
`ECHO_MESSAGE` on open (after `pause_time` seconds, using a daemon
`threading.Timer` unless another timer factory is given), reads the reply
and closes. On close it counts a `TimeoutError` as a timeout and counts an
error whenever the received bytes differ from the message.
`EchoClientWorkAllocator(counter, pause_time=0, timer_factory=None)` makes
such works with `make_handler()`.

## Handler objects

The work classes do no networking of their own; they drive a handler object
you supply. `ClientWork` and `ServerWork` expect a handler with a
`read_buffer` (offering `clear`, `produce`, `consume`, `crunch`, `space`,
`write`, `len()` and `bytes()`) and the methods `async_read_some()`,
`async_write(data)`, `close()`, `child_post(event)`, `parent_post(event)`
and `remote_endpoint()`. `EchoClientWork` uses `read_buffer` (`clear`,
`produce`, `bytes()`), `async_write`, `async_read_some` and `close`.

## Example

```python
from basflow.byte_string import ByteString
from basflow.handler_pool import ServiceHandlerPool

buf = ByteString(b"hello world")
buf.replace(0, 5, ByteString(b"HELLO"))
assert bytes(buf) == b"HELLO world"

pool = ServiceHandlerPool(dict, init_size=10, low_watermark=0,
                          high_watermark=50, increment=5, maximum=100)
pool.init()
handler = pool.acquire()
assert pool.get_load() == 1
pool.release(handler)
pool.close()
```

## What this package does not do

There is no socket layer, event loop or thread pool here, and no
ready-to-run echo server or echo client program or command. The package
provides the pieces such programs are built from; the sockets, the
handlers that wrap them and the pools a `ServiceGroup` holds are yours to
supply.