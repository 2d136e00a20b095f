"""Server-side work object driven by a business state machine."""

from __future__ import annotations

import errno
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, TextIO

from basflow.client_work import Event, EventKind


class State(IntEnum):
    """I/O state machine codes shared by the server work and business objects."""

    NONE = 0x0000

    DO_READ = 0x0002
    DO_WRITE = 0x0004
    DO_CLOSE = 0x00EF
    DO_CLIENT_OPEN = 0x0100
    DO_CLIENT_READ = 0x0200
    DO_CLIENT_WRITE = 0x0400
    DO_CLIENT_WRITE_READ = 0x0600
    DO_CLIENT_CLOSE = 0xEF00

    ON_OPEN = 0x0011
    ON_READ = 0x0012
    ON_WRITE = 0x0014
    ON_CLOSE = 0x00FF
    ON_CLIENT_OPEN = 0x1100
    ON_CLIENT_READ = 0x1200
    ON_CLIENT_WRITE = 0x1400
    ON_CLIENT_CLOSE = 0xFF00
    ON_NOTIFY = 0x1818


@dataclass
class Status:
    """State of the last I/O operation and the endpoints involved."""

    state: int = State.NONE
    bytes_transferred: int = 0
    error: Optional[BaseException] = None
    peer_endpoint: Any = None
    local_endpoint: Any = None
    remote_endpoint: Any = None
    child_endpoint: Any = None

    def clear(self) -> None:
        """Reset every field to its default."""
        self.state = State.NONE
        self.bytes_transferred = 0
        self.error = None
        self.peer_endpoint = None
        self.local_endpoint = None
        self.remote_endpoint = None
        self.child_endpoint = None

    def set(
        self,
        state: int,
        bytes_transferred: int = 0,
        error: Optional[BaseException] = None,
    ) -> None:
        """Record the state, transfer size and error of an operation."""
        self.state = state
        self.bytes_transferred = bytes_transferred
        self.error = error


class BgsNone:
    """Business global storage that holds no resources."""

    def __init__(self) -> None:
        self.active = False

    def init(self) -> None:
        """Mark the storage as ready; there is nothing to acquire."""
        self.active = True

    def close(self) -> None:
        """Mark the storage as closed; there is nothing to release."""
        self.active = False


class BizEcho:
    """Echo business logic: read, write back what was read, repeat."""

    def __init__(self, bgs: Any = None, out: Optional[TextIO] = None) -> None:
        self.bgs = bgs
        self._out = out

    def _report(self, mark: str) -> None:
        print(mark, end="", file=self._out if self._out is not None else sys.stdout)

    def process(self, status: Status, input: Any, output: Any) -> None:
        """Choose the next state from the outcome in ``status``."""
        state = status.state
        if state == State.ON_OPEN:
            status.state = State.DO_READ
        elif state == State.ON_READ:
            status.state = State.DO_WRITE
        elif state == State.ON_WRITE:
            status.state = State.DO_READ
        elif state == State.ON_CLOSE:
            error = status.error
            if error is None or isinstance(error, EOFError):
                return
            if isinstance(
                error, (ConnectionAbortedError, ConnectionResetError, ConnectionRefusedError)
            ):
                self._report("C")
            elif isinstance(error, TimeoutError):
                self._report("T")
            else:
                self._report("O")
        else:
            status.state = State.DO_CLOSE


def _no_buffer_space() -> OSError:
    return OSError(errno.ENOBUFS, "No buffer space available")


class ServerWork:
    """Drives a server connection and an optional outgoing client connection."""

    def __init__(self, biz: Any, client: Any = None) -> None:
        if biz is None:
            raise ValueError("a business object is required")
        self._biz = biz
        self._client = client
        self._client_handler: Any = None
        self._status = Status()
        self._passive_close = False

    @property
    def status(self) -> Status:
        """The current I/O status."""
        return self._status

    @property
    def client_handler(self) -> Any:
        """The linked child handler, or None."""
        return self._client_handler

    def _process(self, handler: Any, input_buffer: Any = None) -> None:
        buffer = handler.read_buffer
        self._biz.process(
            self._status, buffer if input_buffer is None else input_buffer, buffer
        )

    def do_io(self, handler: Any) -> None:
        """Start the I/O operation the current state asks for."""
        state = self._status.state
        buffer = handler.read_buffer

        if state == State.DO_READ:
            handler.async_read_some()
        elif state == State.DO_WRITE:
            handler.async_write(bytes(buffer))
        elif state in (State.DO_CLIENT_OPEN, State.DO_CLIENT_CLOSE):
            if self._client is None:
                handler.close()
                return
            if self._client_handler is not None:
                if not self._passive_close:
                    self._client_handler.parent_post(Event(EventKind.CLOSE))
                self._client_handler = None
            if state == State.DO_CLIENT_OPEN:
                status = self._status
                if not self._client.connect(handler, status.peer_endpoint, status.local_endpoint):
                    handler.close()
            else:
                handler.child_post(Event(EventKind.NOTIFY))
        elif state == State.DO_CLIENT_READ:
            if self._client_handler is None:
                handler.close()
            elif self._client_handler.read_buffer.space() == 0:
                handler.child_post(Event(EventKind.READ, 0, _no_buffer_space()))
            else:
                self._client_handler.parent_post(Event(EventKind.READ))
        elif state in (State.DO_CLIENT_WRITE, State.DO_CLIENT_WRITE_READ):
            if self._client_handler is None:
                handler.close()
                return
            child_buffer = self._client_handler.read_buffer
            child_buffer.clear()
            if child_buffer.space() < len(buffer):
                handler.child_post(Event(EventKind.WRITE, 0, _no_buffer_space()))
            else:
                child_buffer.write(bytes(buffer))
                kind = (
                    EventKind.WRITE_READ
                    if state == State.DO_CLIENT_WRITE_READ
                    else EventKind.WRITE
                )
                self._client_handler.parent_post(Event(kind))
        else:
            handler.close()

    def on_set_child(self, handler: Any, client_handler: Any) -> None:
        """Link the child handler of the outgoing connection."""
        if client_handler is None:
            raise ValueError("a child handler is required")
        self._passive_close = False
        self._client_handler = client_handler

    def on_clear(self, handler: Any) -> None:
        """Forget the status of the finished session before reuse."""
        self._status.clear()

    def on_open(self, handler: Any) -> None:
        self._status.clear()
        self._status.remote_endpoint = handler.remote_endpoint()
        self._status.set(State.ON_OPEN)
        handler.read_buffer.clear()
        self._process(handler)
        self.do_io(handler)

    def on_read(self, handler: Any, bytes_transferred: int) -> None:
        self._status.set(State.ON_READ, bytes_transferred)
        handler.read_buffer.produce(bytes_transferred)
        self._process(handler)
        self.do_io(handler)

    def on_write(self, handler: Any, bytes_transferred: int) -> None:
        self._status.set(State.ON_WRITE, bytes_transferred)
        buffer = handler.read_buffer
        buffer.consume(bytes_transferred)
        buffer.crunch()
        self._process(handler)
        self.do_io(handler)

    def on_close(self, handler: Any, error: Optional[BaseException]) -> None:
        if self._client_handler is not None:
            if not self._passive_close:
                self._client_handler.parent_post(Event(EventKind.CLOSE, 0, error))
            self._client_handler = None
        self._status.set(State.ON_CLOSE, 0, error)
        self._process(handler)
        self._status.set(State.NONE)

    def on_child(self, handler: Any, event: Event) -> None:
        """React to an event reported by the child handler."""
        kind = event.kind
        if kind is EventKind.NOTIFY:
            self._status.set(State.ON_NOTIFY)
            self._process(handler)
        elif kind is EventKind.OPEN:
            self._status.child_endpoint = self._client_handler.remote_endpoint()
            self._status.set(State.ON_CLIENT_OPEN)
            self._process(handler)
        elif kind is EventKind.READ:
            self._status.set(State.ON_CLIENT_READ, event.value, event.error)
            self._process(handler, self._client_handler.read_buffer)
        elif kind is EventKind.WRITE:
            self._status.set(State.ON_CLIENT_WRITE, event.value, event.error)
            self._process(handler)
        elif kind is EventKind.CLOSE:
            self._passive_close = True
            self._status.set(State.ON_CLIENT_CLOSE, event.value, event.error)
            self._process(handler)
        else:
            return
        self.do_io(handler)