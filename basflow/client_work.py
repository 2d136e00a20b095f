"""Client-side work object that relays I/O events to its parent server handler."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Protocol


class EventKind(Enum):
    """Kinds of events passed between a server handler and its child handler."""

    NONE = auto()
    OPEN = auto()
    READ = auto()
    WRITE = auto()
    WRITE_READ = auto()
    CLOSE = auto()
    NOTIFY = auto()


@dataclass(frozen=True)
class Event:
    """An event posted between linked handlers."""

    kind: EventKind = EventKind.NONE
    value: int = 0
    error: Optional[BaseException] = None


class _IoBuffer(Protocol):
    def clear(self) -> None: ...
    def produce(self, count: int) -> None: ...
    def consume(self, count: int) -> None: ...
    def crunch(self) -> None: ...
    def space(self) -> int: ...
    def write(self, data: bytes) -> None: ...
    def __len__(self) -> int: ...
    def __bytes__(self) -> bytes: ...


class _Handler(Protocol):
    read_buffer: _IoBuffer

    def async_read_some(self) -> None: ...
    def async_write(self, data: bytes) -> None: ...
    def close(self) -> None: ...
    def child_post(self, event: Event) -> None: ...
    def parent_post(self, event: Event) -> None: ...
    def remote_endpoint(self) -> object: ...


class ClientWork:
    """Handles a client connection on behalf of a server handler.

    Completed operations are reported to the parent through
    ``child_post``; requests from the parent arrive via :meth:`on_parent`.
    """

    def __init__(self) -> None:
        self._server_handler: Optional[_Handler] = None
        self._event = Event()
        self._passive_close = False

    @property
    def server_handler(self) -> Optional[_Handler]:
        """The parent handler, or None when not linked."""
        return self._server_handler

    def _parent(self) -> _Handler:
        if self._server_handler is None:
            raise RuntimeError("client work has no parent handler")
        return self._server_handler

    def on_set_parent(self, handler: _Handler, server_handler: _Handler) -> None:
        """Link this work to its parent handler."""
        if server_handler is None:
            raise ValueError("a parent handler is required")
        self._passive_close = False
        self._server_handler = server_handler

    def on_clear(self, handler: _Handler) -> None:
        """Forget the last request from the parent before the work is reused."""
        self._event = Event()

    def on_open(self, handler: _Handler) -> None:
        parent = self._parent()
        handler.read_buffer.clear()
        parent.child_post(Event(EventKind.OPEN))

    def on_read(self, handler: _Handler, bytes_transferred: int) -> None:
        parent = self._parent()
        handler.read_buffer.produce(bytes_transferred)
        parent.child_post(Event(EventKind.READ, bytes_transferred))

    def on_write(self, handler: _Handler, bytes_transferred: int) -> None:
        parent = self._parent()
        buffer = handler.read_buffer
        buffer.consume(bytes_transferred)
        buffer.crunch()
        if self._event.kind is EventKind.WRITE_READ:
            handler.async_read_some()
        else:
            parent.child_post(Event(EventKind.WRITE, bytes_transferred))

    def on_close(self, handler: _Handler, error: Optional[BaseException]) -> None:
        if self._server_handler is None:
            return
        if not self._passive_close:
            self._server_handler.child_post(Event(EventKind.CLOSE, 0, error))
        self._server_handler = None

    def on_parent(self, handler: _Handler, event: Event) -> None:
        """Carry out a request from the parent handler."""
        self._parent()
        self._event = event
        kind = event.kind
        if kind is EventKind.CLOSE:
            self._passive_close = True
            handler.close()
        elif kind in (EventKind.WRITE, EventKind.WRITE_READ):
            handler.async_write(bytes(handler.read_buffer))
        elif kind is EventKind.READ:
            handler.async_read_some()