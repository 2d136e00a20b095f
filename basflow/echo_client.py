"""Echo test client work: send a message, read the echo back, and count failures."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional, Protocol

from basflow.error_count import ErrorCount

ECHO_MESSAGE = b"echo server test message.....\r\n"


class _Timer(Protocol):
    def start(self) -> None: ...
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], _Timer]


def _thread_timer(interval: float, function: Callable[[], None]) -> _Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class EchoClientWork:
    """Sends the echo message, optionally after a pause, and checks the reply."""

    def __init__(
        self,
        counter: ErrorCount,
        pause_time: int = 0,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self._counter = counter
        self._pause_time = pause_time
        self._timer_factory = timer_factory or _thread_timer
        self._timer: Optional[_Timer] = None
        self.last_parent_event: Any = None
        self.last_child_event: Any = None

    @property
    def pause_time(self) -> int:
        """Seconds to wait after connecting before sending."""
        return self._pause_time

    @property
    def error_count(self) -> ErrorCount:
        """The shared counter of timeouts and failures."""
        return self._counter

    @property
    def waiting(self) -> bool:
        """Whether a delayed send is still pending."""
        return self._timer is not None

    def on_clear(self, handler: Any) -> None:
        """Drop any pending delayed send and recorded events before reuse."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.last_parent_event = None
        self.last_child_event = None

    def handle_timeout(self, handler: Any, cancelled: bool = False) -> None:
        """Send the message once the pause has elapsed."""
        if cancelled:
            return
        if self._timer is not None:
            handler.async_write(ECHO_MESSAGE)

    def on_open(self, handler: Any) -> None:
        handler.read_buffer.clear()
        if self._pause_time:
            self._timer = self._timer_factory(
                float(self._pause_time), lambda: self.handle_timeout(handler, False)
            )
            self._timer.start()
        else:
            handler.async_write(ECHO_MESSAGE)

    def on_read(self, handler: Any, bytes_transferred: int) -> None:
        handler.read_buffer.produce(bytes_transferred)
        handler.close()

    def on_write(self, handler: Any, bytes_transferred: int) -> None:
        self._timer = None
        handler.async_read_some()

    def on_close(self, handler: Any, error: Optional[BaseException]) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if isinstance(error, TimeoutError):
            self._counter.timeout()
        if bytes(handler.read_buffer) != ECHO_MESSAGE:
            self._counter.error()

    def on_parent(self, handler: Any, event: Any) -> None:
        """Record an event from a parent handler; it triggers no I/O."""
        self.last_parent_event = event

    def on_child(self, handler: Any, event: Any) -> None:
        """Record an event from a child handler; it triggers no I/O."""
        self.last_child_event = event


class EchoClientWorkAllocator:
    """Makes echo client work objects sharing one counter and pause time."""

    def __init__(
        self,
        counter: ErrorCount,
        pause_time: int = 0,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self._counter = counter
        self._pause_time = pause_time
        self._timer_factory = timer_factory

    def make_handler(self) -> EchoClientWork:
        """Return a new work object."""
        return EchoClientWork(self._counter, self._pause_time, self._timer_factory)