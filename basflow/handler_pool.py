"""A thread-safe pool of reusable service handlers with watermark-driven growth."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

POOL_INIT_SIZE = 1000
POOL_LOW_WATERMARK = 0
POOL_HIGH_WATERMARK = 5000
POOL_INCREMENT = 500
POOL_MAXIMUM = 50000


class ServiceHandlerPool:
    """Keeps idle handlers ready for use and creates more on demand.

    Handlers are made by ``factory``. When the number of idle handlers drops to
    ``low_watermark`` and fewer than ``maximum`` handlers exist, ``increment``
    new handlers are made. Idle handlers beyond ``high_watermark`` are dropped.
    """

    def __init__(
        self,
        factory: Callable[[], Any],
        init_size: int = POOL_INIT_SIZE,
        low_watermark: int = POOL_LOW_WATERMARK,
        high_watermark: int = POOL_HIGH_WATERMARK,
        increment: int = POOL_INCREMENT,
        maximum: int = POOL_MAXIMUM,
    ) -> None:
        if factory is None:
            raise ValueError("a handler factory is required")
        if init_size <= 0:
            raise ValueError("init_size must be positive")
        if low_watermark < 0 or low_watermark > init_size:
            raise ValueError("low_watermark must be between 0 and init_size")
        if high_watermark <= low_watermark:
            raise ValueError("high_watermark must exceed low_watermark")
        if maximum <= high_watermark:
            raise ValueError("maximum must exceed high_watermark")
        if increment <= 0:
            raise ValueError("increment must be positive")

        self._factory = factory
        self._init_size = init_size
        self._low_watermark = low_watermark
        self._high_watermark = high_watermark
        self._increment = increment
        self._maximum = maximum

        self._lock = threading.Lock()
        self._idle: list[Any] = []
        self._count = 0
        self._closed = True

    def init(self) -> None:
        """Open the pool and create the preallocated handlers."""
        with self._lock:
            self._closed = False
            self._create(self._init_size)

    def close(self) -> None:
        """Close the pool and drop every idle handler."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._idle.clear()

    def acquire(self) -> Optional[Any]:
        """Take a handler from the pool, or return None when none can be had."""
        with self._lock:
            if self._closed:
                return None
            if len(self._idle) <= self._low_watermark and self._count < self._maximum:
                self._create(self._increment)
            if not self._idle:
                return None
            return self._idle.pop()

    def release(self, handler: Any) -> None:
        """Reset ``handler`` and return it to the pool."""
        if handler is None:
            raise ValueError("cannot release None")
        clear = getattr(handler, "clear", None)
        if callable(clear):
            clear()
        with self._lock:
            if not self._push(handler):
                self._count -= 1

    def get_load(self) -> int:
        """Return the number of handlers currently in use."""
        with self._lock:
            return self._count - len(self._idle)

    def handler_count(self) -> int:
        """Return the number of handlers owned by the pool."""
        with self._lock:
            return self._count

    def _push(self, handler: Any) -> bool:
        if self._closed or len(self._idle) >= self._high_watermark:
            return False
        self._idle.append(handler)
        return True

    def _create(self, count: int) -> None:
        for _ in range(count):
            if self._push(self._factory()):
                self._count += 1