"""A group of worker pools started and stopped together."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable


class PoolIndex(IntEnum):
    """Positions of the pools a server uses."""

    IO_POOL = 0
    WORK_POOL = 1


class ServiceGroup:
    """Holds several pools and drives their start and stop together.

    Each pool made by ``pool_factory`` must provide ``start()``,
    ``stop(force)`` and ``idle()``.
    """

    def __init__(
        self,
        pool_factory: Callable[[], Any],
        group_size: int = PoolIndex.WORK_POOL + 1,
        force_stop: bool = False,
    ) -> None:
        if group_size <= PoolIndex.WORK_POOL:
            raise ValueError(f"group_size must be at least {PoolIndex.WORK_POOL + 1}")
        self._pools = [pool_factory() for _ in range(group_size)]
        self._force_stop = force_stop
        self._started = False

    @property
    def started(self) -> bool:
        """Whether the group is running."""
        return self._started

    @property
    def force_stop(self) -> bool:
        """Whether stop() abandons pending work."""
        return self._force_stop

    def set_force_stop(self, force_stop: bool = False) -> ServiceGroup:
        """Choose graceful or forced stop; ignored while the group runs."""
        if not self._started:
            self._force_stop = force_stop
        return self

    def get(self, index: int) -> Any:
        """Return the pool at ``index``."""
        if not 0 <= index < len(self._pools):
            raise IndexError(f"no pool at index {index}")
        return self._pools[index]

    def start(self) -> None:
        """Start every pool, last to first."""
        if self._started:
            return
        for pool in reversed(self._pools):
            pool.start()
        self._started = True

    def stop(self) -> None:
        """Stop every pool; a graceful stop repeats until all pools are idle."""
        if not self._started:
            return
        for pool in reversed(self._pools):
            pool.stop(self._force_stop)

        while not self._force_stop:
            if all(pool.idle() for pool in reversed(self._pools)):
                break
            for pool in reversed(self._pools):
                pool.start()
            for pool in reversed(self._pools):
                pool.stop(False)

        self._started = False

    def close(self) -> None:
        """Stop the group and release its pools."""
        self.stop()
        self._pools.clear()

    def __enter__(self) -> ServiceGroup:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()