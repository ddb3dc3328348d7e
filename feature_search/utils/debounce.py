import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)

_UNSET = object()


class Debouncer:
    """
    Cancel-replace debounce for a stream of string values.

    Every submitted value restarts a timer of `delay` seconds. Only a value that
    stays unchanged for the whole delay reaches the callback, and only if it
    differs from the last value that reached it.

    :param delay: Quiet period in seconds.
    :param callback: Coroutine function called with each debounced value.
    """

    def __init__(self, delay: float, callback: Callable[[str], Awaitable[None]]):
        self.delay = delay
        self._callback = callback
        self._pending: Optional[asyncio.Task] = None
        self._last_emitted = _UNSET
        self._firing: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def submit(self, value: str) -> None:
        """
        Start the timer for `value`, discarding any timer still running.
        Must be called with a running event loop.
        """
        self.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._fire(value))

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def close(self) -> None:
        """Cancel the pending timer and any callback it already started."""
        self.cancel()
        for task in list(self._firing):
            task.cancel()

    async def _fire(self, value: str) -> None:
        await asyncio.sleep(self.delay)
        # Past this point a newer submit must not cancel the running callback.
        task = asyncio.current_task()
        self._pending = None
        self._firing.add(task)
        task.add_done_callback(self._firing.discard)
        if value == self._last_emitted:
            logger.debug(f"Skipping duplicate query {value!r}")
            return
        self._last_emitted = value
        await self._callback(value)
