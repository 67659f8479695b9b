"""
Debounce helper for keystroke-driven searches.

Only the last call within the wait window runs. A call that already started
(its wait elapsed) is never cancelled by later calls; superseded results are
dealt with by the ViewController's generation check instead.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Delay calls to an async function until input settles.

    Usage:
        debounced = Debouncer(controller.search_by_name, wait=0.3)
        debounced("chi")
        task = debounced("chicken")   # only this one runs
        await task
    """

    def __init__(self, func: Callable[..., Awaitable[Any]], wait: float) -> None:
        self.func = func
        self.wait = wait
        self._pending: Optional[asyncio.Task] = None

    def __call__(self, *args: Any, **kwargs: Any) -> asyncio.Task:
        """Schedule a call, dropping any call still waiting. Needs a running event loop."""
        self.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._run(args, kwargs))
        return self._pending

    def cancel(self) -> None:
        """Drop the call still waiting, if any."""
        if self._pending is not None and not self._pending.done():
            logger.debug("Debounced call superseded")
            self._pending.cancel()
        self._pending = None

    async def _run(self, args: tuple, kwargs: dict) -> Any:
        await asyncio.sleep(self.wait)
        # Past the wait: from here on later calls must not cancel us
        if self._pending is asyncio.current_task():
            self._pending = None
        return await self.func(*args, **kwargs)
