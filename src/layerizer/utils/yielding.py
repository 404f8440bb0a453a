"""Cooperative yield hooks for long pixel loops.

Pixel loops call an optional hook at fixed intervals so that a host
event loop or UI thread gets a chance to run. A hook may raise to abort
the run; the exception propagates unchanged.
"""

from collections.abc import Callable

YieldHook = Callable[[], None]

# Flood fill calls the hook once per this many steps.
FLOOD_FILL_YIELD_INTERVAL = 0x4000

# Marching squares calls the hook once per this many rows.
SCAN_YIELD_ROWS = 32


class YieldCounter:
    """Calls a hook every ``interval`` ticks.

    Example:
        counter = YieldCounter(on_yield, FLOOD_FILL_YIELD_INTERVAL)
        for item in work:
            counter.tick()
    """

    __slots__ = ("_count", "_hook", "_interval")

    def __init__(self, hook: YieldHook | None, interval: int) -> None:
        self._hook = hook
        self._interval = interval
        self._count = 0

    def tick(self) -> None:
        """Advance one step, yielding on the first step of every interval."""
        if self._hook is None:
            return
        if self._count % self._interval == 0:
            self._hook()
        self._count += 1
