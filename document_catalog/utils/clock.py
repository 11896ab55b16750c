"""Clock abstractions used to drive simulated upload timing."""

import asyncio
from datetime import date, timedelta
from typing import Optional


class Clock:
    """Wall-clock backed scheduler."""

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    def today(self) -> date:
        return date.today()


class VirtualClock(Clock):
    """
    Deterministic clock for tests and simulations.

    ``sleep`` advances a virtual timeline instead of waiting and only yields
    control to the event loop, so a full simulated upload finishes in a few
    loop iterations. ``today`` is derived from the start date plus the
    elapsed virtual seconds.
    """

    def __init__(self, start: Optional[date] = None):
        self.start = start or date.today()
        self.elapsed = 0.0
        self.sleeps = 0

    async def sleep(self, seconds: float) -> None:
        self.elapsed += max(seconds, 0.0)
        self.sleeps += 1
        await asyncio.sleep(0)

    def today(self) -> date:
        return self.start + timedelta(seconds=self.elapsed)
