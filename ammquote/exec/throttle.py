"""Debounce with generation tagging.

Each request takes a generation number. A request is only worth finishing
while its generation is still the newest one; anything older is stale.
"""

from __future__ import annotations

import asyncio


class Debouncer:
    def __init__(self, wait_s: float = 0.0):
        self.wait_s = max(0.0, wait_s)
        self.generation = 0

    def next(self) -> int:
        self.generation += 1
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    async def settle(self, generation: int) -> bool:
        """Wait out the debounce window; True if no newer request arrived meanwhile."""
        if self.wait_s > 0:
            await asyncio.sleep(self.wait_s)
        return self.is_current(generation)
