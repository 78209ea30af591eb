"""
Per-provider cooldown applied after each genuine external lookup.
"""
from __future__ import annotations

import time
from typing import Callable, Dict


class RateLimiter:
    def __init__(self, sleep: Callable[[float], None] = time.sleep) -> None:
        self._limits: Dict[str, float] = {}
        self._sleep = sleep

    def configure(self, key: str, min_interval: float) -> None:
        self._limits[key] = min_interval

    def cooldown(self, key: str) -> None:
        interval = self._limits.get(key)
        if interval:
            self._sleep(interval)
