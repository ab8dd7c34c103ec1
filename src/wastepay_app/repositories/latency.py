"""Simulated network round-trip awaited by every repository operation."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from wastepay_app.core.config import AppConfig


class SimulatedLatency:
    """Awaitable delay with an injectable sleep function."""

    def __init__(
        self,
        seconds: float = 0.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.seconds = seconds
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: AppConfig) -> "SimulatedLatency":
        return cls(seconds=config.repository.latency_ms / 1000)

    async def __call__(self) -> None:
        await self._sleep(self.seconds)
