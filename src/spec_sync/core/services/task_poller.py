"""Polling of asynchronous Postman tasks.

Timeout is not an error: the last snapshot (possibly non-terminal) is
returned and the caller decides what to do with it.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable

from loguru import logger

from spec_sync.core.domain.models import AsyncTask

TaskFetcher = Callable[[str], Awaitable[AsyncTask]]
Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]

DEFAULT_INTERVAL_SECONDS = 3.0
DEFAULT_TIMEOUT_SECONDS = 180.0


class TaskPoller:
    def __init__(
        self,
        fetch: TaskFetcher,
        *,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._fetch = fetch
        self.interval = interval
        self.timeout = timeout
        self._clock = clock
        self._sleep = sleep

    async def poll(self, task_url: str) -> AsyncTask | None:
        """Fetch `task_url` until a terminal status or until the timeout elapses."""

        start = self._clock()
        last: AsyncTask | None = None
        attempt = 0
        while self._clock() - start < self.timeout:
            attempt += 1
            last = await self._fetch(task_url)
            logger.debug(f"Task {task_url} poll #{attempt}: status={last.status}")
            if last.is_terminal:
                return last
            await self._sleep(self.interval)

        logger.warning(
            f"Task {task_url} did not finish within {self.timeout:.0f}s "
            f"(last status: {last.status if last else 'unknown'})"
        )
        return last
