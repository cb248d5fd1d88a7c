"""Periodic progress emitter shown while a conversion is outstanding."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class ProgressTicker:
    """Raise a percentage by ``step`` every ``interval`` seconds up to ``cap``.

    The value is cosmetic; it does not track how much work is left. Once
    ``stop`` returns the callback is never invoked again.
    """

    def __init__(
        self,
        emit: ProgressCallback,
        *,
        interval: float,
        step: int,
        cap: int,
        start: int = 0,
    ) -> None:
        self._emit = emit
        self._interval = interval
        self._step = step
        self._cap = cap
        self._value = start
        self._stopped = False
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def value(self) -> int:
        return self._value

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None or self._stopped:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        self._stopped = True
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while not self._stopped:
            await asyncio.sleep(self._interval)
            if self._stopped or self._value >= self._cap:
                continue
            self._value = min(self._value + self._step, self._cap)
            try:
                self._emit(self._value)
            except Exception:
                logger.exception("Progress callback failed; stopping ticker")
                self._stopped = True
