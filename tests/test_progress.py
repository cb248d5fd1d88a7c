"""Tests for the periodic progress emitter."""

from __future__ import annotations

import asyncio

from format_converter.progress import ProgressTicker


def test_ticker_steps_up_to_cap():
    values: list[int] = []

    async def run():
        ticker = ProgressTicker(values.append, interval=0.001, step=30, cap=90)
        ticker.start()
        await asyncio.sleep(0.05)
        ticker.stop()
        return ticker.value

    final = asyncio.run(run())

    assert values == [30, 60, 90]
    assert final == 90


def test_ticker_never_emits_after_stop():
    values: list[int] = []

    async def run():
        ticker = ProgressTicker(values.append, interval=0.005, step=5, cap=90)
        ticker.start()
        await asyncio.sleep(0.02)
        ticker.stop()
        seen = len(values)
        assert not ticker.running
        await asyncio.sleep(0.03)
        return seen

    seen = asyncio.run(run())

    assert len(values) == seen


def test_stopped_ticker_cannot_restart():
    values: list[int] = []

    async def run():
        ticker = ProgressTicker(values.append, interval=0.001, step=5, cap=90)
        ticker.stop()
        ticker.start()
        await asyncio.sleep(0.01)

    asyncio.run(run())

    assert values == []


def test_failing_callback_stops_ticker():
    calls: list[int] = []

    def explode(value: int) -> None:
        calls.append(value)
        raise ValueError("ui gone")

    async def run():
        ticker = ProgressTicker(explode, interval=0.001, step=5, cap=90)
        ticker.start()
        await asyncio.sleep(0.02)
        ticker.stop()

    asyncio.run(run())

    assert calls == [5]
