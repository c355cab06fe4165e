"""
Unit tests — shutdown helper (main.py).
"""
from __future__ import annotations

import asyncio
import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock

from regbot.main import request_stop


async def _settle(task: asyncio.Task) -> None:
    await asyncio.wait({task})
    await asyncio.sleep(0)


async def test_stop_task_held_until_done() -> None:
    dp = SimpleNamespace(stop_polling=AsyncMock())
    pending: set[asyncio.Task] = set()

    task = request_stop(dp, pending)
    assert task in pending

    await _settle(task)
    assert pending == set()
    dp.stop_polling.assert_awaited_once()


async def test_stop_failure_is_logged(caplog) -> None:
    dp = SimpleNamespace(stop_polling=AsyncMock(side_effect=RuntimeError("Polling is not started")))
    pending: set[asyncio.Task] = set()

    with caplog.at_level(logging.ERROR, logger="regbot.main"):
        task = request_stop(dp, pending)
        await _settle(task)

    assert pending == set()
    assert "Stopping polling failed: Polling is not started" in caplog.text
