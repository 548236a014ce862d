"""
Tests for the request abort signal.
"""
import asyncio

import pytest

from core.abort import AbortSignal
from core.exceptions import AbortedError


class TestAbortSignal:
    def test_abort_keeps_first_reason(self):
        signal = AbortSignal()

        signal.abort("first")
        signal.abort("second")

        assert signal.aborted
        assert signal.reason == "first"

    @pytest.mark.asyncio
    async def test_guard_returns_result(self):
        async def work():
            return 42

        assert await AbortSignal().guard(work()) == 42

    @pytest.mark.asyncio
    async def test_guard_propagates_errors(self):
        async def work():
            raise ValueError("bad")

        with pytest.raises(ValueError):
            await AbortSignal().guard(work())

    @pytest.mark.asyncio
    async def test_guard_raises_when_already_aborted(self):
        signal = AbortSignal()
        signal.abort("gone")

        with pytest.raises(AbortedError, match="gone"):
            await signal.guard(asyncio.sleep(10))

    @pytest.mark.asyncio
    async def test_guard_cancels_pending_work(self):
        signal = AbortSignal()
        cancelled = asyncio.Event()

        async def work():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        asyncio.get_running_loop().call_later(0.01, signal.abort, "Stopped by user")

        with pytest.raises(AbortedError, match="Stopped by user"):
            await signal.guard(work())
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_outer_cancel_waits_for_work(self):
        signal = AbortSignal()
        started = asyncio.Event()
        finished = asyncio.Event()

        async def work():
            started.set()
            try:
                await asyncio.sleep(10)
            finally:
                await asyncio.sleep(0)
                finished.set()

        task = asyncio.create_task(signal.guard(work()))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert finished.is_set()
