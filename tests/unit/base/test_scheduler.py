"""Tests for write coalescing and refresh throttling."""

import asyncio

import pytest

from climasync import KeyedScheduler, RefreshThrottle, WriteCoalescer

from tests.unit.mocks import RecordingRefresh


@pytest.mark.unit
class TestKeyedScheduler:
    """Test delayed per-key execution."""

    async def test_latest_request_wins(self):
        """Rapid requests for one key collapse into the last one."""
        scheduler = KeyedScheduler()
        ran = []

        for value in (1, 2, 3):

            async def task(value=value):
                ran.append(value)

            assert scheduler.schedule("speed", 0.02, task) is True

        assert scheduler.is_pending("speed")
        await scheduler.wait_idle()

        assert ran == [3]
        assert not scheduler.is_busy("speed")

    async def test_keys_are_independent(self):
        scheduler = KeyedScheduler()
        ran = []

        async def first():
            ran.append("a")

        async def second():
            ran.append("b")

        scheduler.schedule("a", 0.01, first)
        scheduler.schedule("b", 0.01, second)
        await scheduler.wait_idle()

        assert sorted(ran) == ["a", "b"]

    async def test_request_dropped_while_processing(self):
        """A key whose task is running accepts no new request."""
        scheduler = KeyedScheduler()
        release = asyncio.Event()
        ran = []

        async def slow():
            ran.append("slow")
            await release.wait()

        async def late():
            ran.append("late")

        scheduler.schedule("speed", 0, slow)
        await asyncio.sleep(0.01)

        assert scheduler.is_processing("speed")
        assert scheduler.schedule("speed", 0, late) is False

        release.set()
        await scheduler.wait_idle()
        assert ran == ["slow"]

        # The key accepts requests again once the task finished.
        assert scheduler.schedule("speed", 0, late) is True
        await scheduler.wait_idle()
        assert ran == ["slow", "late"]

    async def test_failing_task_is_logged(self, caplog):
        scheduler = KeyedScheduler()

        async def broken():
            raise RuntimeError("boom")

        scheduler.schedule("speed", 0, broken)
        await scheduler.wait_idle()

        assert "Scheduled task for speed failed" in caplog.text
        assert not scheduler.is_busy("speed")

    async def test_shutdown_cancels_pending(self):
        scheduler = KeyedScheduler()
        ran = []

        async def task():
            ran.append(1)

        scheduler.schedule("speed", 10, task)
        await scheduler.shutdown()

        assert ran == []
        assert not scheduler.is_busy("speed")


@pytest.mark.unit
class TestWriteCoalescer:
    """Test the write coalescer built on KeyedScheduler."""

    async def test_coalesces_writes(self):
        coalescer = WriteCoalescer(0.02)
        sent = []

        for value in (3, 6, 9):

            async def send(value=value):
                sent.append(value)

            coalescer.submit(("dev", 1, "mode", "onSpeed"), send)

        await coalescer.wait_idle()
        assert sent == [9]

    async def test_cancel_all(self):
        coalescer = WriteCoalescer(10)
        sent = []

        async def send():
            sent.append(1)

        coalescer.submit("key", send)
        coalescer.cancel_all()
        await coalescer.wait_idle()

        assert sent == []


@pytest.mark.unit
class TestRefreshThrottle:
    """Test refresh rate limiting."""

    async def test_requests_absorbed_while_pending(self):
        refresh = RecordingRefresh()
        throttle = RefreshThrottle(refresh, settle=0.01, cooldown=0.05)

        assert throttle.request() is True
        assert throttle.request() is False
        assert throttle.pending

        await throttle.wait_idle()
        assert refresh.calls == 1
        assert not throttle.pending

    async def test_cooldown_keeps_flag_set(self):
        refresh = RecordingRefresh()
        throttle = RefreshThrottle(refresh, settle=0, cooldown=0.2)

        throttle.request()
        await asyncio.sleep(0.05)

        assert refresh.calls == 1
        assert throttle.pending
        assert throttle.request() is False

        await throttle.wait_idle()
        assert throttle.request() is True
        await throttle.wait_idle()
        assert refresh.calls == 2

    async def test_failed_refresh_clears_flag(self, caplog):
        refresh = RecordingRefresh(error=RuntimeError("offline"))
        throttle = RefreshThrottle(refresh, settle=0, cooldown=0.01)

        throttle.request()
        await throttle.wait_idle()

        assert refresh.calls == 1
        assert not throttle.pending
        assert "Throttled refresh failed" in caplog.text

    async def test_run_now_skips_when_pending(self):
        refresh = RecordingRefresh()
        throttle = RefreshThrottle(refresh, settle=0.05, cooldown=0.01)

        throttle.request()
        assert await throttle.run_now() is False
        await throttle.wait_idle()
        assert refresh.calls == 1

        assert await throttle.run_now() is True
        assert refresh.calls == 2
        assert not throttle.pending

    async def test_run_now_propagates_errors(self):
        refresh = RecordingRefresh(error=RuntimeError("offline"))
        throttle = RefreshThrottle(refresh, settle=0, cooldown=0)

        with pytest.raises(RuntimeError):
            await throttle.run_now()
        assert not throttle.pending
