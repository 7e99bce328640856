"""
Tests for the interval-driven cycle runner.
"""

import pytest

from rent_reclaim.reclaimer.scheduler import ReclaimScheduler


@pytest.fixture
def pauses():
    return []


@pytest.fixture
def scheduler(reclaimer, pauses):
    async def fake_sleep(seconds):
        pauses.append(seconds)

    return ReclaimScheduler(reclaimer, interval_minutes=5, sleep=fake_sleep)


class TestReclaimScheduler:

    def test_interval_defaults_to_config(self, reclaimer):
        assert ReclaimScheduler(reclaimer).interval_minutes == reclaimer.config.scan_interval_minutes

    @pytest.mark.asyncio
    async def test_runs_capped_number_of_cycles(self, scheduler, pauses):
        reports = await scheduler.run_loop(max_cycles=3)

        assert len(reports) == 3
        assert all(r is not None for r in reports)
        assert scheduler.cycles_run == 3
        assert scheduler.cycles_failed == 0
        # No pause after the final cycle
        assert pauses == [300, 300]

    @pytest.mark.asyncio
    async def test_failed_cycle_does_not_stop_loop(self, scheduler, reclaimer, monkeypatch):
        calls = []
        real_cycle = reclaimer.run_full_cycle

        async def flaky_cycle():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("RPC node down")
            return await real_cycle()

        monkeypatch.setattr(reclaimer, "run_full_cycle", flaky_cycle)

        reports = await scheduler.run_loop(max_cycles=2)

        assert reports[0] is None
        assert reports[1] is not None
        assert scheduler.cycles_run == 2
        assert scheduler.cycles_failed == 1

    @pytest.mark.asyncio
    async def test_run_once_updates_scan_time(self, scheduler, reclaimer):
        from tests.mocks.mock_ledger import NOW

        report = await scheduler.run_once()

        assert report.results == []
        assert reclaimer.last_scan_time == float(NOW)
