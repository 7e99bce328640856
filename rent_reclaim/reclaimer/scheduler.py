"""
Scheduled reclaim runner.

Runs the full cycle every ``scan_interval_minutes``. A failing cycle is
logged and the loop carries on with the next tick.
"""

import asyncio
from typing import List, Optional

from rent_reclaim.reclaimer.classification import lamports_to_sol
from rent_reclaim.reclaimer.core import RentReclaimer, SleepFn
from rent_reclaim.reclaimer.models import CycleReport
from rent_reclaim.shared.system.logging import Logger


class ReclaimScheduler:
    def __init__(
        self,
        reclaimer: RentReclaimer,
        interval_minutes: Optional[float] = None,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.reclaimer = reclaimer
        self.interval_minutes = (
            interval_minutes if interval_minutes is not None
            else reclaimer.config.scan_interval_minutes
        )
        self._sleep = sleep
        self.cycles_run = 0
        self.cycles_failed = 0

    async def run_once(self) -> Optional[CycleReport]:
        try:
            report = await self.reclaimer.run_full_cycle()
        except Exception as e:
            self.cycles_failed += 1
            Logger.error(f"[SCHEDULER] Cycle failed: {e}", error=str(e))
            return None
        finally:
            self.cycles_run += 1

        Logger.info(
            f"[SCHEDULER] Cycle {self.cycles_run}: {len(report.successful)} reclaimed, "
            f"{len(report.failed)} failed, {lamports_to_sol(report.total_reclaimed):.6f} SOL"
        )
        return report

    async def run_loop(self, max_cycles: Optional[int] = None) -> List[Optional[CycleReport]]:
        """Run until cancelled, or until ``max_cycles`` cycles have run."""
        Logger.section("Rent Reclaim Scheduler Started")
        Logger.info(f"[SCHEDULER] Interval: every {self.interval_minutes} minutes")

        reports: List[Optional[CycleReport]] = []
        while max_cycles is None or len(reports) < max_cycles:
            reports.append(await self.run_once())
            if max_cycles is not None and len(reports) >= max_cycles:
                break
            await self._sleep(self.interval_minutes * 60)

        Logger.info(f"[SCHEDULER] Stopped after {self.cycles_run} cycles")
        return reports
