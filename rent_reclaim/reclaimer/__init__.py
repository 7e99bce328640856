"""
Rent Reclaimer Module
=====================
Finds accounts a fee payer sponsored and returns their rent to a treasury.

Pipeline:
- Discover: fee payer signature history -> unique participant accounts
- Evaluate: closed / empty / inactive tiers, fail-safe on doubt
- Reclaim: live re-check, full-balance transfer, audit record per attempt

Only system-owned accounts are closed; token and other program-owned
accounts need program-specific instructions and are reported as failures.
"""

from rent_reclaim.reclaimer.core import RentReclaimer
from rent_reclaim.reclaimer.models import (
    CycleReport,
    ReclaimableAccount,
    ReclaimReason,
    ReclaimResult,
    RentStats,
    SponsoredAccount,
)
from rent_reclaim.reclaimer.scheduler import ReclaimScheduler

__all__ = [
    'RentReclaimer',
    'ReclaimScheduler',
    'CycleReport',
    'ReclaimableAccount',
    'ReclaimReason',
    'ReclaimResult',
    'RentStats',
    'SponsoredAccount',
]
