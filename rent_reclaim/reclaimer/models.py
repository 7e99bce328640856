"""
Reclaimer Data Model
====================
Immutable snapshots passed between Discover -> Evaluate -> Reclaim.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ReclaimReason(Enum):
    """Why an account was flagged as reclaimable."""

    CLOSED = "closed"
    EMPTY = "empty"
    INACTIVE = "inactive"

    @property
    def description(self) -> str:
        return _REASON_DESCRIPTIONS[self]


_REASON_DESCRIPTIONS = {
    ReclaimReason.CLOSED: "Account is closed (zero balance)",
    ReclaimReason.EMPTY: "Account data is empty",
    ReclaimReason.INACTIVE: "Account inactive for extended period",
}


@dataclass(frozen=True)
class SponsoredAccount:
    """Raw on-chain state of a single sponsored account at discovery time."""

    address: str
    lamports: int
    owner: str  # program that owns the account, "" when gone
    executable: bool
    data_length: int  # bytes of on-chain data
    last_activity: Optional[int] = None  # unix seconds


@dataclass(frozen=True)
class ReclaimableAccount:
    """A sponsored account that passed the safety checks."""

    account: SponsoredAccount
    reason: ReclaimReason
    estimated_rent: int  # lamports we expect to recover

    @property
    def address(self) -> str:
        return self.account.address

    @property
    def lamports(self) -> int:
        return self.account.lamports


@dataclass(frozen=True)
class ReclaimResult:
    """Outcome of one reclaim attempt."""

    success: bool
    account_address: str
    reclaimed_amount: int  # lamports actually moved (0 on failure)
    signature: Optional[str] = None
    error: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def ok(cls, address: str, amount: int, signature: str, timestamp: float) -> "ReclaimResult":
        return cls(True, address, amount, signature=signature, timestamp=timestamp)

    @classmethod
    def failed(cls, address: str, error: str, timestamp: float) -> "ReclaimResult":
        return cls(False, address, 0, error=error, timestamp=timestamp)


@dataclass(frozen=True)
class RentStats:
    """Aggregated numbers shown by the stats command."""

    total_accounts_monitored: int = 0
    total_rent_locked: int = 0  # lamports
    total_rent_reclaimed: int = 0  # lamports, process lifetime
    reclaimable_accounts: int = 0
    estimated_reclaimable: int = 0  # lamports
    last_scan_time: float = 0.0  # unix seconds, 0 when no cycle has completed


@dataclass(frozen=True)
class CycleReport:
    """Everything one discover/evaluate/reclaim cycle produced."""

    scanned: List[SponsoredAccount]
    reclaimable: List[ReclaimableAccount]
    results: List[ReclaimResult]

    @property
    def successful(self) -> List[ReclaimResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> List[ReclaimResult]:
        return [r for r in self.results if not r.success]

    @property
    def total_reclaimed(self) -> int:
        return sum(r.reclaimed_amount for r in self.successful)
