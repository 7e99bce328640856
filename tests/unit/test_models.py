"""
Tests for reclaimer value types.
"""

from rent_reclaim.reclaimer.models import (
    CycleReport,
    ReclaimableAccount,
    ReclaimReason,
    ReclaimResult,
    RentStats,
    SponsoredAccount,
)


def test_reason_descriptions():
    assert ReclaimReason.CLOSED.description == "Account is closed (zero balance)"
    assert ReclaimReason.EMPTY.description == "Account data is empty"
    assert ReclaimReason.INACTIVE.description == "Account inactive for extended period"


def test_reclaimable_exposes_account_fields():
    acct = SponsoredAccount("Acct", 2_000_000, "owner", False, 0)
    candidate = ReclaimableAccount(acct, ReclaimReason.EMPTY, 2_000_000)

    assert candidate.address == "Acct"
    assert candidate.lamports == 2_000_000


def test_failed_result_moves_nothing():
    result = ReclaimResult.failed("Acct", "boom", timestamp=1.0)

    assert not result.success
    assert result.reclaimed_amount == 0
    assert result.signature is None
    assert result.error == "boom"


def test_cycle_report_totals():
    report = CycleReport(
        scanned=[],
        reclaimable=[],
        results=[
            ReclaimResult.ok("A", 2_000_000, "SigA", timestamp=1.0),
            ReclaimResult.failed("B", "boom", timestamp=2.0),
            ReclaimResult.ok("C", 3_000_000, "SigC", timestamp=3.0),
        ],
    )

    assert [r.account_address for r in report.successful] == ["A", "C"]
    assert [r.account_address for r in report.failed] == ["B"]
    assert report.total_reclaimed == 5_000_000


def test_empty_stats():
    stats = RentStats()

    assert stats.total_accounts_monitored == 0
    assert stats.last_scan_time == 0.0
