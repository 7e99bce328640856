"""
Reclaim Execution Tests
=======================
Live precondition checks, transfer outcomes, lifetime counter, batching.
"""

import pytest

from rent_reclaim.reclaimer.models import ReclaimableAccount, ReclaimReason, SponsoredAccount
from rent_reclaim.shared.infrastructure.ledger_gateway import SYSTEM_PROGRAM_ID

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"


def candidate(address, estimated, reason=ReclaimReason.EMPTY):
    acct = SponsoredAccount(address, estimated, SYSTEM_PROGRAM_ID, False, 0)
    return ReclaimableAccount(acct, reason, estimated)


class TestReclaimOne:

    @pytest.mark.asyncio
    async def test_success_moves_live_balance(self, reclaimer, ledger, treasury):
        ledger.set_account("Acct", lamports=2_100_000)

        result = await reclaimer.reclaim_one(candidate("Acct", 2_000_000))

        assert result.success
        assert result.reclaimed_amount == 2_100_000
        assert result.signature == "MOCK_TX_SIG_1"
        assert result.error is None
        assert ledger.transfers == [("Acct", treasury, 2_100_000, "MOCK_TX_SIG_1")]
        assert reclaimer.lifetime_reclaimed == 2_100_000

    @pytest.mark.asyncio
    async def test_missing_account_fails(self, reclaimer, ledger):
        result = await reclaimer.reclaim_one(candidate("Gone", 2_000_000, ReclaimReason.CLOSED))

        assert not result.success
        assert result.reclaimed_amount == 0
        assert result.signature is None
        assert "does not exist" in result.error
        assert ledger.transfers == []

    @pytest.mark.asyncio
    async def test_zero_balance_fails(self, reclaimer, ledger):
        ledger.set_account("Drained", lamports=0)

        result = await reclaimer.reclaim_one(candidate("Drained", 2_000_000))

        assert not result.success
        assert "zero balance" in result.error

    @pytest.mark.asyncio
    async def test_program_owned_account_fails_naming_owner(self, reclaimer, ledger):
        ledger.set_account("TokenAcct", lamports=2_039_280, owner=TOKEN_PROGRAM_ID, data_length=165)

        result = await reclaimer.reclaim_one(candidate("TokenAcct", 2_039_280))

        assert not result.success
        assert result.reclaimed_amount == 0
        assert TOKEN_PROGRAM_ID in result.error
        assert "program-specific" in result.error
        assert ledger.transfers == []

    @pytest.mark.asyncio
    async def test_submission_error_becomes_failure(self, reclaimer, ledger):
        ledger.set_account("Acct", lamports=2_000_000)
        ledger.failing_transfers.add("Acct")

        result = await reclaimer.reclaim_one(candidate("Acct", 2_000_000))

        assert not result.success
        assert result.reclaimed_amount == 0
        assert result.signature is None
        assert "Blockhash not found" in result.error
        assert reclaimer.lifetime_reclaimed == 0

    @pytest.mark.asyncio
    async def test_lookup_error_becomes_failure(self, reclaimer, ledger):
        ledger.set_account("Acct", lamports=2_000_000)
        ledger.failing_account_lookups.add("Acct")

        result = await reclaimer.reclaim_one(candidate("Acct", 2_000_000))

        assert not result.success
        assert "lookup failed" in result.error

    @pytest.mark.asyncio
    async def test_second_attempt_reports_already_closed(self, reclaimer, ledger):
        ledger.set_account("Acct", lamports=2_000_000)

        first = await reclaimer.reclaim_one(candidate("Acct", 2_000_000))
        second = await reclaimer.reclaim_one(candidate("Acct", 2_000_000))

        assert first.success
        assert not second.success
        assert len(ledger.transfers) == 1
        assert reclaimer.lifetime_reclaimed == 2_000_000


class TestReclaimBatch:

    @pytest.mark.asyncio
    async def test_results_follow_input_order(self, reclaimer, ledger):
        ledger.set_account("A", lamports=2_000_000)
        ledger.set_account("C", lamports=4_000_000)

        results = await reclaimer.reclaim_batch(
            [candidate("A", 2_000_000), candidate("B", 3_000_000), candidate("C", 4_000_000)]
        )

        assert [r.account_address for r in results] == ["A", "B", "C"]
        assert [r.success for r in results] == [True, False, True]
        assert reclaimer.lifetime_reclaimed == 6_000_000

    @pytest.mark.asyncio
    async def test_pause_between_attempts(self, reclaimer, ledger, sleeps):
        for name in ("A", "B", "C"):
            ledger.set_account(name, lamports=2_000_000)

        await reclaimer.reclaim_batch([candidate(n, 2_000_000) for n in ("A", "B", "C")])

        assert sleeps == [1.0, 1.0]

    @pytest.mark.asyncio
    async def test_empty_batch(self, reclaimer, sleeps):
        assert await reclaimer.reclaim_batch([]) == []
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_success_amount_matches_pre_transfer_balance(self, reclaimer, ledger):
        balances = {"A": 1_234_567, "B": 7_654_321}
        for name, lamports in balances.items():
            ledger.set_account(name, lamports=lamports)

        results = await reclaimer.reclaim_batch([candidate(n, 1_000_000) for n in balances])

        for r in results:
            assert r.success
            assert r.reclaimed_amount == balances[r.account_address]
