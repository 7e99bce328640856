"""
Rent Reclaimer Core
===================
Discover -> Evaluate -> Reclaim pipeline for accounts a fee payer sponsored.

Safety Guardrails:
1. SIGNATURE_WINDOW: discovery only sees the newest 100 fee-payer signatures
2. Tiered evaluation: closed, empty, inactive (first match wins)
3. Fail-safe activity check: any doubt means "active", never reclaimed
4. Live re-check before every transfer: exists, non-zero, system-owned
5. Serial batch with a fixed pause between attempts (RPC rate limits)

Every attempt is written to the audit trail. The lifetime total and the
last-scan time are per-instance and reset on restart.

Concurrent run_full_cycle() calls on one instance are not serialized; two
callers sharing a signer can race and double-submit.
"""

import asyncio
import time
from typing import Awaitable, Callable, List, Optional

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from rent_reclaim.config.settings import ConfigError, ReclaimConfig
from rent_reclaim.reclaimer.classification import (
    days_since,
    has_empty_data,
    is_account_closed,
    lamports_to_sol,
)
from rent_reclaim.reclaimer.models import (
    CycleReport,
    ReclaimableAccount,
    ReclaimReason,
    ReclaimResult,
    RentStats,
    SponsoredAccount,
)
from rent_reclaim.shared.infrastructure.ledger_gateway import LedgerAccount, LedgerGateway
from rent_reclaim.shared.system.audit import (
    log_discovery_results,
    log_reclaim_operation,
    log_scan_results,
)
from rent_reclaim.shared.system.logging import Logger

SIGNATURE_WINDOW = 100

SleepFn = Callable[[float], Awaitable[None]]
ClockFn = Callable[[], float]


def decode_keypair(secret: str) -> Keypair:
    """Decode a base58 secret key (64-byte keypair or 32-byte seed)."""
    try:
        raw = base58.b58decode(secret.strip())
        if len(raw) == 32:
            return Keypair.from_seed(raw)
        return Keypair.from_bytes(raw)
    except Exception as e:
        raise ConfigError(f"Fee payer private key is not a valid base58 keypair: {e}") from e


class RentReclaimer:
    """
    Owns the fee-payer identity and treasury for its lifetime.

    Usage:
        reclaimer = RentReclaimer(Settings.load())
        scanned = await reclaimer.discover()
        reclaimable = await reclaimer.evaluate(scanned)
        results = await reclaimer.reclaim_batch(reclaimable)
        stats = reclaimer.get_stats(scanned, reclaimable)
    """

    def __init__(
        self,
        config: ReclaimConfig,
        gateway: Optional[LedgerGateway] = None,
        sleep: SleepFn = asyncio.sleep,
        clock: ClockFn = time.time,
    ):
        self.config = config
        self.fee_payer = decode_keypair(config.fee_payer_private_key)

        try:
            self.treasury = Pubkey.from_string(config.treasury_wallet.strip())
        except Exception as e:
            raise ConfigError(f"Treasury wallet is not a valid address: {e}") from e

        if gateway is None:
            from rent_reclaim.shared.infrastructure.solana_gateway import SolanaLedgerGateway

            gateway = SolanaLedgerGateway(config.rpc_url)
        self.gateway = gateway

        self._sleep = sleep
        self._clock = clock

        # In-memory running totals (reset on process restart)
        self.lifetime_reclaimed = 0
        self.last_scan_time = 0.0

        Logger.info(
            "[SYSTEM] RentReclaimer initialized",
            fee_payer=self.signer_address,
            treasury=self.treasury_address,
            rpc=config.rpc_url,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self) -> None:
        await self.gateway.close()

    @property
    def signer_address(self) -> str:
        return str(self.fee_payer.pubkey())

    @property
    def treasury_address(self) -> str:
        return str(self.treasury)

    def get_signer_address(self) -> str:
        return self.signer_address

    def get_treasury_address(self) -> str:
        return self.treasury_address

    # --------------------------------------------------------
    # 1. DISCOVER
    # --------------------------------------------------------

    async def discover(self) -> List[SponsoredAccount]:
        """
        Walk the fee payer's recent signatures and collect every unique
        account that appeared in those transactions.

        Accounts that no longer exist are kept with a zero balance so the
        evaluator can flag them as closed. Returns [] if the signature
        query itself fails.
        """
        Logger.info("[DISCOVERY] Fetching sponsored accounts...")

        try:
            signatures = await self.gateway.get_signatures_for_address(
                self.signer_address, limit=SIGNATURE_WINDOW
            )
        except Exception as e:
            Logger.error(f"[DISCOVERY] Signature history lookup failed: {e}", error=str(e))
            return []

        seen = set()
        result: List[SponsoredAccount] = []

        for sig_info in signatures:
            try:
                tx = await self.gateway.get_parsed_transaction(sig_info.signature)
            except Exception as e:
                Logger.debug(f"[DISCOVERY] Skipping unparsable tx {sig_info.signature[:12]}...: {e}")
                continue

            if tx is None or not tx.account_keys:
                continue

            for address in tx.account_keys:
                if address in seen:
                    continue
                seen.add(address)

                try:
                    info = await self.gateway.get_account_info(address)
                except Exception as e:
                    Logger.warning(f"[DISCOVERY] Snapshot failed for {address}: {e}", error=str(e))
                    continue

                result.append(self._snapshot(address, info, sig_info.block_time))

        log_discovery_results(self.signer_address, len(signatures), len(result))
        return result

    @staticmethod
    def _snapshot(address: str, info: Optional[LedgerAccount], block_time: Optional[int]) -> SponsoredAccount:
        if info is None:
            # Account is gone, still record it so it can be flagged as closed
            return SponsoredAccount(
                address=address,
                lamports=0,
                owner="",
                executable=False,
                data_length=0,
                last_activity=block_time,
            )
        return SponsoredAccount(
            address=address,
            lamports=info.lamports,
            owner=info.owner,
            executable=info.executable,
            data_length=info.data_length,
            last_activity=block_time,
        )

    # --------------------------------------------------------
    # 2. EVALUATE
    # --------------------------------------------------------

    async def evaluate(self, accounts: List[SponsoredAccount]) -> List[ReclaimableAccount]:
        """
        Run every sponsored account through the tiered safety checks.

        Rules (in order, first match wins):
          A) Closed   -> reclaimable if the discovery-time balance >= threshold
          B) Empty    -> reclaimable if live balance >= threshold
          C) Inactive -> reclaimable if live balance >= threshold and no tx
                         within account_age_threshold days
        """
        Logger.info(f"[EVALUATE] Identifying reclaimable accounts among {len(accounts)}...")

        reclaimable: List[ReclaimableAccount] = []
        for acct in accounts:
            try:
                candidate = await self._classify(acct)
            except Exception as e:
                Logger.warning(f"[EVALUATE] Skipping {acct.address}: evaluation error: {e}", error=str(e))
                continue
            if candidate is not None:
                reclaimable.append(candidate)

        total = sum(a.estimated_rent for a in reclaimable)
        Logger.info(
            f"[EVALUATE] Identified {len(reclaimable)} reclaimable accounts "
            f"({lamports_to_sol(total):.6f} SOL)"
        )
        return reclaimable

    def _worth_reclaiming(self, lamports: int) -> bool:
        return lamports > 0 and lamports >= self.config.min_rent_threshold

    async def _classify(self, acct: SponsoredAccount) -> Optional[ReclaimableAccount]:
        info = await self.gateway.get_account_info(acct.address)

        # Tier A: closed, priced at the discovery-time balance
        if is_account_closed(info):
            if self._worth_reclaiming(acct.lamports):
                return ReclaimableAccount(acct, ReclaimReason.CLOSED, acct.lamports)
            return None

        live = SponsoredAccount(
            address=acct.address,
            lamports=info.lamports,
            owner=info.owner,
            executable=info.executable,
            data_length=info.data_length,
            last_activity=acct.last_activity,
        )

        if not self._worth_reclaiming(live.lamports):
            return None

        # Tier B: empty data
        if has_empty_data(info):
            return ReclaimableAccount(live, ReclaimReason.EMPTY, live.lamports)

        # Tier C: inactive
        if not await self.has_recent_activity(acct.address):
            return ReclaimableAccount(live, ReclaimReason.INACTIVE, live.lamports)

        return None

    async def has_recent_activity(self, address: str) -> bool:
        """
        True when the account had a transaction within
        account_age_threshold days.

        Fail-safe: an unknown block time or a failed lookup counts as
        active, so the account is NOT reclaimed.
        """
        try:
            sigs = await self.gateway.get_signatures_for_address(address, limit=1)
        except Exception as e:
            Logger.error(f"[EVALUATE] Activity check failed for {address}: {e}", error=str(e))
            return True

        if not sigs:
            return False  # never transacted

        block_time = sigs[0].block_time
        if not block_time:
            return True

        return days_since(block_time, self._clock()) < self.config.account_age_threshold

    # --------------------------------------------------------
    # 3. RECLAIM
    # --------------------------------------------------------

    @staticmethod
    def _precondition_error(info: Optional[LedgerAccount]) -> Optional[str]:
        if info is None:
            return "Account does not exist or is already closed."
        if info.lamports == 0:
            return "Account already has zero balance."
        if not info.is_system_owned:
            return f"Account is owned by {info.owner}: needs a program-specific close instruction."
        return None

    def _failure(self, address: str, amount: int, error: str) -> ReclaimResult:
        log_reclaim_operation(address, amount, False, error=error)
        return ReclaimResult.failed(address, error, self._clock())

    async def reclaim_one(self, account: ReclaimableAccount) -> ReclaimResult:
        """Move the account's full live balance to the treasury. Never raises."""
        address = account.address
        amount = account.estimated_rent
        Logger.info(f"[RECLAIM] Reclaiming {address} ({account.reason.description})")

        try:
            info = await self.gateway.get_account_info(address)

            error = self._precondition_error(info)
            if error:
                return self._failure(address, amount, error)

            amount = info.lamports
            signature = await self.gateway.transfer_and_confirm(
                address, self.treasury_address, amount, self.fee_payer
            )
        except Exception as e:
            return self._failure(address, amount, str(e) or type(e).__name__)

        self.lifetime_reclaimed += amount
        log_reclaim_operation(address, amount, True, signature=signature)
        return ReclaimResult.ok(address, amount, signature, self._clock())

    async def reclaim_batch(self, accounts: List[ReclaimableAccount]) -> List[ReclaimResult]:
        """Reclaim one at a time, pausing between attempts for RPC rate limits."""
        Logger.info(f"[BATCH] Batch reclaim starting: {len(accounts)} accounts")
        results: List[ReclaimResult] = []

        for i, acct in enumerate(accounts):
            if i > 0:
                await self._sleep(self.config.batch_delay_seconds)
            results.append(await self.reclaim_one(acct))

        ok = [r for r in results if r.success]
        total = sum(r.reclaimed_amount for r in ok)
        Logger.info(
            f"[BATCH] Batch reclaim done: {len(ok)}/{len(accounts)} ok, {lamports_to_sol(total):.6f} SOL",
            total=len(accounts),
            successful=len(ok),
            failed=len(accounts) - len(ok),
            total_lamports=total,
        )
        return results

    # --------------------------------------------------------
    # 4. FULL CYCLE
    # --------------------------------------------------------

    async def run_full_cycle(self) -> CycleReport:
        """Discover -> evaluate -> reclaim. Used by the scheduler."""
        Logger.section("Scan-and-Reclaim cycle")

        scanned = await self.discover()
        reclaimable = await self.evaluate(scanned)

        log_scan_results(
            len(scanned),
            len(reclaimable),
            sum(a.estimated_rent for a in reclaimable),
        )

        results = await self.reclaim_batch(reclaimable)
        self.last_scan_time = self._clock()

        Logger.info("[CYCLE] Scan-and-Reclaim cycle finished")
        return CycleReport(scanned=scanned, reclaimable=reclaimable, results=results)

    # --------------------------------------------------------
    # 5. REPORTING
    # --------------------------------------------------------

    def get_stats(
        self, scanned: List[SponsoredAccount], reclaimable: List[ReclaimableAccount]
    ) -> RentStats:
        return RentStats(
            total_accounts_monitored=len(scanned),
            total_rent_locked=sum(a.lamports for a in scanned),
            total_rent_reclaimed=self.lifetime_reclaimed,
            reclaimable_accounts=len(reclaimable),
            estimated_reclaimable=sum(a.estimated_rent for a in reclaimable),
            last_scan_time=self.last_scan_time,
        )
