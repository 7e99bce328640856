"""
Audit Trail
===========
Structured records for every reclaim attempt and scan summary.

Every record carries the same base shape (operation, account_address,
amount_lamports, success, signature, error, timestamp), with None where a
field does not apply.

Records land in the combined stream; RECLAIM records also land in
reclaim-operations.log, and failed ones in error.log.
"""

from datetime import datetime, timezone
from typing import Optional

from rent_reclaim.shared.system.logging import Logger


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _record(
    operation: str,
    account_address: Optional[str] = None,
    amount_lamports: Optional[int] = None,
    success: Optional[bool] = None,
    signature: Optional[str] = None,
    error: Optional[str] = None,
    **extra,
) -> dict:
    payload = {
        "operation": operation,
        "account_address": account_address,
        "amount_lamports": amount_lamports,
        "success": success,
        "signature": signature,
        "error": error,
        "timestamp": _now_iso(),
    }
    payload.update(extra)
    return payload


def log_reclaim_operation(
    account_address: str,
    amount_lamports: int,
    success: bool,
    signature: Optional[str] = None,
    error: Optional[str] = None,
) -> dict:
    """Log a single reclaim attempt with all details. Returns the record."""
    payload = _record("RECLAIM", account_address, amount_lamports, success, signature, error)
    if success:
        Logger.success("[RECLAIM] Rent reclaimed successfully", **payload)
    else:
        Logger.error("[RECLAIM] Rent reclaim failed", **payload)
    return payload


def log_scan_results(total_accounts: int, reclaimable_count: int, total_reclaimable_lamports: int) -> dict:
    payload = _record(
        "SCAN",
        amount_lamports=total_reclaimable_lamports,
        success=True,
        total_accounts=total_accounts,
        reclaimable_count=reclaimable_count,
        total_reclaimable_lamports=total_reclaimable_lamports,
    )
    Logger.info("[CYCLE] Account scan completed", **payload)
    return payload


def log_discovery_results(signer_address: str, signatures_seen: int, accounts_found: int) -> dict:
    payload = _record(
        "DISCOVER",
        account_address=signer_address,
        success=True,
        signatures_seen=signatures_seen,
        accounts_found=accounts_found,
    )
    Logger.info(f"[DISCOVERY] Found {accounts_found} sponsored accounts", **payload)
    return payload
