"""
Account classification and rent helpers.

Pure functions: no RPC, no logging.
"""

from typing import Optional

from rent_reclaim.shared.infrastructure.ledger_gateway import LedgerAccount

LAMPORTS_PER_SOL = 1_000_000_000

# Rent constants (Agave sdk/rent)
LAMPORTS_PER_BYTE_YEAR = 3480
EXEMPTION_THRESHOLD = 2  # years of prepaid rent for exemption
ACCOUNT_METADATA_SIZE = 128  # bytes of overhead per account

SECONDS_PER_DAY = 86400


def calculate_rent_exemption(data_length: int) -> int:
    """Minimum rent-exempt balance: (data_length + 128) * 3480 * 2."""
    return (data_length + ACCOUNT_METADATA_SIZE) * LAMPORTS_PER_BYTE_YEAR * EXEMPTION_THRESHOLD


def lamports_to_sol(lamports: int) -> float:
    return lamports / LAMPORTS_PER_SOL


def is_account_closed(info: Optional[LedgerAccount]) -> bool:
    """True when the account no longer exists on-chain (None or 0 lamports)."""
    return info is None or info.lamports == 0


def has_empty_data(info: Optional[LedgerAccount]) -> bool:
    """True when the account exists but holds zero bytes of data."""
    return info is not None and info.data_length == 0


def days_since(block_time: int, now: float) -> float:
    return (now - block_time) / SECONDS_PER_DAY


def short_address(address: str) -> str:
    if len(address) <= 16:
        return address
    return f"{address[:8]}…{address[-6:]}"
