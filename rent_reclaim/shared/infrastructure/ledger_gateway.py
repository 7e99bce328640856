"""
Ledger Gateway Interface
========================
Defines the contract the reclaimer needs from a Solana RPC endpoint.

Implementations must provide:
- get_signatures_for_address(): recent signature window for an address
- get_parsed_transaction(): participant accounts of one transaction
- get_account_info(): current snapshot, None when the account is gone
- transfer_and_confirm(): one system transfer, signed and confirmed
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from solders.keypair import Keypair


SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"


class LedgerError(Exception):
    """RPC, transport or confirmation failure reported by a gateway."""


@dataclass(frozen=True)
class SignatureInfo:
    signature: str
    block_time: Optional[int] = None  # unix seconds


@dataclass(frozen=True)
class ParsedTransaction:
    signature: str
    account_keys: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class LedgerAccount:
    """Current on-chain state of one account."""

    lamports: int
    owner: str
    executable: bool = False
    data_length: int = 0

    @property
    def is_system_owned(self) -> bool:
        return self.owner == SYSTEM_PROGRAM_ID


class LedgerGateway(ABC):
    """Async read/write access to the ledger."""

    @abstractmethod
    async def get_signatures_for_address(self, address: str, limit: int) -> List[SignatureInfo]:
        """Most recent signatures touching ``address``, newest first."""
        pass

    @abstractmethod
    async def get_parsed_transaction(self, signature: str) -> Optional[ParsedTransaction]:
        """Parsed transaction, or None if the node cannot return it."""
        pass

    @abstractmethod
    async def get_account_info(self, address: str) -> Optional[LedgerAccount]:
        """
        Current account snapshot.

        Returns:
            None if the account does not exist.

        Raises:
            LedgerError: the lookup itself failed.
        """
        pass

    @abstractmethod
    async def transfer_and_confirm(
        self, source: str, destination: str, lamports: int, signer: Keypair
    ) -> str:
        """
        Move ``lamports`` from ``source`` to ``destination`` and wait for
        confirmation.

        Returns:
            Transaction signature.

        Raises:
            LedgerError: submission or confirmation failed.
        """
        pass

    async def close(self) -> None:
        pass
