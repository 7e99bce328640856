"""
Solana Ledger Gateway
=====================
LedgerGateway backed by solana-py's AsyncClient.

All RPC failures surface as LedgerError so callers only handle one type.
"""

from typing import List, Optional

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import VersionedTransaction

from rent_reclaim.shared.infrastructure.ledger_gateway import (
    LedgerAccount,
    LedgerError,
    LedgerGateway,
    ParsedTransaction,
    SignatureInfo,
)
from rent_reclaim.shared.system.logging import Logger


def _account_key_to_str(key) -> str:
    # jsonParsed messages wrap keys in ParsedAccount; raw messages hold Pubkeys
    return str(getattr(key, "pubkey", key))


class SolanaLedgerGateway(LedgerGateway):
    """
    Async Solana RPC access.

    Usage:
        async with SolanaLedgerGateway(rpc_url) as gateway:
            info = await gateway.get_account_info(address)
    """

    def __init__(self, rpc_url: str, client: Optional[AsyncClient] = None):
        self.rpc_url = rpc_url
        self.client = client or AsyncClient(rpc_url, commitment=Confirmed)
        Logger.debug(f"[RPC] Gateway bound to {rpc_url}")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self) -> None:
        await self.client.close()

    async def get_signatures_for_address(self, address: str, limit: int) -> List[SignatureInfo]:
        try:
            resp = await self.client.get_signatures_for_address(Pubkey.from_string(address), limit=limit)
        except Exception as e:
            raise LedgerError(f"getSignaturesForAddress failed for {address}: {e}") from e

        return [
            SignatureInfo(signature=str(entry.signature), block_time=entry.block_time)
            for entry in resp.value
        ]

    async def get_parsed_transaction(self, signature: str) -> Optional[ParsedTransaction]:
        try:
            resp = await self.client.get_transaction(
                Signature.from_string(signature),
                encoding="jsonParsed",
                max_supported_transaction_version=0,
            )
        except Exception as e:
            raise LedgerError(f"getTransaction failed for {signature}: {e}") from e

        if resp.value is None:
            return None

        message = getattr(resp.value.transaction.transaction, "message", None)
        account_keys = getattr(message, "account_keys", None)
        if not account_keys:
            return None

        return ParsedTransaction(
            signature=signature,
            account_keys=[_account_key_to_str(k) for k in account_keys],
        )

    async def get_account_info(self, address: str) -> Optional[LedgerAccount]:
        try:
            resp = await self.client.get_account_info(Pubkey.from_string(address))
        except Exception as e:
            raise LedgerError(f"getAccountInfo failed for {address}: {e}") from e

        account = resp.value
        if account is None:
            return None

        return LedgerAccount(
            lamports=account.lamports,
            owner=str(account.owner),
            executable=account.executable,
            data_length=len(account.data),
        )

    async def transfer_and_confirm(
        self, source: str, destination: str, lamports: int, signer: Keypair
    ) -> str:
        try:
            ix = transfer(
                TransferParams(
                    from_pubkey=Pubkey.from_string(source),
                    to_pubkey=Pubkey.from_string(destination),
                    lamports=lamports,
                )
            )

            bh_resp = await self.client.get_latest_blockhash()
            msg = MessageV0.try_compile(
                payer=signer.pubkey(),
                instructions=[ix],
                address_lookup_table_accounts=[],
                recent_blockhash=bh_resp.value.blockhash,
            )
            tx = VersionedTransaction(msg, [signer])

            resp = await self.client.send_transaction(tx, opts=TxOpts(preflight_commitment=Confirmed))
            sig = resp.value

            confirm = await self.client.confirm_transaction(sig, commitment=Confirmed)
        except Exception as e:
            raise LedgerError(str(e)) from e

        status = confirm.value[0] if confirm.value else None
        if status is not None and status.err is not None:
            raise LedgerError(f"Transaction {sig} failed on-chain: {status.err}")

        return str(sig)
