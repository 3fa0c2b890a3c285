from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from solana.rpc.api import Client
from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from launchpad.configuration.config import settings
from launchpad.core.exceptions import BackendSubmissionError, LaunchpadError, ValidationError
from launchpad.logging.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class SolanaSignerConfig:
    """
    Strongly typed configuration for the Solana signer.
    """
    rpc_url: str
    secret_key: bytes

    def __repr__(self) -> str:
        return f"SolanaSignerConfig(rpc_url={self.rpc_url!r}, secret_key='***')"


class SolanaSigner:
    """
    Builds, signs, broadcasts and confirms Solana versioned transactions (solders-based)
    for the duration of one invocation.
    """

    def __init__(self, config: SolanaSignerConfig, client: Optional[Client] = None) -> None:
        if not config.rpc_url or not config.secret_key:
            raise ValueError("Solana signer requires an RPC URL and a secret key.")

        try:
            self.keypair = Keypair.from_bytes(config.secret_key)
        except Exception as exc:
            raise ValidationError(f"Invalid Solana keypair: {exc}") from exc
        self.client = client if client is not None else build_solana_client(config.rpc_url)

        log.debug("[SOLANA][SIGNER] Initialized signer. Address=%s", self.keypair.pubkey())

    @property
    def pubkey(self) -> Pubkey:
        return self.keypair.pubkey()

    @property
    def address(self) -> str:
        """Public base58 address derived from the loaded secret key."""
        return str(self.keypair.pubkey())

    @staticmethod
    def _extract_signature(response: object) -> Signature:
        """
        Normalize a send-transaction response into a Signature.

        Handles a bare Signature and typed responses exposing `.value`.
        """
        if isinstance(response, Signature):
            return response
        value = getattr(response, "value", None)
        if isinstance(value, Signature):
            return value
        if isinstance(value, str) and len(value) > 0:
            return Signature.from_string(value)
        raise ValueError(f"Unexpected Solana RPC response type for signature: {type(response)!r}")

    def native_balance(self, owner: Optional[Pubkey] = None) -> int:
        return int(self.client.get_balance(owner or self.pubkey, commitment=Confirmed).value)

    def minimum_balance_for_rent_exemption(self, size: int) -> int:
        return int(self.client.get_minimum_balance_for_rent_exemption(size).value)

    def token_account_balance(self, token_account: Pubkey) -> int:
        """Raw base-unit balance of a token account. Raises if the account does not exist."""
        response = self.client.get_token_account_balance(token_account, commitment=Confirmed)
        return int(response.value.amount)

    def send_instructions(self, instructions: Sequence[Instruction], extra_signers: Sequence[Keypair] = ()) -> str:
        """
        Compile instructions into one versioned transaction paid by this signer,
        broadcast it and block until it is confirmed.

        Returns:
            The base58 transaction signature.
        """
        try:
            blockhash = self.client.get_latest_blockhash(commitment=Confirmed).value.blockhash
            message = MessageV0.try_compile(self.pubkey, list(instructions), [], blockhash)
            transaction = VersionedTransaction(message, [self.keypair, *extra_signers])

            response = self.client.send_transaction(
                transaction,
                opts=TxOpts(skip_preflight=False, preflight_commitment=Confirmed),
            )
            signature = self._extract_signature(response)
            log.info("[SOLANA][SIGNER] Broadcasted signature %s", signature)

            confirmation = self.client.confirm_transaction(signature, commitment=Confirmed)
        except LaunchpadError:
            raise
        except Exception as exc:
            raise BackendSubmissionError(str(exc)) from exc

        statuses = getattr(confirmation, "value", None) or []
        status = statuses[0] if len(statuses) > 0 else None
        if status is not None and status.err is not None:
            raise BackendSubmissionError(f"Transaction {signature} failed: {status.err}", tx_id=str(signature))

        log.debug("[SOLANA][SIGNER] Confirmed signature %s", signature)
        return str(signature)


def build_solana_signer(rpc_url: str, secret_key: bytes) -> SolanaSigner:
    """Factory used by the Solana backend and pool orchestrator; replaceable in tests."""
    return SolanaSigner(SolanaSignerConfig(rpc_url=rpc_url, secret_key=secret_key))


def build_solana_client(rpc_url: str) -> Client:
    """Read-only client for queries that need no signer."""
    return Client(rpc_url, timeout=settings.RPC_TIMEOUT_SECONDS)


def fetch_parsed_account(client: Client, address: Pubkey) -> Optional[Dict[str, Any]]:
    """jsonParsed account data (`{"type": ..., "info": {...}}`), or None when absent or not parseable."""
    response = client.get_account_info_json_parsed(address, commitment=Confirmed)
    account = response.value
    if account is None:
        return None
    parsed = getattr(account.data, "parsed", None)
    return parsed if isinstance(parsed, dict) else None
