from __future__ import annotations

"""
Invocation-scoped EVM signer built on eth-account and web3.

Design goals:
- One signer per invocation, constructed from the caller's private key and discarded afterwards.
- Build and sign EIP-1559 transactions (legacy gas price when the chain has no base fee).
- Every submission waits for its receipt before returning; a revert is a submission failure.
- Never log secrets or raw calldata.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract
from web3.types import TxParams, TxReceipt

from launchpad.configuration.config import settings
from launchpad.core.exceptions import BackendSubmissionError, LaunchpadError, ValidationError
from launchpad.logging.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class EvmSignerConfig:
    rpc_url: str
    private_key: str
    chain_id: int

    def __repr__(self) -> str:
        return f"EvmSignerConfig(rpc_url={self.rpc_url!r}, private_key='***', chain_id={self.chain_id})"


class EvmSigner:
    """Sign, broadcast and confirm EVM transactions for a single invocation."""

    def __init__(self, config: EvmSignerConfig, web3: Optional[Web3] = None) -> None:
        if not config.rpc_url or not config.private_key:
            raise ValueError("EVM signer requires an RPC URL and a private key.")

        try:
            self.account: LocalAccount = Account.from_key(config.private_key)
        except Exception as exc:
            raise ValidationError(f"Invalid private key: {exc}") from exc

        self.web3 = web3 if web3 is not None else build_web3(config.rpc_url)
        if not self.web3.is_connected():
            raise BackendSubmissionError(f"Failed to connect to EVM RPC endpoint {config.rpc_url}")

        self.address: str = self.account.address
        self.chain_id: int = config.chain_id

        log.debug("[EVM][SIGNER] Initialized. Address=%s ChainId=%s", self.address, self.chain_id)

    def contract(self, address: str, abi: Sequence[Dict[str, Any]]) -> Contract:
        return self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def native_balance(self) -> int:
        return int(self.web3.eth.get_balance(self.address))

    def _fee_fields(self) -> Dict[str, int]:
        """EIP-1559 fee caps from the latest block, or a legacy gas price on chains without a base fee."""
        latest = self.web3.eth.get_block("latest")
        base_fee = latest.get("baseFeePerGas")
        if base_fee is None:
            return {"gasPrice": int(self.web3.eth.gas_price)}
        try:
            max_priority = int(self.web3.eth.max_priority_fee)  # node suggestion
        except Exception:
            max_priority = int(Web3.to_wei(1, "gwei"))
        return {
            "maxPriorityFeePerGas": max_priority,
            "maxFeePerGas": int(base_fee) * 2 + max_priority,
        }

    def _base_tx(self, value_wei: int) -> TxParams:
        tx: TxParams = {
            "from": self.address,
            "chainId": self.chain_id,
            "nonce": self.web3.eth.get_transaction_count(self.address, "pending"),
            "value": int(value_wei),
        }
        tx.update(self._fee_fields())  # type: ignore[typeddict-item]
        return tx

    def _sign_and_send(self, tx: TxParams) -> str:
        signed = self.account.sign_transaction(tx)

        # eth-account < 0.13 -> rawTransaction ; >= 0.13 -> raw_transaction
        raw = getattr(signed, "raw_transaction", None)
        if raw is None:
            raw = getattr(signed, "rawTransaction", None)
        if raw is None:
            raise RuntimeError("SignedTransaction does not expose raw bytes on this eth-account version.")

        tx_hash = Web3.to_hex(self.web3.eth.send_raw_transaction(raw))
        log.info("[EVM][SIGNER] Broadcasted transaction %s (nonce=%s gas=%s)", tx_hash, tx.get("nonce"), tx.get("gas"))
        return tx_hash

    def wait_for_receipt(self, tx_hash: str) -> TxReceipt:
        receipt = self.web3.eth.wait_for_transaction_receipt(tx_hash, timeout=settings.EVM_RECEIPT_TIMEOUT_SECONDS)
        if int(receipt["status"]) != 1:
            raise BackendSubmissionError(f"Transaction {tx_hash} reverted", tx_id=tx_hash)
        log.debug("[EVM][SIGNER] Confirmed %s in block %s", tx_hash, receipt.get("blockNumber"))
        return receipt

    def transact(self, contract_function: Any, value_wei: int = 0) -> str:
        """
        Build, sign and broadcast a contract call, then block until it is mined.

        Returns:
            The 0x-prefixed transaction hash of the confirmed transaction.
        """
        try:
            tx = contract_function.build_transaction(self._base_tx(value_wei))
            tx_hash = self._sign_and_send(tx)
            self.wait_for_receipt(tx_hash)
            return tx_hash
        except LaunchpadError:
            raise
        except Exception as exc:
            raise BackendSubmissionError(str(exc)) from exc

    def deploy(self, abi: Sequence[Dict[str, Any]], bytecode: str, *constructor_args: Any) -> Tuple[str, str]:
        """
        Submit a contract creation transaction and wait for confirmation.

        Returns:
            (contract_address, tx_hash)
        """
        try:
            factory = self.web3.eth.contract(abi=abi, bytecode=bytecode)
            tx = factory.constructor(*constructor_args).build_transaction(self._base_tx(0))
            tx_hash = self._sign_and_send(tx)
            receipt = self.wait_for_receipt(tx_hash)
        except LaunchpadError:
            raise
        except Exception as exc:
            raise BackendSubmissionError(str(exc)) from exc

        contract_address = receipt.get("contractAddress")
        if not contract_address:
            raise BackendSubmissionError("Deployment transaction not found", tx_id=tx_hash)
        return Web3.to_checksum_address(contract_address), tx_hash


def build_evm_signer(rpc_url: str, private_key: str, chain_id: int) -> EvmSigner:
    """Factory used by the EVM backend and pool orchestrator; replaceable in tests."""
    return EvmSigner(EvmSignerConfig(rpc_url=rpc_url, private_key=private_key, chain_id=chain_id))


def build_web3(rpc_url: str) -> Web3:
    """Read-only provider for queries that need no signer."""
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": settings.RPC_TIMEOUT_SECONDS}))
