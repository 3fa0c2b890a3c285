from __future__ import annotations

from typing import Callable, List, Optional

from solana.rpc.api import Client
from solana.rpc.commitment import Confirmed
from solders.pubkey import Pubkey

from launchpad.core.exceptions import BalanceError, ValidationError
from launchpad.core.networks.registry import NetworkDescriptor
from launchpad.core.networks.solana_networks import SolanaDex, resolve_dex, solana_registry
from launchpad.core.onchain.solana_signer import SolanaSigner, build_solana_client, build_solana_signer
from launchpad.core.onchain.token2022 import get_associated_token_address_2022
from launchpad.core.structures.structures import BalanceCheck, PoolResult, PoolStatus
from launchpad.core.utils.format_utils import SOLANA_NATIVE_DECIMALS, format_units
from launchpad.core.utils.validation import parse_token_amount, validate_solana_address, validate_solana_keypair
from launchpad.logging.logger import get_logger

log = get_logger(__name__)


def build_manual_setup_guidance(
        dex: SolanaDex,
        network: NetworkDescriptor,
        mint_address: str,
        token_amount: str,
        base_amount: str,
) -> str:
    """Step-by-step instructions for creating the pool on a third-party Solana venue."""
    lines = [
        f"1. Open {dex.name}: {dex.url_for(network)}",
        "2. Connect the wallet that deployed the token",
        f"3. Select your token by mint address: {mint_address}",
        "4. Pair it with SOL",
        f"5. Deposit {token_amount} tokens and {base_amount} SOL",
        "6. Review the initial price and confirm the transaction",
    ]
    if network.is_testnet:
        lines.append(f"Note: you are on {network.display_name}; make sure the DEX is switched to the same cluster.")
    return "\n".join(lines)


class SolanaPoolOrchestrator:
    """
    Verify the signer can fund a pool, then hand off to a third-party DEX.

    No pool-creation transaction is ever submitted: a successful call always
    ends in MANUAL_SETUP_REQUIRED with guidance for the chosen venue.
    """

    def __init__(
            self,
            signer_factory: Callable[[str, bytes], SolanaSigner] = build_solana_signer,
            client_factory: Callable[[str], Client] = build_solana_client,
    ) -> None:
        self.signer_factory = signer_factory
        self.client_factory = client_factory

    @staticmethod
    def _token_balance(signer: SolanaSigner, mint: Pubkey) -> int:
        associated_account = get_associated_token_address_2022(signer.pubkey, mint)
        try:
            return signer.token_account_balance(associated_account)
        except Exception as exc:
            log.warning("[SOLANA][POOL] Token account %s unreadable, treating balance as 0: %s",
                        associated_account, exc)
            return 0

    def create_pool(
            self,
            mint_address: str,
            token_amount: str,
            base_amount: str,
            network: str,
            credentials: str,
            decimals: int,
            dex_choice: Optional[str] = None,
    ) -> PoolResult:
        descriptor = solana_registry.lookup(network)
        dex = resolve_dex(dex_choice)
        if not validate_solana_address(mint_address):
            raise ValidationError("Invalid mint address")
        secret_key = bytes(validate_solana_keypair(credentials))

        token_units = parse_token_amount(token_amount, decimals, "token amount")
        lamports = parse_token_amount(base_amount, SOLANA_NATIVE_DECIMALS, "SOL amount")

        signer = self.signer_factory(descriptor.rpc_endpoint, secret_key)
        check = BalanceCheck(
            token_balance=self._token_balance(signer, Pubkey.from_string(mint_address)),
            native_balance=signer.native_balance(),
            token_required=token_units,
            native_required=lamports,
        )

        shortfalls: List[str] = []
        if not check.has_enough_native:
            shortfalls.append(
                f"Need {format_units(lamports, SOLANA_NATIVE_DECIMALS)} SOL, "
                f"have {format_units(check.native_balance, SOLANA_NATIVE_DECIMALS)} SOL"
            )
        if not check.has_enough_tokens:
            shortfalls.append(
                f"Need {format_units(token_units, decimals)} tokens, "
                f"have {format_units(check.token_balance, decimals)} tokens"
            )
        if shortfalls:
            raise BalanceError(shortfalls)

        log.info("[SOLANA][POOL] Balances verified for %s on %s, manual setup via %s",
                 mint_address, descriptor.display_name, dex.name)

        return PoolResult(
            status=PoolStatus.MANUAL_SETUP_REQUIRED,
            token_amount=token_amount,
            base_amount=base_amount,
            native_symbol="SOL",
            explorer_url=dex.url_for(descriptor),
            dex_name=dex.name,
            guidance=build_manual_setup_guidance(dex, descriptor, mint_address, token_amount, base_amount),
            notes=(
                f"Balances verified: {format_units(check.token_balance, decimals)} tokens and "
                f"{format_units(check.native_balance, SOLANA_NATIVE_DECIMALS)} SOL available",
            ),
        )

    def validate_balances(
            self,
            mint_address: str,
            owner_address: str,
            token_amount: str,
            base_amount: str,
            network: str,
            decimals: int,
    ) -> BalanceCheck:
        """Read-only balance check of an arbitrary wallet against pool funding amounts."""
        descriptor = solana_registry.lookup(network)
        for address in (mint_address, owner_address):
            if not validate_solana_address(address):
                raise ValidationError(f"Invalid address: {address}")

        client = self.client_factory(descriptor.rpc_endpoint)
        owner = Pubkey.from_string(owner_address)
        associated_account = get_associated_token_address_2022(owner, Pubkey.from_string(mint_address))
        try:
            token_balance = int(client.get_token_account_balance(associated_account, commitment=Confirmed).value.amount)
        except Exception as exc:
            log.warning("[SOLANA][POOL] Token account %s unreadable, treating balance as 0: %s",
                        associated_account, exc)
            token_balance = 0

        return BalanceCheck(
            token_balance=token_balance,
            native_balance=int(client.get_balance(owner, commitment=Confirmed).value),
            token_required=parse_token_amount(token_amount, decimals, "token amount"),
            native_required=parse_token_amount(base_amount, SOLANA_NATIVE_DECIMALS, "SOL amount"),
        )
