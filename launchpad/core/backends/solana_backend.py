from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from solana.rpc.api import Client
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from spl.token.constants import TOKEN_2022_PROGRAM_ID
from spl.token.instructions import InitializeMintParams, MintToParams, initialize_mint, mint_to

from launchpad.configuration.config import FeeConfig
from launchpad.core.backends.base import ChainBackend
from launchpad.core.exceptions import ConfigurationError, ValidationError
from launchpad.core.networks.registry import NetworkDescriptor
from launchpad.core.networks.solana_networks import solana_registry
from launchpad.core.onchain.solana_signer import (
    SolanaSigner,
    build_solana_client,
    build_solana_signer,
    fetch_parsed_account,
)
from launchpad.core.onchain.token2022 import (
    MINT_WITH_TRANSFER_FEE_LENGTH,
    U64_MAX,
    create_associated_token_account_2022,
    get_associated_token_address_2022,
    initialize_transfer_fee_config,
)
from launchpad.core.pools.solana_pool import SolanaPoolOrchestrator
from launchpad.core.structures.structures import (
    BackendFamily,
    DeploymentResult,
    PoolAmounts,
    PoolResult,
    TokenInfo,
    TokenSpec,
)
from launchpad.core.utils.validation import (
    validate_decimals,
    validate_solana_address,
    validate_solana_keypair,
    validate_token_name,
    validate_token_symbol,
)
from launchpad.logging.logger import get_logger, log_deployment

log = get_logger(__name__)


def _explorer_token_url(network: NetworkDescriptor, mint_address: str) -> str:
    return f"{network.explorer_base_url}/token/{mint_address}?cluster={network.chain_or_cluster_id}"


def _transfer_fee_authority(info: Dict[str, Any]) -> Optional[str]:
    """Withdraw-withheld authority of the TransferFeeConfig extension, if the mint carries one."""
    for extension in info.get("extensions") or []:
        if isinstance(extension, dict) and extension.get("extension") == "transferFeeConfig":
            return (extension.get("state") or {}).get("withdrawWithheldAuthority")
    return None


class SolanaBackend(ChainBackend):
    """
    Creates Token-2022 mints with the TransferFeeConfig extension.

    The payer keeps the mint and freeze authorities; the launchpad fee collector
    holds both the fee-config and withdraw-withheld authorities. The whole supply
    is minted to the payer's associated token account.
    """

    family = BackendFamily.SOLANA
    registry = solana_registry

    def __init__(
            self,
            signer_factory: Callable[[str, bytes], SolanaSigner] = build_solana_signer,
            client_factory: Callable[[str], Client] = build_solana_client,
            keypair_factory: Callable[[], Keypair] = Keypair,
            pool_orchestrator: Optional[SolanaPoolOrchestrator] = None,
    ) -> None:
        self.signer_factory = signer_factory
        self.client_factory = client_factory
        self.keypair_factory = keypair_factory
        self.pool_orchestrator = pool_orchestrator or SolanaPoolOrchestrator(
            signer_factory=signer_factory, client_factory=client_factory
        )

    def validate_address(self, address: str) -> bool:
        return validate_solana_address(address)

    def validate_credentials(self, credentials: str) -> None:
        validate_solana_keypair(credentials)

    @staticmethod
    def _check_spec(spec: TokenSpec) -> None:
        validate_token_name(spec.name)
        validate_token_symbol(spec.symbol)
        validate_decimals(spec.decimals, BackendFamily.SOLANA)
        if spec.total_supply_base_units <= 0:
            raise ValidationError("Supply must be greater than 0")
        if spec.total_supply_base_units > U64_MAX:
            raise ValidationError(
                f"Supply exceeds the Solana token amount limit for {spec.decimals} decimals"
            )

    def deploy_token(
            self,
            spec: TokenSpec,
            credentials: str,
            fee_config: FeeConfig,
            network: str,
    ) -> DeploymentResult:
        descriptor = self.lookup_network(network)
        self._check_spec(spec)
        secret_key = bytes(validate_solana_keypair(credentials))
        fee_collector_address = fee_config.solana_fee_collector
        if not validate_solana_address(fee_collector_address):
            raise ConfigurationError(f"Invalid Solana fee collector address: {fee_collector_address}")
        fee_collector = Pubkey.from_string(fee_collector_address)

        signer = self.signer_factory(descriptor.rpc_endpoint, secret_key)
        payer = signer.pubkey
        mint_keypair = self.keypair_factory()
        mint = mint_keypair.pubkey()
        log.info("[SOLANA][DEPLOY] Creating Token-2022 mint %s for %s (%s) on %s", mint, spec.name,
                 spec.symbol, descriptor.display_name)

        lamports = signer.minimum_balance_for_rent_exemption(MINT_WITH_TRANSFER_FEE_LENGTH)
        mint_tx = signer.send_instructions(
            [
                create_account(
                    CreateAccountParams(
                        from_pubkey=payer,
                        to_pubkey=mint,
                        lamports=lamports,
                        space=MINT_WITH_TRANSFER_FEE_LENGTH,
                        owner=TOKEN_2022_PROGRAM_ID,
                    )
                ),
                initialize_transfer_fee_config(
                    mint=mint,
                    transfer_fee_config_authority=fee_collector,
                    withdraw_withheld_authority=fee_collector,
                    transfer_fee_basis_points=fee_config.fee_basis_points,
                    maximum_fee=min(10 ** spec.decimals, U64_MAX),
                ),
                initialize_mint(
                    InitializeMintParams(
                        decimals=spec.decimals,
                        program_id=TOKEN_2022_PROGRAM_ID,
                        mint=mint,
                        mint_authority=payer,
                        freeze_authority=payer,
                    )
                ),
            ],
            extra_signers=[mint_keypair],
        )
        log.debug("[SOLANA][DEPLOY] Mint account initialized (tx=%s)", mint_tx)

        associated_account = get_associated_token_address_2022(payer, mint)
        supply_tx = signer.send_instructions(
            [
                create_associated_token_account_2022(payer=payer, owner=payer, mint=mint),
                mint_to(
                    MintToParams(
                        program_id=TOKEN_2022_PROGRAM_ID,
                        mint=mint,
                        dest=associated_account,
                        mint_authority=payer,
                        amount=spec.total_supply_base_units,
                    )
                ),
            ]
        )
        log.debug("[SOLANA][DEPLOY] Supply minted to %s (tx=%s)", associated_account, supply_tx)

        mint_address = str(mint)
        log_deployment(
            log,
            family=self.family.value,
            network=descriptor.key,
            address=mint_address,
            token_name=spec.name,
            token_symbol=spec.symbol,
            tx_id=mint_tx,
            extra={
                "fee_collector": fee_collector_address,
                "fee_basis_points": fee_config.fee_basis_points,
                "supply_tx_id": supply_tx,
            },
        )

        return DeploymentResult(
            family=self.family,
            asset_address=mint_address,
            transaction_id=mint_tx,
            network_display_name=descriptor.display_name,
            signer_address=signer.address,
            explorer_url=_explorer_token_url(descriptor, mint_address),
        )

    def get_token_info(self, address: str, network: str) -> TokenInfo:
        descriptor = self.lookup_network(network)
        if not validate_solana_address(address):
            raise ValidationError("Invalid mint address")

        client = self.client_factory(descriptor.rpc_endpoint)
        parsed = fetch_parsed_account(client, Pubkey.from_string(address))
        if parsed is None or parsed.get("type") != "mint":
            raise ValidationError(f"No token mint found at {address} on {descriptor.display_name}")

        info = parsed.get("info") or {}
        return TokenInfo(
            family=self.family,
            address=address,
            network_display_name=descriptor.display_name,
            explorer_url=_explorer_token_url(descriptor, address),
            decimals=int(info.get("decimals", 0)),
            supply=int(info.get("supply", 0)),
            fee_collector=_transfer_fee_authority(info),
            mint_authority=info.get("mintAuthority"),
            freeze_authority=info.get("freezeAuthority"),
        )

    def create_pool(
            self,
            deployment: DeploymentResult,
            spec: TokenSpec,
            amounts: PoolAmounts,
            network: str,
            credentials: str,
            dex_choice: Optional[str] = None,
    ) -> PoolResult:
        return self.pool_orchestrator.create_pool(
            mint_address=deployment.asset_address,
            token_amount=amounts.token_amount,
            base_amount=amounts.base_amount,
            network=network,
            credentials=credentials,
            decimals=spec.decimals,
            dex_choice=dex_choice,
        )
