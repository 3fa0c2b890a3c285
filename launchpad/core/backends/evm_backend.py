from __future__ import annotations

from typing import Callable, Optional

from web3 import Web3

from launchpad.configuration.config import FeeConfig
from launchpad.core.backends.base import ChainBackend
from launchpad.core.exceptions import ConfigurationError, ValidationError
from launchpad.core.networks.evm_networks import evm_registry
from launchpad.core.onchain.evm_abis import LAUNCHPAD_TOKEN_ABI
from launchpad.core.onchain.evm_artifact import load_token_bytecode
from launchpad.core.onchain.evm_signer import EvmSigner, build_evm_signer, build_web3
from launchpad.core.pools.evm_pool import EvmPoolOrchestrator
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
    validate_evm_address,
    validate_evm_private_key,
    validate_token_name,
    validate_token_symbol,
)
from launchpad.logging.logger import get_logger, log_deployment

log = get_logger(__name__)


class EvmBackend(ChainBackend):
    """
    Deploys the LaunchpadToken contract: an ERC-20 whose constructor takes the fee
    collector and fee rate and mints the whole supply to the deployer.
    """

    family = BackendFamily.EVM
    registry = evm_registry

    def __init__(
            self,
            signer_factory: Callable[[str, str, int], EvmSigner] = build_evm_signer,
            web3_factory: Callable[[str], Web3] = build_web3,
            bytecode_loader: Callable[[], str] = load_token_bytecode,
            pool_orchestrator: Optional[EvmPoolOrchestrator] = None,
    ) -> None:
        self.signer_factory = signer_factory
        self.web3_factory = web3_factory
        self.bytecode_loader = bytecode_loader
        self.pool_orchestrator = pool_orchestrator or EvmPoolOrchestrator(
            signer_factory=signer_factory, web3_factory=web3_factory
        )

    def validate_address(self, address: str) -> bool:
        return validate_evm_address(address)

    def validate_credentials(self, credentials: str) -> None:
        validate_evm_private_key(credentials)

    @staticmethod
    def _check_spec(spec: TokenSpec) -> None:
        validate_token_name(spec.name)
        validate_token_symbol(spec.symbol)
        validate_decimals(spec.decimals, BackendFamily.EVM)
        if spec.total_supply_base_units <= 0:
            raise ValidationError("Supply must be greater than 0")

    def deploy_token(
            self,
            spec: TokenSpec,
            credentials: str,
            fee_config: FeeConfig,
            network: str,
    ) -> DeploymentResult:
        descriptor = self.lookup_network(network)
        self._check_spec(spec)
        validate_evm_private_key(credentials)
        fee_collector = fee_config.evm_fee_collector
        if not validate_evm_address(fee_collector):
            raise ConfigurationError(f"Invalid EVM fee collector address: {fee_collector}")
        fee_basis_points = fee_config.fee_basis_points
        if not 0 <= fee_basis_points <= 10_000:
            raise ConfigurationError(f"Fee must be between 0 and 10000 basis points, got {fee_basis_points}")

        bytecode = self.bytecode_loader()
        signer = self.signer_factory(descriptor.rpc_endpoint, credentials, int(descriptor.chain_or_cluster_id))
        log.info("[EVM][DEPLOY] Deploying %s (%s) on %s from %s", spec.name, spec.symbol,
                 descriptor.display_name, signer.address)

        contract_address, tx_hash = signer.deploy(
            LAUNCHPAD_TOKEN_ABI,
            bytecode,
            spec.name,
            spec.symbol,
            spec.decimals,
            spec.total_supply_base_units,
            Web3.to_checksum_address(fee_collector),
            fee_basis_points,
        )

        log_deployment(
            log,
            family=self.family.value,
            network=descriptor.key,
            address=contract_address,
            token_name=spec.name,
            token_symbol=spec.symbol,
            tx_id=tx_hash,
            extra={"fee_collector": fee_collector, "fee_basis_points": fee_basis_points},
        )

        return DeploymentResult(
            family=self.family,
            asset_address=contract_address,
            transaction_id=tx_hash,
            network_display_name=descriptor.display_name,
            signer_address=signer.address,
            explorer_url=f"{descriptor.explorer_base_url}/address/{contract_address}",
        )

    def get_token_info(self, address: str, network: str) -> TokenInfo:
        descriptor = self.lookup_network(network)
        if not validate_evm_address(address):
            raise ValidationError("Invalid token address")

        web3 = self.web3_factory(descriptor.rpc_endpoint)
        checksum = Web3.to_checksum_address(address)
        token = web3.eth.contract(address=checksum, abi=LAUNCHPAD_TOKEN_ABI)

        try:
            fee_collector = token.functions.feeCollector().call()
        except Exception as exc:
            # plain ERC-20s deployed elsewhere have no fee collector
            log.debug("[EVM][INFO] feeCollector() unavailable on %s: %s", checksum, exc)
            fee_collector = None

        return TokenInfo(
            family=self.family,
            address=checksum,
            network_display_name=descriptor.display_name,
            explorer_url=f"{descriptor.explorer_base_url}/address/{checksum}",
            decimals=int(token.functions.decimals().call()),
            supply=int(token.functions.totalSupply().call()),
            name=token.functions.name().call(),
            symbol=token.functions.symbol().call(),
            fee_collector=fee_collector,
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
            token_address=deployment.asset_address,
            token_amount=amounts.token_amount,
            base_amount=amounts.base_amount,
            network=network,
            credentials=credentials,
        )
