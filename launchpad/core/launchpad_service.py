from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from launchpad.configuration.config import FeeConfig, build_fee_config
from launchpad.core.backends.base import ChainBackend
from launchpad.core.backends.evm_backend import EvmBackend
from launchpad.core.backends.solana_backend import SolanaBackend
from launchpad.core.exceptions import ValidationError, classified_errors
from launchpad.core.networks.registry import NetworkDescriptor
from launchpad.core.structures.structures import (
    BackendFamily,
    BalanceCheck,
    DeploymentRequest,
    DeploymentResult,
    PoolAmounts,
    PoolInfo,
    PoolResult,
    TokenInfo,
    TokenSpec,
)
from launchpad.core.utils.format_utils import EVM_NATIVE_DECIMALS, SOLANA_NATIVE_DECIMALS
from launchpad.core.utils.validation import (
    parse_token_amount,
    validate_and_parse_supply,
    validate_decimals,
    validate_token_name,
    validate_token_symbol,
)
from launchpad.logging.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class PreparedDeployment:
    """
    A fully validated request, ready for the first backend call.

    Exists only for the duration of one invocation.
    """
    family: BackendFamily
    network: NetworkDescriptor
    spec: TokenSpec
    credentials: str
    pool_amounts: Optional[PoolAmounts] = None
    dex_choice: Optional[str] = None

    def __repr__(self) -> str:
        return (f"PreparedDeployment(family={self.family.value!r}, network={self.network.key!r}, "
                f"spec={self.spec!r}, credentials='***', pool_amounts={self.pool_amounts!r}, "
                f"dex_choice={self.dex_choice!r})")


class LaunchpadService:
    """
    Wires the process-wide fee configuration to both chain backends.

    The orchestration layer only talks to the shared ChainBackend contract;
    the family tag selects which implementation receives the call.
    """

    def __init__(
            self,
            fee_config: Optional[FeeConfig] = None,
            evm_backend: Optional[ChainBackend] = None,
            solana_backend: Optional[ChainBackend] = None,
    ) -> None:
        self.fee_config = fee_config or build_fee_config()
        self._backends: Dict[BackendFamily, ChainBackend] = {
            BackendFamily.EVM: evm_backend or EvmBackend(),
            BackendFamily.SOLANA: solana_backend or SolanaBackend(),
        }

    def backend_for(self, family: BackendFamily | str) -> ChainBackend:
        if isinstance(family, str) and not isinstance(family, BackendFamily):
            family = BackendFamily.parse(family)
        return self._backends[family]

    def list_networks(self, family: BackendFamily | str) -> List[str]:
        return self.backend_for(family).list_networks()

    def prepare(self, request: DeploymentRequest) -> PreparedDeployment:
        """
        Validate every field of a complete request. No I/O.

        Pool amounts are checked only when a pool is requested and both amounts
        are present; otherwise the deployment proceeds without a pool.
        """
        family = BackendFamily.parse(request.blockchain or "")
        backend = self.backend_for(family)
        descriptor = backend.lookup_network(request.network or "")

        validate_token_name(request.name or "")
        validate_token_symbol(request.symbol or "")
        if request.decimals is None:
            raise ValidationError("Decimals must be an integer")
        validate_decimals(request.decimals, family)
        base_units = validate_and_parse_supply(request.supply or "", request.decimals)
        backend.validate_credentials(request.credentials or "")

        pool_amounts: Optional[PoolAmounts] = None
        if request.wants_pool and request.pool_token_amount and request.pool_base_amount:
            native_decimals = SOLANA_NATIVE_DECIMALS if family is BackendFamily.SOLANA else EVM_NATIVE_DECIMALS
            parse_token_amount(request.pool_token_amount, request.decimals, "token amount")
            parse_token_amount(request.pool_base_amount, native_decimals, "base amount")
            pool_amounts = PoolAmounts(request.pool_token_amount, request.pool_base_amount)

        return PreparedDeployment(
            family=family,
            network=descriptor,
            spec=TokenSpec(
                name=request.name,
                symbol=request.symbol,
                decimals=request.decimals,
                total_supply_base_units=base_units,
            ),
            credentials=request.credentials,
            pool_amounts=pool_amounts,
            dex_choice=request.dex_choice,
        )

    def deploy(self, prepared: PreparedDeployment) -> DeploymentResult:
        return self.backend_for(prepared.family).deploy_token(
            prepared.spec, prepared.credentials, self.fee_config, prepared.network.key
        )

    def create_pool(self, prepared: PreparedDeployment, deployment: DeploymentResult) -> Optional[PoolResult]:
        """Pool step for a prepared request; None when no pool was requested."""
        if prepared.pool_amounts is None:
            return None
        log.info("[POOL] Creating liquidity pool for %s on %s", deployment.asset_address,
                 prepared.network.display_name)
        return self.backend_for(prepared.family).create_pool(
            deployment,
            prepared.spec,
            prepared.pool_amounts,
            prepared.network.key,
            prepared.credentials,
            dex_choice=prepared.dex_choice,
        )

    def deploy_token(
            self,
            family: BackendFamily | str,
            network: str,
            name: str,
            symbol: str,
            decimals: int,
            supply: str,
            credentials: str,
    ) -> DeploymentResult:
        """Direct deployment of a fully specified request, without a pool."""
        family = self.backend_for(family).family
        prepared = self.prepare(
            DeploymentRequest(
                blockchain=family.value,
                network=network,
                name=name,
                symbol=symbol,
                decimals=decimals,
                supply=supply,
                credentials=credentials,
                create_pool="no",
            )
        )
        with classified_errors():
            return self.deploy(prepared)

    def get_token_info(self, family: BackendFamily | str, address: str, network: str) -> TokenInfo:
        backend = self.backend_for(family)
        with classified_errors():
            return backend.get_token_info(address, network)

    def get_pool_info(self, token_address: str, network: str) -> PoolInfo:
        backend = self.backend_for(BackendFamily.EVM)
        with classified_errors():
            return backend.pool_orchestrator.get_pool_info(token_address, network)

    def validate_balances(
            self,
            family: BackendFamily | str,
            token_address: str,
            owner_address: str,
            token_amount: str,
            base_amount: str,
            network: str,
            decimals: Optional[int] = None,
    ) -> BalanceCheck:
        backend = self.backend_for(family)
        with classified_errors():
            if backend.family is BackendFamily.EVM:
                return backend.pool_orchestrator.validate_balances(
                    token_address, owner_address, token_amount, base_amount, network
                )
            if decimals is None:
                decimals = backend.get_token_info(token_address, network).decimals
            return backend.pool_orchestrator.validate_balances(
                token_address, owner_address, token_amount, base_amount, network, decimals
            )
