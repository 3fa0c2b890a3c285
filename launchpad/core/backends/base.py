from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from launchpad.configuration.config import FeeConfig
from launchpad.core.networks.registry import NetworkDescriptor, NetworkRegistry
from launchpad.core.structures.structures import (
    BackendFamily,
    DeploymentResult,
    PoolAmounts,
    PoolResult,
    TokenInfo,
    TokenSpec,
)


class ChainBackend(ABC):
    """
    Capability set every chain family provides to the wizard and the direct tools.

    Implementations hold no per-invocation state: signers are built from the
    credentials passed to each call and discarded when it returns.
    """

    family: BackendFamily
    registry: NetworkRegistry
    pool_orchestrator: Any

    def lookup_network(self, network: str) -> NetworkDescriptor:
        return self.registry.lookup(network)

    def list_networks(self) -> List[str]:
        return self.registry.list_available()

    @abstractmethod
    def validate_address(self, address: str) -> bool:
        """Structural address check for this family."""

    @abstractmethod
    def validate_credentials(self, credentials: str) -> None:
        """Raise ValidationError when the credential string is malformed for this family."""

    @abstractmethod
    def deploy_token(
            self,
            spec: TokenSpec,
            credentials: str,
            fee_config: FeeConfig,
            network: str,
    ) -> DeploymentResult:
        """Create the fee-bearing asset and credit the whole supply to the signer."""

    @abstractmethod
    def get_token_info(self, address: str, network: str) -> TokenInfo:
        """Read-only lookup of an existing asset."""

    @abstractmethod
    def create_pool(
            self,
            deployment: DeploymentResult,
            spec: TokenSpec,
            amounts: PoolAmounts,
            network: str,
            credentials: str,
            dex_choice: Optional[str] = None,
    ) -> PoolResult:
        """Fund or prepare a liquidity pool for a freshly deployed asset."""
