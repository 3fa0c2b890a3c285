from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from launchpad.configuration.config import settings
from launchpad.core.networks.registry import NetworkDescriptor, NetworkRegistry
from launchpad.core.structures.structures import BackendFamily

_SOLANA_NETWORKS: Dict[str, NetworkDescriptor] = {
    "mainnet": NetworkDescriptor("mainnet", "Solana Mainnet", "mainnet-beta", settings.SOLANA_MAINNET_RPC_URL,
                                 "https://solscan.io", False),
    "devnet": NetworkDescriptor("devnet", "Solana Devnet", "devnet", settings.SOLANA_DEVNET_RPC_URL,
                                "https://solscan.io", True),
    "testnet": NetworkDescriptor("testnet", "Solana Testnet", "testnet", settings.SOLANA_TESTNET_RPC_URL,
                                 "https://solscan.io", True),
}

solana_registry = NetworkRegistry(BackendFamily.SOLANA, _SOLANA_NETWORKS)


@dataclass(frozen=True)
class SolanaDex:
    """Third-party liquidity venue users are pointed to for manual pool creation."""
    key: str
    name: str
    mainnet_url: str
    devnet_url: str
    description: str

    def url_for(self, network: NetworkDescriptor) -> str:
        return self.devnet_url if network.is_testnet else self.mainnet_url


DEFAULT_SOLANA_DEX: str = "raydium"

SOLANA_DEXES: Dict[str, SolanaDex] = {
    "raydium": SolanaDex("raydium", "Raydium", "https://raydium.io/liquidity/create-pool/", "https://raydium.io/",
                         "Most popular, highest liquidity"),
    "meteora": SolanaDex("meteora", "Meteora", "https://app.meteora.ag/pools/create", "https://app.meteora.ag/",
                         "Dynamic liquidity pools"),
    "jupiter": SolanaDex("jupiter", "Jupiter", "https://jup.ag/", "https://jup.ag/",
                         "Aggregator with pool creation"),
}


def get_solana_network_config(network: str) -> NetworkDescriptor:
    return solana_registry.lookup(network)


def get_available_solana_networks() -> List[str]:
    return solana_registry.list_available()


def resolve_dex(choice: str | None) -> SolanaDex:
    """Unknown or missing choices fall back to Raydium."""
    return SOLANA_DEXES.get((choice or "").strip().lower(), SOLANA_DEXES[DEFAULT_SOLANA_DEX])
