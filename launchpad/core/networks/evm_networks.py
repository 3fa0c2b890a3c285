from __future__ import annotations

from typing import Dict, Final, List

from launchpad.configuration.config import settings
from launchpad.core.exceptions import ConfigurationError
from launchpad.core.networks.registry import NetworkDescriptor, NetworkRegistry
from launchpad.core.structures.structures import BackendFamily

_EVM_NETWORKS: Dict[str, NetworkDescriptor] = {
    "ethereum": NetworkDescriptor("ethereum", "Ethereum Mainnet", 1, settings.ETHEREUM_RPC_URL,
                                  "https://etherscan.io", False),
    "sepolia": NetworkDescriptor("sepolia", "Sepolia Testnet", 11155111, settings.SEPOLIA_RPC_URL,
                                 "https://sepolia.etherscan.io", True),
    "bsc": NetworkDescriptor("bsc", "BNB Smart Chain", 56, settings.BSC_RPC_URL,
                             "https://bscscan.com", False),
    "bscTestnet": NetworkDescriptor("bscTestnet", "BSC Testnet", 97, settings.BSC_TESTNET_RPC_URL,
                                    "https://testnet.bscscan.com", True),
    "polygon": NetworkDescriptor("polygon", "Polygon", 137, settings.POLYGON_RPC_URL,
                                 "https://polygonscan.com", False),
    "mumbai": NetworkDescriptor("mumbai", "Mumbai Testnet", 80001, settings.MUMBAI_RPC_URL,
                                "https://mumbai.polygonscan.com", True),
    "arbitrum": NetworkDescriptor("arbitrum", "Arbitrum One", 42161, settings.ARBITRUM_RPC_URL,
                                  "https://arbiscan.io", False),
    "optimism": NetworkDescriptor("optimism", "Optimism", 10, settings.OPTIMISM_RPC_URL,
                                  "https://optimistic.etherscan.io", False),
    "base": NetworkDescriptor("base", "Base", 8453, settings.BASE_RPC_URL,
                              "https://basescan.org", False),
}

# Uniswap V2 compatible routers. A network absent here has no automated pool path.
_ROUTER_ADDRESSES: Final[Dict[str, str]] = {
    "ethereum": "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D",  # Uniswap V2
    "sepolia": "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D",  # Uniswap V2
    "bsctestnet": "0xD99D1c33F9fC3444f8101754aBC46c52416550D1",  # PancakeSwap testnet
    "bsc": "0x10ED43C718714eb63d5aA57B78B54704E256024E",  # PancakeSwap
    "polygon": "0xa5E0829CaCEd8fFDD4De3c43696c57F7D7A678ff",  # QuickSwap
    "mumbai": "0xa5E0829CaCEd8fFDD4De3c43696c57F7D7A678ff",  # QuickSwap
    "arbitrum": "0x1b02dA8Cb0d097eB8D57A175b88c7D8b47997506",  # SushiSwap
    "optimism": "0x1b02dA8Cb0d097eB8D57A175b88c7D8b47997506",  # SushiSwap
    "base": "0x4752ba5dbc23f44d87826276bf6fd6b1c372ad24",  # BaseSwap
}

evm_registry = NetworkRegistry(BackendFamily.EVM, _EVM_NETWORKS)


def get_network_config(network: str) -> NetworkDescriptor:
    return evm_registry.lookup(network)


def get_available_networks() -> List[str]:
    return evm_registry.list_available()


def get_router_address(network: str) -> str:
    """Static network → router table. No fallback to another network's router."""
    router = _ROUTER_ADDRESSES.get((network or "").strip().lower())
    if router is None:
        raise ConfigurationError(f"No DEX router configured for network: {network}")
    return router
