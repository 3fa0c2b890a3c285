from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping

from launchpad.core.exceptions import NetworkNotFoundError
from launchpad.core.structures.structures import BackendFamily


@dataclass(frozen=True)
class NetworkDescriptor:
    """
    Immutable connection and display metadata for one network.

    Attributes:
        key: Registry key as listed to users (e.g. 'bscTestnet').
        display_name: Human label used in reports.
        chain_or_cluster_id: EVM chain id (int) or Solana cluster name (str).
        rpc_endpoint: JSON-RPC URL.
        explorer_base_url: Block explorer root, without trailing slash.
        is_testnet: True for test networks.
    """
    key: str
    display_name: str
    chain_or_cluster_id: int | str
    rpc_endpoint: str
    explorer_base_url: str
    is_testnet: bool


class NetworkRegistry:
    """Case-insensitive lookup table for one backend family. Never substitutes a default."""

    def __init__(self, family: BackendFamily, networks: Mapping[str, NetworkDescriptor]) -> None:
        self.family = family
        self._ordered_keys: List[str] = list(networks.keys())
        self._by_lower_key: Dict[str, NetworkDescriptor] = {key.lower(): value for key, value in networks.items()}

    def lookup(self, name: str) -> NetworkDescriptor:
        descriptor = self._by_lower_key.get((name or "").strip().lower())
        if descriptor is None:
            raise NetworkNotFoundError(name, self.family.value, self._ordered_keys)
        return descriptor

    def list_available(self) -> List[str]:
        return list(self._ordered_keys)

    def is_testnet(self, name: str) -> bool:
        return self.lookup(name).is_testnet

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._by_lower_key
