from __future__ import annotations

import pytest

from launchpad.core.exceptions import ConfigurationError, NetworkNotFoundError
from launchpad.core.networks.evm_networks import (
    evm_registry,
    get_available_networks,
    get_network_config,
    get_router_address,
)
from launchpad.core.networks.solana_networks import (
    SOLANA_DEXES,
    get_available_solana_networks,
    get_solana_network_config,
    resolve_dex,
    solana_registry,
)
from launchpad.core.structures.structures import BackendFamily
from launchpad.core.utils.format_utils import format_units, native_currency_symbol


def test_evm_lookup_is_case_insensitive():
    assert get_network_config("SEPOLIA").chain_or_cluster_id == 11155111
    assert get_network_config("bsctestnet").key == "bscTestnet"
    assert get_network_config("bscTestnet").display_name == "BSC Testnet"


def test_evm_networks_are_listed_in_declaration_order():
    assert get_available_networks() == [
        "ethereum", "sepolia", "bsc", "bscTestnet", "polygon", "mumbai", "arbitrum", "optimism", "base",
    ]


def test_unknown_evm_network_lists_supported_networks():
    with pytest.raises(NetworkNotFoundError) as excinfo:
        get_network_config("goerli")
    assert "Unknown network: goerli" in excinfo.value.message
    assert "sepolia" in excinfo.value.message
    assert excinfo.value.kind == "configuration"


def test_registries_are_never_cross_queried():
    with pytest.raises(NetworkNotFoundError):
        get_solana_network_config("sepolia")
    with pytest.raises(NetworkNotFoundError):
        get_network_config("devnet")
    assert "devnet" not in evm_registry
    assert "devnet" in solana_registry


def test_testnet_flags():
    assert evm_registry.is_testnet("sepolia") is True
    assert evm_registry.is_testnet("ethereum") is False
    assert solana_registry.is_testnet("devnet") is True
    assert solana_registry.is_testnet("mainnet") is False


def test_solana_networks_map_to_clusters():
    assert get_available_solana_networks() == ["mainnet", "devnet", "testnet"]
    assert get_solana_network_config("Mainnet").chain_or_cluster_id == "mainnet-beta"
    with pytest.raises(NetworkNotFoundError, match="Unknown Solana network: localnet"):
        get_solana_network_config("localnet")


def test_every_evm_network_has_a_router():
    for network in get_available_networks():
        assert get_router_address(network).startswith("0x")
    assert get_router_address("bscTestnet") == "0xD99D1c33F9fC3444f8101754aBC46c52416550D1"


def test_missing_router_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="No DEX router configured for network: zksync"):
        get_router_address("zksync")


def test_unknown_dex_falls_back_to_raydium():
    assert resolve_dex("orca") is SOLANA_DEXES["raydium"]
    assert resolve_dex(None) is SOLANA_DEXES["raydium"]
    assert resolve_dex("Meteora") is SOLANA_DEXES["meteora"]


def test_dex_url_depends_on_testnet_flag():
    raydium = SOLANA_DEXES["raydium"]
    assert raydium.url_for(get_solana_network_config("mainnet")) == "https://raydium.io/liquidity/create-pool/"
    assert raydium.url_for(get_solana_network_config("devnet")) == "https://raydium.io/"


def test_native_currency_names():
    assert native_currency_symbol(BackendFamily.EVM, "bsc") == "BNB"
    assert native_currency_symbol(BackendFamily.EVM, "bscTestnet") == "BNB"
    assert native_currency_symbol(BackendFamily.EVM, "mumbai") == "MATIC"
    assert native_currency_symbol(BackendFamily.EVM, "base") == "ETH"
    assert native_currency_symbol(BackendFamily.SOLANA, "devnet") == "SOL"


def test_format_units_renders_without_float_rounding():
    assert format_units(10 ** 24, 18) == "1000000"
    assert format_units(123456789123456789, 18) == "0.123456789123456789"
    assert format_units(100050, 2) == "1000.5"
    assert format_units(42, 0) == "42"
