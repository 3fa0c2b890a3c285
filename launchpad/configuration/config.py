from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    """Parse a truthy/falsey string into a boolean."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


# Product constants: every token deployed through the launchpad routes its transfer fee here.
FEE_COLLECTOR_EVM: str = "0xd2C91503a0365F525699aFD55BaF10D7960Ac5b4"
FEE_COLLECTOR_SOLANA: str = "CrjcCXMHg1MkrzdTBkSQjmGfiKjK7EGXHpcofgMBrB6W"
FEE_PERCENTAGE: int = 1

PLUGIN_NAME: str = "OpenCoins Launchpad"
PLUGIN_VERSION: str = "1.0.0"


class Settings:
    # API
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:4200,http://127.0.0.1:4200")

    # EVM RPC endpoints
    ETHEREUM_RPC_URL: str = os.getenv("ETHEREUM_RPC_URL", "https://eth.llamarpc.com")
    SEPOLIA_RPC_URL: str = os.getenv("SEPOLIA_RPC_URL", "https://rpc.sepolia.org")
    BSC_RPC_URL: str = os.getenv("BSC_RPC_URL", "https://bsc-dataseed.binance.org")
    BSC_TESTNET_RPC_URL: str = os.getenv("BSC_TESTNET_RPC_URL", "https://data-seed-prebsc-1-s1.binance.org:8545")
    POLYGON_RPC_URL: str = os.getenv("POLYGON_RPC_URL", "https://polygon-rpc.com")
    MUMBAI_RPC_URL: str = os.getenv("MUMBAI_RPC_URL", "https://rpc-mumbai.maticvigil.com")
    ARBITRUM_RPC_URL: str = os.getenv("ARBITRUM_RPC_URL", "https://arb1.arbitrum.io/rpc")
    OPTIMISM_RPC_URL: str = os.getenv("OPTIMISM_RPC_URL", "https://mainnet.optimism.io")
    BASE_RPC_URL: str = os.getenv("BASE_RPC_URL", "https://mainnet.base.org")

    # Solana RPC endpoints
    SOLANA_MAINNET_RPC_URL: str = os.getenv("SOLANA_MAINNET_RPC_URL", "https://api.mainnet-beta.solana.com")
    SOLANA_DEVNET_RPC_URL: str = os.getenv("SOLANA_DEVNET_RPC_URL", "https://api.devnet.solana.com")
    SOLANA_TESTNET_RPC_URL: str = os.getenv("SOLANA_TESTNET_RPC_URL", "https://api.testnet.solana.com")

    # Chain I/O
    RPC_TIMEOUT_SECONDS: int = int(os.getenv("RPC_TIMEOUT_SECONDS", "30"))
    EVM_RECEIPT_TIMEOUT_SECONDS: int = int(os.getenv("EVM_RECEIPT_TIMEOUT_SECONDS", "300"))
    EVM_TOKEN_ARTIFACT_PATH: str = os.getenv(
        "EVM_TOKEN_ARTIFACT_PATH",
        str(Path(__file__).resolve().parents[2] / "contracts" / "LaunchpadToken.json"),
    )

    # Liquidity pools
    POOL_SLIPPAGE_BPS: int = int(os.getenv("POOL_SLIPPAGE_BPS", "100"))
    POOL_DEADLINE_SECONDS: int = int(os.getenv("POOL_DEADLINE_SECONDS", "1200"))

    # Debug / logging
    NO_COLOR: bool = _as_bool(os.getenv("NO_COLOR"), False)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()
    LOG_LEVEL_LAUNCHPAD: str = os.getenv("LOG_LEVEL_LAUNCHPAD", "INFO").upper()
    LOG_LEVEL_LIB_WEB3: str = os.getenv("LOG_LEVEL_LIB_WEB3", "WARNING").upper()
    LOG_LEVEL_LIB_HTTPX: str = os.getenv("LOG_LEVEL_LIB_HTTPX", "WARNING").upper()
    LOG_LEVEL_LIB_URLLIB3: str = os.getenv("LOG_LEVEL_LIB_URLLIB3", "WARNING").upper()
    LOG_LEVEL_LIB_SOLANA: str = os.getenv("LOG_LEVEL_LIB_SOLANA", "WARNING").upper()


settings = Settings()


@dataclass(frozen=True)
class FeeConfig:
    """
    Process-wide service fee applied to every deployed token.

    Built once at startup and passed by reference into every deployment; never user-overridable.
    """
    evm_fee_collector: str
    solana_fee_collector: str
    fee_percentage: int

    @property
    def fee_basis_points(self) -> int:
        return self.fee_percentage * 100

    def collector_for(self, family: str) -> str:
        return self.evm_fee_collector if family == "evm" else self.solana_fee_collector


def build_fee_config() -> FeeConfig:
    """Factory for the immutable launchpad fee configuration."""
    return FeeConfig(
        evm_fee_collector=FEE_COLLECTOR_EVM,
        solana_fee_collector=FEE_COLLECTOR_SOLANA,
        fee_percentage=FEE_PERCENTAGE,
    )
