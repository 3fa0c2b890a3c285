from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from launchpad.core.structures.structures import BackendFamily, DeploymentRequest
from launchpad.core.utils.validation import MAX_DECIMALS


class LaunchTokenRequest(BaseModel):
    """Accumulated wizard answers; every field is optional and re-sent on every turn."""
    model_config = ConfigDict(populate_by_name=True)

    blockchain: Optional[str] = Field(None, description="'evm' or 'solana'.")
    network: Optional[str] = Field(None, description="Network key from the family registry.")
    name: Optional[str] = Field(None, description="Token full name.")
    symbol: Optional[str] = Field(None, description="Uppercase ticker.")
    decimals: Optional[int] = Field(None, description="Decimal places (EVM 0-18, Solana 0-9).")
    supply: Optional[str] = Field(None, description="Total supply in human units.")
    credentials: Optional[str] = Field(None, description="EVM private key or Solana keypair JSON array.")
    create_pool: Optional[str] = Field(None, alias="createPool", description="'yes' to create a pool.")
    solana_dex: Optional[str] = Field(None, alias="solanaDex", description="'raydium', 'meteora' or 'jupiter'.")
    token_for_pool: Optional[str] = Field(None, alias="tokenForPool", description="Tokens to add to the pool.")
    base_for_pool: Optional[str] = Field(None, alias="baseForPool", description="Native currency for the pool.")

    @field_validator("decimals", mode="before")
    @classmethod
    def blank_decimals_selects_default(cls, value: Any, info: ValidationInfo) -> Any:
        """An empty answer to the decimals prompt picks the recommended value for the chosen family."""
        if not isinstance(value, str) or value.strip():
            return value
        blockchain = (info.data.get("blockchain") or "").strip().lower()
        for family in BackendFamily:
            if family.value == blockchain:
                return MAX_DECIMALS[family]
        return None

    def to_request(self) -> DeploymentRequest:
        return DeploymentRequest(
            blockchain=self.blockchain,
            network=self.network,
            name=self.name,
            symbol=self.symbol,
            decimals=self.decimals,
            supply=self.supply,
            credentials=self.credentials,
            create_pool=self.create_pool,
            dex_choice=self.solana_dex,
            pool_token_amount=self.token_for_pool,
            pool_base_amount=self.base_for_pool,
        )


class WizardResponse(BaseModel):
    state: str = Field(..., description="Step being asked for, or 'complete' / 'failed'.")
    message: str = Field(..., description="Prompt or final report, as prose.")


class DeployEvmTokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    network: str
    name: str
    symbol: str
    decimals: int = 18
    total_supply: str = Field(..., alias="totalSupply")
    private_key: str = Field(..., alias="privateKey")


class DeploySolanaTokenRequest(BaseModel):
    network: str
    name: str
    symbol: str
    decimals: int = 9
    supply: str
    keypair: str


class DeploymentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chain: str
    address: str = Field(..., description="Contract address (EVM) or mint address (Solana).")
    transaction_id: str = Field(..., alias="transactionId")
    network: str
    signer: str
    explorer_url: str = Field(..., alias="explorerUrl")
    message: str = Field(..., description="Human-readable summary.")


class TokenInfoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chain: str
    address: str
    network: str
    decimals: int
    supply: str = Field(..., description="Total supply in base units, as a decimal string.")
    name: Optional[str] = None
    symbol: Optional[str] = None
    fee_collector: Optional[str] = Field(None, alias="feeCollector")
    mint_authority: Optional[str] = Field(None, alias="mintAuthority")
    freeze_authority: Optional[str] = Field(None, alias="freezeAuthority")
    explorer_url: str = Field(..., alias="explorerUrl")
    message: str


class NetworksResponse(BaseModel):
    chain: str
    networks: List[str] = Field(default_factory=list)


class PoolInfoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exists: bool
    pair_address: Optional[str] = Field(None, alias="pairAddress")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error kind: validation, configuration, balance, submission.")
    detail: str


class BalanceCheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chain: str
    network: str
    token_address: str = Field(..., alias="tokenAddress")
    owner_address: str = Field(..., alias="ownerAddress")
    token_amount: str = Field(..., alias="tokenAmount")
    base_amount: str = Field(..., alias="baseAmount")
    decimals: Optional[int] = Field(None, description="Solana mint decimals; read from chain when omitted.")


class BalanceCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_enough_tokens: bool = Field(..., alias="hasEnoughTokens")
    has_enough_native: bool = Field(..., alias="hasEnoughNative")
    token_balance: str = Field(..., alias="tokenBalance")
    native_balance: str = Field(..., alias="nativeBalance")
