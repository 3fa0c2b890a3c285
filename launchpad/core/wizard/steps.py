"""
Field-precedence table of the launch wizard.

Each entry names the request field it fills, how to ask for it, and when it
applies. The first applicable, unanswered entry is the next question; nothing
else about the conversation is remembered between invocations.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from launchpad.core.exceptions import ValidationError
from launchpad.core.networks.evm_networks import get_available_networks
from launchpad.core.networks.solana_networks import SOLANA_DEXES, get_available_solana_networks
from launchpad.core.structures.structures import BackendFamily, DeploymentRequest
from launchpad.core.utils.format_utils import native_currency_symbol
from launchpad.core.utils.validation import MAX_DECIMALS


class WizardState(str, Enum):
    BLOCKCHAIN = "blockchain"
    NETWORK = "network"
    NAME = "name"
    SYMBOL = "symbol"
    DECIMALS = "decimals"
    SUPPLY = "supply"
    CREDENTIALS = "credentials"
    CREATE_POOL = "create_pool"
    DEX_CHOICE = "dex_choice"
    POOL_TOKEN_AMOUNT = "pool_token_amount"
    POOL_BASE_AMOUNT = "pool_base_amount"
    DEPLOYING = "deploying"
    COMPLETE = "complete"
    FAILED = "failed"


def family_of(request: DeploymentRequest) -> Optional[BackendFamily]:
    """Parsed backend family, or None while the blockchain answer is missing or unrecognised."""
    try:
        return BackendFamily.parse(request.blockchain or "")
    except ValidationError:
        return None


def _is_set(value: object) -> bool:
    if isinstance(value, str):
        return value.strip() != ""
    return value is not None


@dataclass(frozen=True)
class WizardStep:
    state: WizardState
    title: Callable[[DeploymentRequest], str]
    prompt: Callable[[DeploymentRequest], str]
    acknowledge: Callable[[DeploymentRequest], str]
    is_applicable: Callable[[DeploymentRequest], bool] = lambda request: True
    is_answered: Optional[Callable[[DeploymentRequest], bool]] = None

    @property
    def field(self) -> str:
        return self.state.value

    def answered(self, request: DeploymentRequest) -> bool:
        if self.is_answered is not None:
            return self.is_answered(request)
        return _is_set(getattr(request, self.field))


# --- prompt bodies ---

def _blockchain_prompt(request: DeploymentRequest) -> str:
    lines = []
    if _is_set(request.blockchain):
        lines += [f"⚠️ Unknown blockchain '{request.blockchain}'.", ""]
    lines += [
        "Which blockchain do you want to use?",
        '- Type **"evm"** for Ethereum, BSC, Polygon, Arbitrum, etc.',
        '- Type **"solana"** for Solana',
        "",
        "💡 Tip: EVM chains are more common, Solana has lower fees.",
    ]
    return "\n".join(lines)


def _network_prompt(request: DeploymentRequest) -> str:
    networks = get_available_networks() if family_of(request) is BackendFamily.EVM else get_available_solana_networks()
    listing = "\n".join(f"  - {name}" for name in networks)
    return (
        f"Available networks:\n{listing}\n\n"
        "💡 Tip: Use **sepolia** (EVM) or **devnet** (Solana) for testing first!\n\n"
        "Which network?"
    )


def _name_prompt(request: DeploymentRequest) -> str:
    return (
        "What's your token's full name?\n"
        'Examples: "My Awesome Token", "SuperCoin", "Community Token"\n\n'
        "This will appear in wallets and explorers."
    )


def _symbol_prompt(request: DeploymentRequest) -> str:
    return (
        "What's your token symbol (ticker)?\n"
        'Examples: "MAT", "SUPER", "COM"\n\n'
        "- Usually 3-5 characters\n"
        "- UPPERCASE only\n"
        '- This is like "BTC" for Bitcoin\n\n'
        "Your symbol?"
    )


def _decimals_prompt(request: DeploymentRequest) -> str:
    family = family_of(request)
    default = MAX_DECIMALS[family]
    label = "EVM" if family is BackendFamily.EVM else "Solana"
    return (
        "How many decimal places for your token?\n\n"
        f"- Most {label} tokens use **{default}** decimals\n"
        "- Decimals work like cents for dollars (1.00 = 1 dollar + 2 decimals)\n\n"
        f"💡 Recommended: **{default}**\n\n"
        f"Enter decimals (or press Enter for {default}):"
    )


def _supply_prompt(request: DeploymentRequest) -> str:
    return (
        "How many tokens do you want to create?\n"
        'Examples: "1000000" (1 million), "1000000000" (1 billion)\n\n'
        "⚠️ This CANNOT be changed after deployment!\n\n"
        "💡 Tip: Consider your tokenomics carefully\n\n"
        "Total supply?"
    )


def _credentials_prompt(request: DeploymentRequest) -> str:
    if family_of(request) is BackendFamily.EVM:
        return (
            "I need your **private key** to deploy the contract.\n\n"
            "⚠️ **SECURITY WARNING:**\n"
            "- Your key is used ONLY for this deployment\n"
            "- It's NOT stored anywhere\n"
            f"- Make sure your wallet has {native_currency_symbol(BackendFamily.EVM, request.network)} for gas fees\n\n"
            "Format: `0x...` (with 0x prefix)\n\n"
            "Paste your private key:"
        )
    return (
        "I need your **Solana keypair** in JSON format.\n\n"
        "Find it at: `~/.config/solana/id.json`\n\n"
        "⚠️ **SECURITY WARNING:**\n"
        "- Your keypair is used ONLY for this deployment\n"
        "- It's NOT stored anywhere\n"
        "- Your wallet needs ~0.5 SOL for rent + deployment\n\n"
        "Format: `[1,2,3,...]` (JSON array)\n\n"
        "Paste your keypair:"
    )


def _create_pool_prompt(request: DeploymentRequest) -> str:
    if family_of(request) is BackendFamily.EVM:
        dex_line = "DEX: Uniswap V2 and compatible forks"
    else:
        dex_line = "DEX: Raydium, Meteora, or Jupiter (manual setup via UI)"
    return (
        "Would you like to create a liquidity pool for your token?\n\n"
        "💡 **Why create a pool?**\n"
        "- Allows users to trade your token on DEXes\n"
        "- Provides initial liquidity for price discovery\n\n"
        f"{dex_line}\n\n"
        "⚠️ **Requirements:**\n"
        f"- Additional {native_currency_symbol(family_of(request), request.network)} for liquidity\n"
        "- You'll need some of your tokens\n\n"
        'Type **"yes"** or **"no"**'
    )


def _dex_choice_prompt(request: DeploymentRequest) -> str:
    entries = "\n\n".join(
        f"🔹 **{dex.name}** - {dex.description}\n   - Website: {dex.mainnet_url}" for dex in SOLANA_DEXES.values()
    )
    choices = ", ".join(f'**"{key}"**' for key in SOLANA_DEXES)
    return (
        "Which DEX would you like to use for your liquidity pool?\n\n"
        f"{entries}\n\n"
        "💡 Tip: Raydium is recommended for most users\n\n"
        f"Which DEX? Type {choices}"
    )


def _pool_token_amount_prompt(request: DeploymentRequest) -> str:
    return (
        "How many tokens do you want to add to the liquidity pool?\n\n"
        "Example: If you created 1,000,000 tokens, you might add 500,000 (50%) to the pool\n\n"
        "💡 Tip: Common ranges are 30-70% of total supply\n\n"
        "⚠️ These tokens will be locked in the pool for liquidity\n\n"
        "Token amount for pool?"
    )


def _pool_base_amount_prompt(request: DeploymentRequest) -> str:
    currency = native_currency_symbol(family_of(request), request.network)
    return (
        f"How much {currency} do you want to pair with your tokens?\n\n"
        f'Example: "0.5" for 0.5 {currency}\n\n'
        "💡 This determines the initial price of your token:\n"
        f"- More {currency} = Higher initial price\n"
        f"- Less {currency} = Lower initial price\n\n"
        f"⚠️ Make sure you have enough {currency} in your wallet!\n\n"
        f"{currency} amount for pool?"
    )


def _wants_pool(request: DeploymentRequest) -> bool:
    return request.wants_pool


def _wants_solana_pool(request: DeploymentRequest) -> bool:
    return request.wants_pool and family_of(request) is BackendFamily.SOLANA


WIZARD_STEPS: Tuple[WizardStep, ...] = (
    WizardStep(
        WizardState.BLOCKCHAIN,
        title=lambda r: "Choose Blockchain",
        prompt=_blockchain_prompt,
        acknowledge=lambda r: f"✅ Great! You chose **{family_of(r).value.upper()}**",
        is_answered=lambda r: family_of(r) is not None,
    ),
    WizardStep(
        WizardState.NETWORK,
        title=lambda r: "Choose Network",
        prompt=_network_prompt,
        acknowledge=lambda r: f"✅ Network: **{r.network}**",
    ),
    WizardStep(
        WizardState.NAME,
        title=lambda r: "Token Name",
        prompt=_name_prompt,
        acknowledge=lambda r: f"✅ Token Name: **{r.name}**",
    ),
    WizardStep(
        WizardState.SYMBOL,
        title=lambda r: "Token Symbol",
        prompt=_symbol_prompt,
        acknowledge=lambda r: f"✅ Symbol: **{r.symbol}**",
    ),
    WizardStep(
        WizardState.DECIMALS,
        title=lambda r: "Decimals",
        prompt=_decimals_prompt,
        acknowledge=lambda r: f"✅ Decimals: **{r.decimals}**",
        is_answered=lambda r: r.decimals is not None,
    ),
    WizardStep(
        WizardState.SUPPLY,
        title=lambda r: "Total Supply",
        prompt=_supply_prompt,
        acknowledge=lambda r: f"✅ Supply: **{r.supply}** tokens",
    ),
    WizardStep(
        WizardState.CREDENTIALS,
        title=lambda r: "Deployment Credentials",
        prompt=_credentials_prompt,
        acknowledge=lambda r: "✅ Credentials received",
    ),
    WizardStep(
        WizardState.CREATE_POOL,
        title=lambda r: "Liquidity Pool Creation (Optional)",
        prompt=_create_pool_prompt,
        acknowledge=lambda r: "✅ Great! Let's set up your liquidity pool.",
    ),
    WizardStep(
        WizardState.DEX_CHOICE,
        title=lambda r: "Choose DEX (Solana)",
        prompt=_dex_choice_prompt,
        acknowledge=lambda r: f"✅ DEX: **{r.dex_choice}**",
        is_applicable=_wants_solana_pool,
    ),
    WizardStep(
        WizardState.POOL_TOKEN_AMOUNT,
        title=lambda r: "Token Amount for Pool",
        prompt=_pool_token_amount_prompt,
        acknowledge=lambda r: f"✅ Pool tokens: **{r.pool_token_amount}**",
        is_applicable=_wants_pool,
    ),
    WizardStep(
        WizardState.POOL_BASE_AMOUNT,
        title=lambda r: f"{native_currency_symbol(family_of(r), r.network)} Amount for Pool",
        prompt=_pool_base_amount_prompt,
        acknowledge=lambda r: f"✅ Pool {native_currency_symbol(family_of(r), r.network)}: **{r.pool_base_amount}**",
        is_applicable=_wants_pool,
    ),
)

WELCOME = "🚀 **Welcome to OpenCoins Launchpad!**\n\nLet's deploy your token step by step."


def applicable_steps(request: DeploymentRequest) -> List[WizardStep]:
    """Steps that apply to this request, in precedence order."""
    return [step for step in WIZARD_STEPS if step.is_applicable(request)]


def next_step(request: DeploymentRequest) -> Optional[WizardStep]:
    """First applicable step whose field is missing, regardless of later fields already present."""
    for step in applicable_steps(request):
        if not step.answered(request):
            return step
    return None


def render_prompt(step: WizardStep, request: DeploymentRequest) -> str:
    steps = applicable_steps(request)
    position = steps.index(step)
    header = WELCOME if position == 0 else steps[position - 1].acknowledge(request)
    return f"{header}\n\n**Step {position + 1}/{len(steps)}: {step.title(request)}**\n\n{step.prompt(request)}"
