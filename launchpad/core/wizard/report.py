from __future__ import annotations

from typing import List, Optional

from launchpad.configuration.config import FeeConfig
from launchpad.core.exceptions import LaunchpadError
from launchpad.core.structures.structures import (
    BackendFamily,
    DeploymentResult,
    PoolResult,
    TokenInfo,
    TokenSpec,
)
from launchpad.core.utils.format_utils import format_units

SEPARATOR = "━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━"


def render_deployment_success(result: DeploymentResult, spec: TokenSpec, fee_config: FeeConfig) -> str:
    is_evm = result.family is BackendFamily.EVM
    address_label = "Contract Address" if is_evm else "Mint Address"
    tx_label = "Transaction Hash" if is_evm else "Transaction Signature"
    signer_label = "Deployer" if is_evm else "Authority"
    explorer_label = "Block Explorer" if is_evm else "Solana Explorer"

    return (
        "🎉 **TOKEN DEPLOYED SUCCESSFULLY!** 🎉\n\n"
        f"Your token **{spec.name} ({spec.symbol})** is now live on **{result.network_display_name}**!\n\n"
        "📋 **DEPLOYMENT DETAILS:**\n"
        f"{SEPARATOR}\n"
        f"📍 **{address_label}:**\n   `{result.asset_address}`\n\n"
        f"📝 **{tx_label}:**\n   `{result.transaction_id}`\n\n"
        f"🌐 **Network:** {result.network_display_name}\n\n"
        f"👤 **{signer_label}:** `{result.signer_address}`\n\n"
        f"🔗 **View on {explorer_label}:**\n   {result.explorer_url}\n\n"
        f"{SEPARATOR}\n\n"
        "⚠️ **LAUNCHPAD SERVICE FEE:**\n"
        f"{fee_config.fee_percentage}% of all token transfers will go to:\n"
        f"`{fee_config.collector_for(result.family.value)}`\n\n"
        "This is the service fee for using OpenCoins Launchpad."
    )


def render_pool_created(pool: PoolResult, spec: TokenSpec) -> str:
    lines = [
        "💧 **LIQUIDITY POOL CREATED!**",
        "",
        f"📍 **Pair Address:**\n   `{pool.pool_address or 'pending'}`",
        "",
        f"📝 **Transaction:**\n   `{pool.transaction_id}`",
        "",
        "💰 **Pool Composition:**",
        f"   - {pool.token_amount} {spec.symbol}",
        f"   - {pool.base_amount} {pool.native_symbol}",
    ]
    if pool.pair_preexisted:
        lines += ["", "ℹ️ Liquidity was added to an existing pair."]
    if pool.explorer_url:
        lines += ["", f"🔗 **View Pool:**\n   {pool.explorer_url}"]
    if pool.notes:
        lines += [""] + [f"📝 {note}" for note in pool.notes]
    lines += ["", "✅ Your token is now tradeable on DEXes!"]
    return "\n".join(lines)


def render_manual_setup(pool: PoolResult, spec: TokenSpec, asset_address: str) -> str:
    dex_name = pool.dex_name or "DEX"
    lines = [
        f"💧 **{dex_name.upper()} POOL - MANUAL SETUP REQUIRED**",
        "",
        f"Automated {dex_name} pool creation is not available.",
        f"Please create your pool manually using the {dex_name} UI:",
        "",
        f"🔗 **{dex_name} Pool Creation:**\n   {pool.explorer_url}",
        "",
        "📝 **Your Pool Details:**",
        f"   - Token: `{asset_address}`",
        f"   - Token Amount: {pool.token_amount} {spec.symbol}",
        f"   - {pool.native_symbol} Amount: {pool.base_amount} {pool.native_symbol}",
    ]
    if pool.notes:
        lines += [""] + [f"✅ {note}" for note in pool.notes]
    if pool.guidance:
        lines += ["", "**Steps:**", pool.guidance]
    return "\n".join(lines)


def render_pool_failure(error: LaunchpadError) -> str:
    return (
        "⚠️ **POOL CREATION FAILED**\n\n"
        f"Error: {error.message}\n\n"
        "Your token was deployed successfully, but the pool creation failed.\n"
        "You can create the pool manually later using a DEX interface."
    )


def render_next_steps(family: BackendFamily, pool: Optional[PoolResult], pool_requested: bool) -> str:
    if family is BackendFamily.EVM:
        steps = ["Verify contract on block explorer", "Add token to MetaMask/wallets"]
        if pool is not None and pool.is_created:
            steps.append("Pool created - Token is tradeable!")
        else:
            steps.append("Set up liquidity (if creating DEX token)")
    else:
        steps = ["Verify on Solana Explorer", "Add token to Phantom/Solflare"]
        if pool_requested:
            steps.append(f"Create pool on {pool.dex_name if pool and pool.dex_name else 'the DEX'} UI")
        else:
            steps.append("Set up on Raydium/Jupiter (if creating DEX token)")
    steps.append("Announce to your community!")
    numbered = "\n".join(f"{index}. ✅ {text}" for index, text in enumerate(steps, start=1))
    return f"💡 **NEXT STEPS:**\n{numbered}\n\n🎊 **Congratulations on your token launch!**"


def render_launch_report(
        result: DeploymentResult,
        spec: TokenSpec,
        fee_config: FeeConfig,
        pool: Optional[PoolResult] = None,
        pool_error: Optional[LaunchpadError] = None,
        pool_requested: bool = False,
) -> str:
    """Deployment section first; the pool outcome is always a separate section after it."""
    sections: List[str] = [render_deployment_success(result, spec, fee_config)]
    if pool_error is not None:
        sections.append(render_pool_failure(pool_error))
    elif pool is not None and pool.is_created:
        sections.append(render_pool_created(pool, spec))
    elif pool is not None:
        sections.append(render_manual_setup(pool, spec, result.asset_address))
    sections.append(render_next_steps(result.family, pool, pool_requested))
    return f"\n\n{SEPARATOR}\n\n".join(sections)


def render_deployment_failure(error: LaunchpadError) -> str:
    return (
        "❌ **DEPLOYMENT FAILED**\n\n"
        f"Error: {error.message}\n\n"
        "💡 **Common issues:**\n"
        "- Insufficient gas/SOL in wallet\n"
        "- Invalid private key/keypair format\n"
        "- Network connection issues\n"
        "- Incorrect network selection\n\n"
        "Please check and try again."
    )


def render_direct_deployment(result: DeploymentResult, name: str, symbol: str, fee_config: FeeConfig) -> str:
    address_label = "Address" if result.family is BackendFamily.EVM else "Mint"
    return (
        f"✅ {name} ({symbol}) deployed!\n\n"
        f"📍 {address_label}: `{result.asset_address}`\n"
        f"📝 TX: `{result.transaction_id}`\n"
        f"🌐 Network: {result.network_display_name}\n"
        f"🔗 Explorer: {result.explorer_url}\n\n"
        f"⚠️ Fee: {fee_config.fee_percentage}% → {fee_config.collector_for(result.family.value)}"
    )


def render_token_info(info: TokenInfo) -> str:
    supply = format_units(info.supply, info.decimals)
    if info.family is BackendFamily.EVM:
        return (
            f"**{info.name} ({info.symbol})**\n\n"
            f"📍 Address: `{info.address}`\n"
            f"🔢 Decimals: {info.decimals}\n"
            f"💰 Supply: {supply}\n"
            f"👤 Fee Collector: `{info.fee_collector or 'n/a'}`\n"
            f"🔗 Explorer: {info.explorer_url}"
        )
    return (
        "**Solana Token**\n\n"
        f"📍 Mint: `{info.address}`\n"
        f"🔢 Decimals: {info.decimals}\n"
        f"💰 Supply: {supply}\n"
        f"👤 Authority: `{info.mint_authority or 'none'}`\n"
        f"🧊 Freeze Authority: `{info.freeze_authority or 'none'}`\n"
        f"💸 Fee Authority: `{info.fee_collector or 'none'}`\n"
        f"🔗 Explorer: {info.explorer_url}"
    )
