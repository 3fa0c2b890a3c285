from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from launchpad.api.models import (
    BalanceCheckRequest,
    BalanceCheckResponse,
    DeployEvmTokenRequest,
    DeploySolanaTokenRequest,
    DeploymentResponse,
    ErrorResponse,
    LaunchTokenRequest,
    NetworksResponse,
    PoolInfoResponse,
    TokenInfoResponse,
    WizardResponse,
)
from launchpad.configuration.config import PLUGIN_NAME, PLUGIN_VERSION
from launchpad.core.launchpad_service import LaunchpadService
from launchpad.core.structures.structures import BackendFamily, DeploymentResult
from launchpad.core.wizard.report import render_direct_deployment, render_token_info
from launchpad.core.wizard.wizard import LaunchWizard
from launchpad.logging.logger import get_logger

router = APIRouter()
log = get_logger(__name__)

ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    status: {"model": ErrorResponse} for status in (400, 404, 409, 422, 502)
}


@lru_cache(maxsize=1)
def get_launchpad_service() -> LaunchpadService:
    """Process-wide service; holds only immutable configuration and stateless backends."""
    return LaunchpadService()


def _deployment_response(
        service: LaunchpadService,
        result: DeploymentResult,
        name: str,
        symbol: str,
) -> DeploymentResponse:
    return DeploymentResponse(
        chain=result.family.value,
        address=result.asset_address,
        transaction_id=result.transaction_id,
        network=result.network_display_name,
        signer=result.signer_address,
        explorer_url=result.explorer_url,
        message=render_direct_deployment(result, name, symbol, service.fee_config),
    )


@router.get("/api/health", tags=["health"])  # type: ignore[misc]
def get_health() -> Dict[str, Any]:
    """Liveness payload; performs no chain I/O."""
    return {
        "status": "ok",
        "service": PLUGIN_NAME,
        "version": PLUGIN_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.post("/api/launch-token", response_model=WizardResponse, tags=["wizard"])  # type: ignore[misc]
def launch_token(
        payload: LaunchTokenRequest,
        service: LaunchpadService = Depends(get_launchpad_service),
) -> WizardResponse:
    """
    One turn of the interactive launch wizard.

    The client re-sends every answer collected so far. The response is the next
    question, or the final deployment report once every answer is present.
    Failures are rendered into the prose, so this endpoint always answers 200.
    """
    outcome = LaunchWizard(service).run(payload.to_request())
    log.debug("[HTTP][WIZARD] state=%s", outcome.state.value)
    return WizardResponse(state=outcome.state.value, message=outcome.message)


@router.post("/api/evm/deploy", response_model=DeploymentResponse, tags=["deploy"], responses=ERROR_RESPONSES)  # type: ignore[misc]
def deploy_evm_token(
        payload: DeployEvmTokenRequest,
        service: LaunchpadService = Depends(get_launchpad_service),
) -> DeploymentResponse:
    """Deploy a fee-bearing ERC-20 in one call, for callers that already know every parameter."""
    result = service.deploy_token(
        BackendFamily.EVM,
        network=payload.network,
        name=payload.name,
        symbol=payload.symbol,
        decimals=payload.decimals,
        supply=payload.total_supply,
        credentials=payload.private_key,
    )
    log.info("[HTTP][EVM][DEPLOY] %s deployed at %s", payload.symbol, result.asset_address)
    return _deployment_response(service, result, payload.name, payload.symbol)


@router.post("/api/solana/deploy", response_model=DeploymentResponse, tags=["deploy"], responses=ERROR_RESPONSES)  # type: ignore[misc]
def deploy_solana_token(
        payload: DeploySolanaTokenRequest,
        service: LaunchpadService = Depends(get_launchpad_service),
) -> DeploymentResponse:
    """Deploy a Token-2022 mint with the transfer-fee extension in one call."""
    result = service.deploy_token(
        BackendFamily.SOLANA,
        network=payload.network,
        name=payload.name,
        symbol=payload.symbol,
        decimals=payload.decimals,
        supply=payload.supply,
        credentials=payload.keypair,
    )
    log.info("[HTTP][SOLANA][DEPLOY] %s deployed at %s", payload.symbol, result.asset_address)
    return _deployment_response(service, result, payload.name, payload.symbol)


@router.get("/api/token-info", response_model=TokenInfoResponse, tags=["tokens"], responses=ERROR_RESPONSES)  # type: ignore[misc]
def get_token_info(
        address: str = Query(..., min_length=1),
        network: str = Query(..., min_length=1),
        chain: str = Query(..., description="'evm' or 'solana'."),
        service: LaunchpadService = Depends(get_launchpad_service),
) -> TokenInfoResponse:
    """Read current on-chain metadata of a deployed token."""
    info = service.get_token_info(chain, address, network)
    return TokenInfoResponse(
        chain=info.family.value,
        address=info.address,
        network=info.network_display_name,
        decimals=info.decimals,
        supply=str(info.supply),
        name=info.name,
        symbol=info.symbol,
        fee_collector=info.fee_collector,
        mint_authority=info.mint_authority,
        freeze_authority=info.freeze_authority,
        explorer_url=info.explorer_url,
        message=render_token_info(info),
    )


@router.get("/api/networks/{chain}", response_model=NetworksResponse, tags=["networks"], responses=ERROR_RESPONSES)  # type: ignore[misc]
def get_networks(
        chain: str,
        service: LaunchpadService = Depends(get_launchpad_service),
) -> NetworksResponse:
    family = BackendFamily.parse(chain)
    return NetworksResponse(chain=family.value, networks=service.list_networks(family))


@router.get("/api/evm/pool-info", response_model=PoolInfoResponse, tags=["pools"], responses=ERROR_RESPONSES)  # type: ignore[misc]
def get_pool_info(
        token: str = Query(..., min_length=1),
        network: str = Query(..., min_length=1),
        service: LaunchpadService = Depends(get_launchpad_service),
) -> PoolInfoResponse:
    """Whether a token/native pair already exists on the network's router factory."""
    info = service.get_pool_info(token, network)
    return PoolInfoResponse(exists=info.exists, pair_address=info.pair_address)


@router.post("/api/pools/check-balances", response_model=BalanceCheckResponse, tags=["pools"], responses=ERROR_RESPONSES)  # type: ignore[misc]
def check_pool_balances(
        payload: BalanceCheckRequest,
        service: LaunchpadService = Depends(get_launchpad_service),
) -> BalanceCheckResponse:
    """
    Compare a wallet's balances against pool funding amounts without submitting anything.

    Balances are returned in base units, as decimal strings.
    """
    check = service.validate_balances(
        payload.chain,
        payload.token_address,
        payload.owner_address,
        payload.token_amount,
        payload.base_amount,
        payload.network,
        decimals=payload.decimals,
    )
    return BalanceCheckResponse(
        has_enough_tokens=check.has_enough_tokens,
        has_enough_native=check.has_enough_native,
        token_balance=str(check.token_balance),
        native_balance=str(check.native_balance),
    )
