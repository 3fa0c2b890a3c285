from __future__ import annotations

from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from launchpad.api.http.http_api import get_launchpad_service, router as http_router
from launchpad.api.models import ErrorResponse
from launchpad.configuration.config import PLUGIN_NAME, PLUGIN_VERSION, settings
from launchpad.core.exceptions import (
    BackendSubmissionError,
    BalanceError,
    ConfigurationError,
    LaunchpadError,
    NetworkNotFoundError,
    ValidationError,
)
from launchpad.logging.logger import get_logger, init_logging

log = get_logger(__name__)


def _parse_allowed_origins(env_value: str) -> List[str]:
    """Parse a comma-separated CORS origins string into a clean list."""
    return [origin.strip() for origin in env_value.split(",") if origin.strip()]


def status_code_for(error: LaunchpadError) -> int:
    if isinstance(error, ValidationError):
        return 422
    if isinstance(error, NetworkNotFoundError):
        return 404
    if isinstance(error, ConfigurationError):
        return 400
    if isinstance(error, BalanceError):
        return 409
    if isinstance(error, BackendSubmissionError):
        return 502
    return 500


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured launchpad API application.
    """
    app = FastAPI(title=f"{PLUGIN_NAME} API", version=PLUGIN_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_parse_allowed_origins(settings.CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def on_startup() -> None:
        """Configure logging and build the process-wide fee configuration."""
        init_logging()
        fee_config = get_launchpad_service().fee_config
        log.info("%s %s startup: fee %s%% (EVM → %s, Solana → %s)", PLUGIN_NAME, PLUGIN_VERSION,
                 fee_config.fee_percentage, fee_config.evm_fee_collector, fee_config.solana_fee_collector)

    @app.exception_handler(LaunchpadError)
    async def launchpad_error_handler(request: Request, exc: LaunchpadError) -> JSONResponse:
        status_code = status_code_for(exc)
        log.warning("[HTTP][ERROR] %s %s -> %s (%s): %s", request.method, request.url.path, status_code,
                    exc.kind, exc.message)
        payload = ErrorResponse(error=exc.kind, detail=exc.render())
        return JSONResponse(status_code=status_code, content=payload.model_dump())

    @app.get("/api/status")
    def api_status() -> Dict[str, Any]:
        """Return a minimal status payload with the supported chains."""
        service = get_launchpad_service()
        return {
            "ok": True,
            "service": PLUGIN_NAME,
            "version": PLUGIN_VERSION,
            "fee_percentage": service.fee_config.fee_percentage,
            "chains": {
                "evm": service.list_networks("evm"),
                "solana": service.list_networks("solana"),
            },
        }

    app.include_router(http_router)

    return app


# Expose an application instance for ASGI servers.
app = create_app()
