from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from launchpad.configuration.config import settings
from launchpad.core.exceptions import ConfigurationError
from launchpad.logging.logger import get_logger

log = get_logger(__name__)


def _extract_bytecode(artifact: Any) -> Optional[str]:
    """Accept Hardhat (`bytecode: "0x.."`) and solc/Foundry (`bytecode: {"object": ".."}`) artifacts."""
    if not isinstance(artifact, dict):
        return None
    bytecode = artifact.get("bytecode")
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object")
    if not isinstance(bytecode, str) or not bytecode:
        return None
    return bytecode if bytecode.startswith("0x") else "0x" + bytecode


def load_token_bytecode(path: Optional[str] = None) -> str:
    """
    Load the compiled LaunchpadToken creation bytecode.

    Raises:
        ConfigurationError: when the artifact is missing or carries no bytecode.
    """
    artifact_path = Path(path or settings.EVM_TOKEN_ARTIFACT_PATH)
    try:
        artifact = json.loads(artifact_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Token contract artifact not found: {artifact_path}") from exc
    except ValueError as exc:
        raise ConfigurationError(f"Token contract artifact is not valid JSON: {artifact_path}") from exc

    bytecode = _extract_bytecode(artifact)
    if bytecode is None or bytecode == "0x":
        raise ConfigurationError(f"Token contract artifact has no bytecode: {artifact_path}")

    log.debug("[EVM][ARTIFACT] Loaded token bytecode from %s (%d bytes)", artifact_path, (len(bytecode) - 2) // 2)
    return bytecode
