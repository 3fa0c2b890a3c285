from __future__ import annotations

import json

import pytest

from launchpad.core.exceptions import ConfigurationError
from launchpad.core.onchain.evm_artifact import load_token_bytecode


def test_hardhat_artifact(tmp_path):
    artifact = tmp_path / "LaunchpadToken.json"
    artifact.write_text(json.dumps({"contractName": "LaunchpadToken", "bytecode": "0x6080604052"}))
    assert load_token_bytecode(str(artifact)) == "0x6080604052"


def test_foundry_artifact_without_prefix(tmp_path):
    artifact = tmp_path / "LaunchpadToken.json"
    artifact.write_text(json.dumps({"bytecode": {"object": "6080604052"}}))
    assert load_token_bytecode(str(artifact)) == "0x6080604052"


def test_missing_artifact(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_token_bytecode(str(tmp_path / "missing.json"))


def test_malformed_artifact(tmp_path):
    artifact = tmp_path / "LaunchpadToken.json"
    artifact.write_text("{not json")
    with pytest.raises(ConfigurationError, match="not valid JSON"):
        load_token_bytecode(str(artifact))


@pytest.mark.parametrize("content", [{"abi": []}, {"bytecode": ""}, {"bytecode": "0x"}, []])
def test_artifact_without_bytecode(tmp_path, content):
    artifact = tmp_path / "LaunchpadToken.json"
    artifact.write_text(json.dumps(content))
    with pytest.raises(ConfigurationError, match="no bytecode"):
        load_token_bytecode(str(artifact))
