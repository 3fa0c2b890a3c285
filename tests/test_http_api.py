from __future__ import annotations

import json
from types import SimpleNamespace

from fastapi.testclient import TestClient

from launchpad.api.app import create_app, status_code_for
from launchpad.api.http.http_api import get_launchpad_service
from launchpad.configuration.config import build_fee_config
from launchpad.core.backends.evm_backend import EvmBackend
from launchpad.core.exceptions import (
    BackendSubmissionError,
    BalanceError,
    BestEffortFailure,
    ConfigurationError,
    NetworkNotFoundError,
    ValidationError,
)
from launchpad.core.launchpad_service import LaunchpadService
from launchpad.core.structures.structures import (
    BackendFamily,
    BalanceCheck,
    DeploymentResult,
    PoolInfo,
    TokenInfo,
)

CONTRACT = "0x" + "ab" * 20
FEE_COLLECTOR = "0xd2C91503a0365F525699aFD55BaF10D7960Ac5b4"


class FakeLaunchpadService:
    def __init__(self, error=None):
        self.fee_config = build_fee_config()
        self.error = error
        self.calls = []

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    def list_networks(self, family):
        return ["sepolia"] if family is BackendFamily.EVM else ["devnet"]

    def deploy_token(self, family, network, name, symbol, decimals, supply, credentials):
        self.calls.append(("deploy_token", family, network, name, symbol, decimals, supply, credentials))
        self._maybe_fail()
        return DeploymentResult(
            family=family,
            asset_address=CONTRACT,
            transaction_id="0xdeadbeef",
            network_display_name="Sepolia Testnet",
            signer_address="0x" + "12" * 20,
            explorer_url=f"https://sepolia.etherscan.io/address/{CONTRACT}",
        )

    def get_token_info(self, family, address, network):
        self._maybe_fail()
        return TokenInfo(
            family=BackendFamily.EVM,
            address=address,
            network_display_name="Sepolia Testnet",
            explorer_url=f"https://sepolia.etherscan.io/address/{address}",
            decimals=18,
            supply=10 ** 24,
            name="My Token",
            symbol="MTK",
            fee_collector=FEE_COLLECTOR,
        )

    def get_pool_info(self, token, network):
        self._maybe_fail()
        return PoolInfo(exists=True, pair_address="0x" + "cd" * 20)

    def validate_balances(self, family, token, owner, token_amount, base_amount, network, decimals=None):
        self.calls.append(("validate_balances", family, decimals))
        self._maybe_fail()
        return BalanceCheck(token_balance=10 ** 21, native_balance=10 ** 17, token_required=10 ** 21,
                            native_required=5 * 10 ** 17)


def _client(service) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_launchpad_service] = lambda: service
    return TestClient(app)


def test_health():
    response = _client(FakeLaunchpadService()).get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["service"] == "OpenCoins Launchpad"


def test_status_lists_both_registries():
    response = TestClient(create_app()).get("/api/status")
    body = response.json()
    assert body["ok"] is True
    assert body["fee_percentage"] == 1
    assert "sepolia" in body["chains"]["evm"]
    assert body["chains"]["solana"] == ["mainnet", "devnet", "testnet"]


def test_launch_token_returns_next_prompt():
    response = _client(FakeLaunchpadService()).post("/api/launch-token", json={"blockchain": "solana"})
    assert response.status_code == 200
    body = response.json()
    assert body["state"] == "network"
    assert "devnet" in body["message"]


def test_launch_token_accepts_camel_case_pool_fields():
    response = _client(FakeLaunchpadService()).post("/api/launch-token", json={
        "blockchain": "evm",
        "network": "sepolia",
        "name": "My Token",
        "symbol": "MTK",
        "decimals": 18,
        "supply": "1000000",
        "credentials": "0x" + "11" * 32,
        "createPool": "yes",
        "tokenForPool": "500",
    })
    body = response.json()
    assert body["state"] == "pool_base_amount"
    assert "ETH Amount for Pool" in body["message"]


def test_launch_token_failures_are_prose():
    response = _client(LaunchpadService()).post("/api/launch-token", json={
        "blockchain": "evm",
        "network": "goerli",
        "name": "My Token",
        "symbol": "MTK",
        "decimals": 18,
        "supply": "1000000",
        "credentials": "0x" + "11" * 32,
        "createPool": "no",
    })
    assert response.status_code == 200
    assert response.json()["state"] == "failed"
    assert "Unknown network: goerli" in response.json()["message"]


def test_evm_deploy_uses_camel_case_payload_and_response():
    service = FakeLaunchpadService()
    response = _client(service).post("/api/evm/deploy", json={
        "network": "sepolia",
        "name": "My Token",
        "symbol": "MTK",
        "totalSupply": "1000000",
        "privateKey": "0x" + "11" * 32,
    })

    assert response.status_code == 200
    body = response.json()
    assert body["address"] == CONTRACT
    assert body["transactionId"] == "0xdeadbeef"
    assert body["explorerUrl"].endswith(CONTRACT)
    assert FEE_COLLECTOR in body["message"]
    assert service.calls[0][5] == 18


def test_solana_deploy_defaults_to_nine_decimals():
    service = FakeLaunchpadService()
    _client(service).post("/api/solana/deploy", json={
        "network": "devnet",
        "name": "Sol Token",
        "symbol": "SOLT",
        "supply": "1000000",
        "keypair": "[1, 2, 3]",
    })

    assert service.calls[0][1] is BackendFamily.SOLANA
    assert service.calls[0][5] == 9


def test_validation_error_maps_to_422():
    service = FakeLaunchpadService(error=ValidationError("Token symbol must be uppercase"))
    response = _client(service).post("/api/evm/deploy", json={
        "network": "sepolia",
        "name": "My Token",
        "symbol": "mtk",
        "totalSupply": "1000000",
        "privateKey": "0x" + "11" * 32,
    })

    assert response.status_code == 422
    assert response.json() == {"error": "validation", "detail": "❌ Error: Token symbol must be uppercase"}


def test_unknown_network_maps_to_404():
    service = FakeLaunchpadService(error=NetworkNotFoundError("goerli", "evm", ["sepolia"]))
    response = _client(service).get("/api/token-info", params={"address": CONTRACT, "network": "goerli",
                                                                 "chain": "evm"})
    assert response.status_code == 404
    assert response.json()["error"] == "configuration"


def test_token_info_serializes_supply_as_string():
    response = _client(FakeLaunchpadService()).get("/api/token-info", params={"address": CONTRACT,
                                                                              "network": "sepolia",
                                                                              "chain": "evm"})
    body = response.json()
    assert response.status_code == 200
    assert body["supply"] == str(10 ** 24)
    assert body["feeCollector"] == FEE_COLLECTOR
    assert "💰 Supply: 1000000" in body["message"]


def test_networks_endpoint():
    client = _client(FakeLaunchpadService())
    assert client.get("/api/networks/EVM").json() == {"chain": "evm", "networks": ["sepolia"]}
    assert client.get("/api/networks/bitcoin").status_code == 422


def test_pool_info():
    response = _client(FakeLaunchpadService()).get("/api/evm/pool-info", params={"token": CONTRACT,
                                                                                 "network": "sepolia"})
    assert response.json() == {"exists": True, "pairAddress": "0x" + "cd" * 20}


def test_check_balances():
    service = FakeLaunchpadService()
    response = _client(service).post("/api/pools/check-balances", json={
        "chain": "evm",
        "network": "sepolia",
        "tokenAddress": CONTRACT,
        "ownerAddress": "0x" + "12" * 20,
        "tokenAmount": "1000",
        "baseAmount": "0.5",
    })
    assert response.json() == {
        "hasEnoughTokens": True,
        "hasEnoughNative": False,
        "tokenBalance": str(10 ** 21),
        "nativeBalance": str(10 ** 17),
    }
    assert service.calls == [("validate_balances", "evm", None)]


def test_status_codes_per_error_kind():
    assert status_code_for(ValidationError("x")) == 422
    assert status_code_for(NetworkNotFoundError("x", "evm", [])) == 404
    assert status_code_for(ConfigurationError("x")) == 400
    assert status_code_for(BalanceError(["x"])) == 409
    assert status_code_for(BackendSubmissionError("x")) == 502
    assert status_code_for(BestEffortFailure("x")) == 500


class UnreachableCall:
    def call(self):
        raise ConnectionError("HTTPConnectionPool(host='localhost', port=8545): connection refused")


class UnreachableFunctions:
    def __getattr__(self, name):
        return lambda *args: UnreachableCall()


def _unreachable_web3(rpc_url):
    contract = SimpleNamespace(functions=UnreachableFunctions())
    return SimpleNamespace(eth=SimpleNamespace(contract=lambda address=None, abi=None: contract))


def _unreachable_service() -> LaunchpadService:
    return LaunchpadService(evm_backend=EvmBackend(web3_factory=_unreachable_web3))


def test_rpc_failure_on_token_info_keeps_underlying_message():
    response = _client(_unreachable_service()).get("/api/token-info", params={"address": CONTRACT,
                                                                               "network": "sepolia",
                                                                               "chain": "evm"})
    assert response.status_code == 502
    assert response.json()["error"] == "submission"
    assert "connection refused" in response.json()["detail"]


def test_rpc_failure_on_pool_info_keeps_underlying_message():
    response = _client(_unreachable_service()).get("/api/evm/pool-info", params={"token": CONTRACT,
                                                                                  "network": "sepolia"})
    assert response.status_code == 502
    assert response.json()["detail"].startswith("❌ Error: HTTPConnectionPool")


def test_inconsistent_solana_keypair_is_rejected_as_validation():
    response = _client(LaunchpadService()).post("/api/solana/deploy", json={
        "network": "devnet",
        "name": "Sol Token",
        "symbol": "SOLT",
        "supply": "1000000",
        "keypair": json.dumps([1] * 64),
    })
    assert response.status_code == 422
    assert response.json()["error"] == "validation"
    assert "Invalid Solana keypair" in response.json()["detail"]


def test_openapi_documents_error_payload():
    schema = TestClient(create_app()).get("/openapi.json").json()
    responses = schema["paths"]["/api/evm/deploy"]["post"]["responses"]
    assert responses["502"]["content"]["application/json"]["schema"]["$ref"] == "#/components/schemas/ErrorResponse"


def test_blank_decimals_answer_selects_family_default():
    response = _client(FakeLaunchpadService()).post("/api/launch-token", json={
        "blockchain": "solana",
        "network": "devnet",
        "name": "Sol Token",
        "symbol": "SOLT",
        "decimals": "",
    })
    assert response.status_code == 200
    assert response.json()["state"] == "supply"
