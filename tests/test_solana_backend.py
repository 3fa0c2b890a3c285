from __future__ import annotations

import json
import struct
from types import SimpleNamespace

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_2022_PROGRAM_ID

from launchpad.configuration.config import FeeConfig, build_fee_config
from launchpad.core.backends.solana_backend import SolanaBackend
from launchpad.core.exceptions import ConfigurationError, ValidationError
from launchpad.core.onchain.token2022 import MINT_WITH_TRANSFER_FEE_LENGTH, get_associated_token_address_2022
from launchpad.core.structures.structures import BackendFamily, TokenSpec

PAYER = Keypair()
MINT = Keypair()
KEYPAIR_JSON = json.dumps(list(bytes(PAYER)))
FEE_COLLECTOR = Pubkey.from_string("CrjcCXMHg1MkrzdTBkSQjmGfiKjK7EGXHpcofgMBrB6W")
SPEC = TokenSpec(name="Sol Token", symbol="SOLT", decimals=9, total_supply_base_units=10 ** 18)


class FakeSolanaSigner:
    def __init__(self):
        self.pubkey = PAYER.pubkey()
        self.address = str(self.pubkey)
        self.rent_sizes = []
        self.sent = []

    def minimum_balance_for_rent_exemption(self, size):
        self.rent_sizes.append(size)
        return 3_000_000

    def send_instructions(self, instructions, extra_signers=()):
        self.sent.append((list(instructions), list(extra_signers)))
        return f"sig{len(self.sent)}"


class FakeSolanaClient:
    def __init__(self, parsed):
        self.parsed = parsed
        self.queried = []

    def get_account_info_json_parsed(self, address, commitment=None):
        self.queried.append(address)
        if self.parsed is None:
            return SimpleNamespace(value=None)
        return SimpleNamespace(value=SimpleNamespace(data=SimpleNamespace(parsed=self.parsed)))


def _backend(signer=None, client=None) -> SolanaBackend:
    return SolanaBackend(
        signer_factory=lambda rpc, secret: signer,
        client_factory=lambda rpc: client,
        keypair_factory=lambda: MINT,
    )


def test_deploy_creates_fee_bearing_mint_then_mints_supply():
    signer = FakeSolanaSigner()
    result = _backend(signer).deploy_token(SPEC, KEYPAIR_JSON, build_fee_config(), "devnet")

    assert len(signer.sent) == 2
    mint_instructions, mint_signers = signer.sent[0]
    assert len(mint_instructions) == 3
    assert mint_signers == [MINT]
    assert signer.rent_sizes == [MINT_WITH_TRANSFER_FEE_LENGTH]
    assert MINT_WITH_TRANSFER_FEE_LENGTH == 278

    create_account, fee_config, initialize_mint = mint_instructions
    assert create_account.accounts[1].pubkey == MINT.pubkey()
    assert fee_config.program_id == TOKEN_2022_PROGRAM_ID
    assert initialize_mint.program_id == TOKEN_2022_PROGRAM_ID

    supply_instructions, supply_signers = signer.sent[1]
    assert len(supply_instructions) == 2
    assert supply_signers == []
    associated = get_associated_token_address_2022(PAYER.pubkey(), MINT.pubkey())
    assert supply_instructions[0].accounts[1].pubkey == associated

    assert result.family is BackendFamily.SOLANA
    assert result.asset_address == str(MINT.pubkey())
    assert result.transaction_id == "sig1"
    assert result.signer_address == str(PAYER.pubkey())
    assert result.network_display_name == "Solana Devnet"
    assert result.explorer_url == f"https://solscan.io/token/{MINT.pubkey()}?cluster=devnet"


def test_transfer_fee_config_routes_fees_to_collector():
    signer = FakeSolanaSigner()
    _backend(signer).deploy_token(SPEC, KEYPAIR_JSON, build_fee_config(), "mainnet")

    data = bytes(signer.sent[0][0][1].data)
    assert data[0] == 26
    assert data[1] == 0
    assert data[2] == 1 and data[3:35] == bytes(FEE_COLLECTOR)
    assert data[35] == 1 and data[36:68] == bytes(FEE_COLLECTOR)
    assert struct.unpack("<HQ", data[-10:]) == (100, 10 ** 9)


def test_maximum_fee_tracks_decimals():
    signer = FakeSolanaSigner()
    spec = TokenSpec(name="Six", symbol="SIX", decimals=6, total_supply_base_units=10 ** 12)
    _backend(signer).deploy_token(spec, KEYPAIR_JSON, build_fee_config(), "devnet")

    assert struct.unpack("<HQ", bytes(signer.sent[0][0][1].data)[-10:]) == (100, 10 ** 6)


def test_supply_beyond_u64_is_rejected_before_rpc():
    spec = TokenSpec(name="Big", symbol="BIG", decimals=9, total_supply_base_units=2 ** 64)
    with pytest.raises(ValidationError, match="Solana token amount limit"):
        _backend(signer=None).deploy_token(spec, KEYPAIR_JSON, build_fee_config(), "devnet")


def test_invalid_fee_collector_is_a_configuration_error():
    signer = FakeSolanaSigner()
    fee_config = FeeConfig("0xd2C91503a0365F525699aFD55BaF10D7960Ac5b4", "not-base58-0OIl", 1)
    with pytest.raises(ConfigurationError, match="Invalid Solana fee collector address"):
        _backend(signer).deploy_token(SPEC, KEYPAIR_JSON, fee_config, "devnet")
    assert signer.sent == []


def test_deploy_rejects_evm_credentials_and_decimals():
    backend = _backend(FakeSolanaSigner())
    with pytest.raises(ValidationError):
        backend.deploy_token(SPEC, "0x" + "11" * 32, build_fee_config(), "devnet")
    with pytest.raises(ValidationError):
        backend.deploy_token(TokenSpec("Sol Token", "SOLT", 10, 10 ** 18), KEYPAIR_JSON, build_fee_config(), "devnet")


def test_token_info_reads_parsed_mint():
    parsed = {
        "type": "mint",
        "info": {
            "decimals": 9,
            "supply": "1000000000000000000",
            "mintAuthority": str(PAYER.pubkey()),
            "freezeAuthority": None,
            "extensions": [
                {"extension": "transferFeeConfig", "state": {"withdrawWithheldAuthority": str(FEE_COLLECTOR)}},
            ],
        },
    }
    client = FakeSolanaClient(parsed)
    info = _backend(client=client).get_token_info(str(MINT.pubkey()), "devnet")

    assert client.queried == [MINT.pubkey()]
    assert info.decimals == 9
    assert info.supply == 10 ** 18
    assert info.mint_authority == str(PAYER.pubkey())
    assert info.freeze_authority is None
    assert info.fee_collector == str(FEE_COLLECTOR)
    assert info.name is None


def test_token_info_requires_a_mint_account():
    with pytest.raises(ValidationError, match="No token mint found"):
        _backend(client=FakeSolanaClient(None)).get_token_info(str(MINT.pubkey()), "devnet")
    with pytest.raises(ValidationError, match="No token mint found"):
        _backend(client=FakeSolanaClient({"type": "account", "info": {}})).get_token_info(
            str(MINT.pubkey()), "devnet"
        )
    with pytest.raises(ValidationError, match="Invalid mint address"):
        _backend(client=FakeSolanaClient(None)).get_token_info("0x" + "ab" * 20, "devnet")
