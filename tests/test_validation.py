from __future__ import annotations

import json

import pytest
from solders.keypair import Keypair

from launchpad.core.exceptions import ValidationError
from launchpad.core.structures.structures import BackendFamily
from launchpad.core.utils.validation import (
    parse_token_amount,
    validate_and_parse_supply,
    validate_credentials,
    validate_decimals,
    validate_evm_address,
    validate_evm_private_key,
    validate_solana_address,
    validate_solana_keypair,
    validate_token_name,
    validate_token_symbol,
)


def test_evm_address_accepts_any_casing_of_40_hex_characters():
    assert validate_evm_address("0xd2C91503a0365F525699aFD55BaF10D7960Ac5b4") is True
    assert validate_evm_address("0x" + "ab" * 20) is True


def test_evm_address_rejects_malformed_values():
    assert validate_evm_address("invalid") is False
    assert validate_evm_address("0x123") is False
    assert validate_evm_address("d2C91503a0365F525699aFD55BaF10D7960Ac5b4") is False
    assert validate_evm_address(None) is False


def test_solana_address_requires_32_byte_base58_key():
    assert validate_solana_address("CrjcCXMHg1MkrzdTBkSQjmGfiKjK7EGXHpcofgMBrB6W") is True
    assert validate_solana_address(str(Keypair().pubkey())) is True
    assert validate_solana_address("0OIl") is False
    assert validate_solana_address("abc") is False
    assert validate_solana_address("") is False


def test_token_name_accepts_letters_digits_spaces_dashes_and_underscores():
    validate_token_name("My Token")
    validate_token_name("Test-Token_123")


@pytest.mark.parametrize("name", ["", "   ", "a" * 101, "Token<script>", "Émoji"])
def test_token_name_rejects_invalid_values(name):
    with pytest.raises(ValidationError):
        validate_token_name(name)


def test_token_symbol_accepts_uppercase_alphanumerics():
    validate_token_symbol("MTK")
    validate_token_symbol("TEST123")


@pytest.mark.parametrize("symbol", ["", "mtk", "Mtk", "TEST-TOKEN", "A" * 21])
def test_token_symbol_rejects_invalid_values_without_normalizing(symbol):
    with pytest.raises(ValidationError):
        validate_token_symbol(symbol)


def test_decimals_bounds_depend_on_backend_family():
    validate_decimals(18, "evm")
    validate_decimals(0, BackendFamily.EVM)
    validate_decimals(9, "solana")
    validate_decimals(6, BackendFamily.SOLANA)

    with pytest.raises(ValidationError):
        validate_decimals(19, "evm")
    with pytest.raises(ValidationError):
        validate_decimals(10, "solana")
    with pytest.raises(ValidationError):
        validate_decimals(-1, "evm")


def test_decimals_must_be_a_real_integer():
    with pytest.raises(ValidationError):
        validate_decimals(True, "evm")
    with pytest.raises(ValidationError):
        validate_decimals("18", "evm")


def test_supply_is_scaled_with_exact_integer_arithmetic():
    assert validate_and_parse_supply("1000000", 18) == 10 ** 24
    assert validate_and_parse_supply("1,000,000", 6) == 1_000_000_000_000
    assert validate_and_parse_supply("1 000 000", 0) == 1_000_000
    assert validate_and_parse_supply("1000.5", 2) == 100050
    assert validate_and_parse_supply("0.123456789123456789", 18) == 123456789123456789


def test_supply_fraction_beyond_decimals_is_truncated():
    assert validate_and_parse_supply("1.999", 2) == 199


def test_supply_accepts_exactly_one_trillion():
    assert validate_and_parse_supply("1000000000000", 9) == 10 ** 21


@pytest.mark.parametrize("supply", ["0", "0.0", "-100", "invalid", "1e6", "1.2.3", "", "1000000000000.5",
                                    "1000000000001"])
def test_supply_rejects_invalid_values(supply):
    with pytest.raises(ValidationError):
        validate_and_parse_supply(supply, 18)


def test_supply_below_smallest_unit_is_rejected():
    with pytest.raises(ValidationError):
        validate_and_parse_supply("0.001", 2)


def test_pool_amounts_have_no_upper_cap():
    assert parse_token_amount("2000000000000", 0) == 2_000_000_000_000
    assert parse_token_amount("0.5", 18) == 5 * 10 ** 17


def test_pool_amount_must_be_positive():
    with pytest.raises(ValidationError, match="Token amount must be greater than 0"):
        parse_token_amount("0", 18, "token amount")


def test_evm_private_key_structure():
    validate_evm_private_key("0x" + "1f" * 32)
    validate_evm_private_key("AB" * 32)

    with pytest.raises(ValidationError, match="length"):
        validate_evm_private_key("0x1234")
    with pytest.raises(ValidationError, match="hex"):
        validate_evm_private_key("zz" * 32)


def test_solana_keypair_parses_json_byte_array():
    secret = list(bytes(Keypair()))
    assert validate_solana_keypair(json.dumps(secret)) == secret


@pytest.mark.parametrize("keypair", ["not json", "{}", "[1, 2, 3]", json.dumps([256] * 64),
                                     json.dumps([True] * 64)])
def test_solana_keypair_rejects_malformed_input(keypair):
    with pytest.raises(ValidationError):
        validate_solana_keypair(keypair)


def test_credentials_dispatch_on_family():
    validate_credentials("0x" + "11" * 32, BackendFamily.EVM)
    with pytest.raises(ValidationError):
        validate_credentials("0x" + "11" * 32, BackendFamily.SOLANA)
