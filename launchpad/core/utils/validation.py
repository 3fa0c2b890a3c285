from __future__ import annotations

import json
import re
from typing import List, Tuple

import base58

from launchpad.core.exceptions import ValidationError
from launchpad.core.structures.structures import BackendFamily

MAX_NAME_LENGTH: int = 100
MAX_SYMBOL_LENGTH: int = 20
MAX_SUPPLY_HUMAN_UNITS: int = 1_000_000_000_000
MAX_DECIMALS = {
    BackendFamily.EVM: 18,
    BackendFamily.SOLANA: 9,
}
SOLANA_SECRET_KEY_LENGTH: int = 64
SOLANA_PUBLIC_KEY_LENGTH: int = 32

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9 _\-]+$")
_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9]+$")
_AMOUNT_PATTERN = re.compile(r"^(\d+)(?:\.(\d+))?$")
_SEPARATORS_PATTERN = re.compile(r"[,\s]")
_EVM_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
_EVM_PRIVATE_KEY_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")


def validate_evm_address(address: str) -> bool:
    """Structural check: `0x` followed by 40 hex characters (any casing, checksummable)."""
    return isinstance(address, str) and bool(_EVM_ADDRESS_PATTERN.match(address))


def validate_solana_address(address: str) -> bool:
    """Structural check: base-58 string decoding to a 32-byte public key."""
    if not isinstance(address, str) or not address:
        return False
    try:
        decoded = base58.b58decode(address)
    except ValueError:
        return False
    return len(decoded) == SOLANA_PUBLIC_KEY_LENGTH


def validate_token_name(name: str) -> None:
    if not name or not name.strip():
        raise ValidationError("Token name cannot be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Token name must be {MAX_NAME_LENGTH} characters or less")
    if not _NAME_PATTERN.match(name):
        raise ValidationError("Token name contains invalid characters")


def validate_token_symbol(symbol: str) -> None:
    """Uppercase alphanumerics only. A lowercase symbol is rejected, never normalized."""
    if not symbol or not symbol.strip():
        raise ValidationError("Token symbol cannot be empty")
    if len(symbol) > MAX_SYMBOL_LENGTH:
        raise ValidationError(f"Token symbol must be {MAX_SYMBOL_LENGTH} characters or less")
    if not _SYMBOL_PATTERN.match(symbol):
        raise ValidationError("Token symbol must be uppercase alphanumeric characters only")


def validate_decimals(decimals: int, family: BackendFamily | str) -> None:
    family = BackendFamily.parse(family) if isinstance(family, str) else family
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise ValidationError("Decimals must be an integer")
    upper = MAX_DECIMALS[family]
    if decimals < 0 or decimals > upper:
        label = "EVM" if family is BackendFamily.EVM else "Solana"
        raise ValidationError(f"{label} token decimals must be between 0 and {upper}")


def _split_amount(raw: str, label: str) -> Tuple[int, str]:
    """Strip separators and split `digits[.digits]` into (whole, fraction digits)."""
    if not isinstance(raw, str):
        raise ValidationError(f"Invalid {label} format")
    cleaned = _SEPARATORS_PATTERN.sub("", raw)
    match = _AMOUNT_PATTERN.match(cleaned)
    if match is None:
        raise ValidationError(f"Invalid {label} format")
    return int(match.group(1)), match.group(2) or ""


def _to_base_units(whole: int, fraction: str, decimals: int) -> int:
    """`whole * 10^decimals + floor(fraction * 10^decimals)` in exact integer arithmetic."""
    scaled_fraction = int(fraction[:decimals].ljust(decimals, "0")) if decimals > 0 else 0
    return whole * 10 ** decimals + scaled_fraction


def validate_and_parse_supply(supply: str, decimals: int) -> int:
    """
    Parse a human supply string into base units.

    Accepts thousands separators and whitespace, requires a positive value no
    larger than one trillion tokens.
    """
    whole, fraction = _split_amount(supply, "supply")
    has_fraction = fraction.strip("0") != ""

    if whole == 0 and not has_fraction:
        raise ValidationError("Supply must be greater than 0")
    if whole > MAX_SUPPLY_HUMAN_UNITS or (whole == MAX_SUPPLY_HUMAN_UNITS and has_fraction):
        raise ValidationError("Supply exceeds maximum limit of 1 trillion")

    base_units = _to_base_units(whole, fraction, decimals)
    if base_units == 0:
        raise ValidationError(f"Supply is smaller than the smallest unit for {decimals} decimals")
    return base_units


def parse_token_amount(amount: str, decimals: int, label: str = "amount") -> int:
    """Same grammar as the supply, without the upper cap. Used for pool funding amounts."""
    whole, fraction = _split_amount(amount, label)
    base_units = _to_base_units(whole, fraction, decimals)
    if base_units <= 0:
        raise ValidationError(f"{label.capitalize()} must be greater than 0")
    return base_units


def validate_evm_private_key(private_key: str) -> None:
    """64 hex characters with an optional `0x` prefix. Structural only."""
    if not isinstance(private_key, str):
        raise ValidationError("Invalid private key length")
    clean_key = private_key[2:] if private_key.startswith("0x") else private_key
    if len(clean_key) != 64:
        raise ValidationError("Invalid private key length")
    if not _EVM_PRIVATE_KEY_PATTERN.match(clean_key):
        raise ValidationError("Private key must be a valid hex string")


def validate_solana_keypair(keypair: str) -> List[int]:
    """
    Parse a keypair file body (`[12,34,...]`) into its 64 secret-key bytes. Structural only.
    """
    try:
        parsed = json.loads(keypair)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            "Keypair must be provided as JSON array of numbers (from keypair file)"
        ) from exc

    if not isinstance(parsed, list):
        raise ValidationError("Keypair must be a JSON array")
    if len(parsed) != SOLANA_SECRET_KEY_LENGTH:
        raise ValidationError(f"Keypair must contain {SOLANA_SECRET_KEY_LENGTH} bytes, got {len(parsed)}")
    for value in parsed:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
            raise ValidationError("Keypair must contain only byte values (0-255)")
    return parsed


def validate_credentials(credentials: str, family: BackendFamily) -> None:
    if family is BackendFamily.EVM:
        validate_evm_private_key(credentials)
    else:
        validate_solana_keypair(credentials)
