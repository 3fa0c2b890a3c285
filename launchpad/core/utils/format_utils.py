from typing import Optional

from launchpad.core.structures.structures import BackendFamily

EVM_NATIVE_DECIMALS: int = 18
SOLANA_NATIVE_DECIMALS: int = 9


def _tail(address: str, n: int = 6) -> str:
    """Return the last n characters of an address (for concise logs)."""
    addr = address or ""
    return addr[-n:] if len(addr) >= n else addr


def format_units(base_units: int, decimals: int) -> str:
    """Render an integer base-unit amount in human units without float rounding."""
    if decimals <= 0:
        return str(base_units)
    sign = "-" if base_units < 0 else ""
    whole, fraction = divmod(abs(base_units), 10 ** decimals)
    fraction_text = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole}.{fraction_text}" if fraction_text else f"{sign}{whole}"


def native_currency_symbol(family: BackendFamily, network: Optional[str]) -> str:
    """Native gas/pairing currency for a network (BNB on BSC, MATIC on Polygon, ETH otherwise)."""
    if family is BackendFamily.SOLANA:
        return "SOL"
    key = (network or "").strip().lower()
    if key in {"bsc", "bsctestnet"}:
        return "BNB"
    if key in {"polygon", "mumbai"}:
        return "MATIC"
    return "ETH"
