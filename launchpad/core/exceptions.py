from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence


class LaunchpadError(Exception):
    """Base for every classified launchpad failure."""

    kind: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def render(self) -> str:
        return f"❌ Error: {self.message}"


class ValidationError(LaunchpadError):
    """Malformed or out-of-range user input. Never reaches a backend."""

    kind = "validation"


class ConfigurationError(LaunchpadError):
    """Static lookup miss: unknown network, missing router, missing contract artifact."""

    kind = "configuration"


class NetworkNotFoundError(ConfigurationError):
    """Network key absent from the registry of the requested backend family."""

    def __init__(self, network: str, family: str, available: Sequence[str]) -> None:
        self.network = network
        self.family = family
        self.available: List[str] = list(available)
        label = "Solana network" if family == "solana" else "network"
        super().__init__(f"Unknown {label}: {network}. Supported networks: {', '.join(self.available)}")


class BalanceError(LaunchpadError):
    """Insufficient funds discovered before any transaction was submitted."""

    kind = "balance"

    def __init__(self, shortfalls: Sequence[str]) -> None:
        self.shortfalls: List[str] = list(shortfalls)
        super().__init__("Insufficient balance. " + "; ".join(self.shortfalls))


class BackendSubmissionError(LaunchpadError):
    """The chain rejected or failed to confirm a transaction; message is the underlying cause verbatim."""

    kind = "submission"

    def __init__(self, message: str, tx_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.tx_id = tx_id


class BestEffortFailure(LaunchpadError):
    """Optional post-step failure. Recorded as a note, never fails the parent operation."""

    kind = "best_effort"


def classify_error(exc: Exception) -> LaunchpadError:
    """Chain-library failures outside a submission are reported like submission failures."""
    if isinstance(exc, LaunchpadError):
        return exc
    return BackendSubmissionError(str(exc))


@contextmanager
def classified_errors() -> Iterator[None]:
    """Re-raise anything unclassified as a BackendSubmissionError carrying the original message."""
    try:
        yield
    except LaunchpadError:
        raise
    except Exception as exc:
        raise classify_error(exc) from exc
