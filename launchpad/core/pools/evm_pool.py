from __future__ import annotations

import time
from typing import Any, Callable, List, Optional

from web3 import Web3

from launchpad.configuration.config import settings
from launchpad.core.exceptions import BalanceError, BestEffortFailure, ValidationError
from launchpad.core.networks.evm_networks import evm_registry, get_router_address
from launchpad.core.onchain.evm_abis import (
    LAUNCHPAD_TOKEN_ABI,
    UNISWAP_V2_FACTORY_ABI,
    UNISWAP_V2_ROUTER_ABI,
    ZERO_ADDRESS,
)
from launchpad.core.onchain.evm_signer import EvmSigner, build_evm_signer, build_web3
from launchpad.core.structures.structures import BackendFamily, BalanceCheck, PoolInfo, PoolResult, PoolStatus
from launchpad.core.utils.format_utils import EVM_NATIVE_DECIMALS, _tail, format_units, native_currency_symbol
from launchpad.core.utils.validation import parse_token_amount, validate_evm_address, validate_evm_private_key
from launchpad.logging.logger import get_logger

log = get_logger(__name__)

BASIS_POINTS_DENOMINATOR: int = 10_000
DEX_NAME: str = "Uniswap V2 compatible router"


def apply_slippage(amount: int, slippage_bps: int) -> int:
    """Minimum accepted amount after slippage, in exact integer arithmetic (rounds down)."""
    if not 0 <= slippage_bps <= BASIS_POINTS_DENOMINATOR:
        raise ValidationError(f"Slippage must be between 0 and {BASIS_POINTS_DENOMINATOR} basis points")
    return amount * (BASIS_POINTS_DENOMINATOR - slippage_bps) // BASIS_POINTS_DENOMINATOR


def _same_address(left: Optional[str], right: Optional[str]) -> bool:
    return bool(left) and bool(right) and str(left).lower() == str(right).lower()


class EvmPoolOrchestrator:
    """
    Seed a token/native-currency pool through the network's Uniswap V2 compatible router.

    Sequence: router lookup, balance check, approval (skipped when the allowance
    already covers the amount), addLiquidityETH, pair lookup, then a best-effort
    fee exclusion of the pair.
    """

    def __init__(
            self,
            signer_factory: Callable[[str, str, int], EvmSigner] = build_evm_signer,
            web3_factory: Callable[[str], Web3] = build_web3,
            slippage_bps: int = settings.POOL_SLIPPAGE_BPS,
            deadline_seconds: int = settings.POOL_DEADLINE_SECONDS,
            clock: Callable[[], float] = time.time,
    ) -> None:
        self.signer_factory = signer_factory
        self.web3_factory = web3_factory
        self.slippage_bps = slippage_bps
        self.deadline_seconds = deadline_seconds
        self.clock = clock

    @staticmethod
    def _shortfalls(check: BalanceCheck, token_decimals: int, symbol: str, native_symbol: str) -> List[str]:
        shortfalls: List[str] = []
        if not check.has_enough_tokens:
            shortfalls.append(
                f"Need {format_units(check.token_required, token_decimals)} {symbol}, "
                f"have {format_units(check.token_balance, token_decimals)}"
            )
        if not check.has_enough_native:
            shortfalls.append(
                f"Need {format_units(check.native_required, EVM_NATIVE_DECIMALS)} {native_symbol}, "
                f"have {format_units(check.native_balance, EVM_NATIVE_DECIMALS)}"
            )
        return shortfalls

    @staticmethod
    def _pair_address(factory: Any, token_address: str, weth_address: str) -> Optional[str]:
        pair = factory.functions.getPair(token_address, weth_address).call()
        return None if not pair or _same_address(pair, ZERO_ADDRESS) else pair

    def _exclude_pair_from_fee(self, signer: EvmSigner, token: Any, pair_address: str) -> str:
        """
        Exempt the pair from the transfer fee when the signer owns the token.

        Returns a note for the report. Never raises.
        """
        try:
            owner = token.functions.owner().call()
            if not _same_address(owner, signer.address):
                return "Cannot exclude pool from fees - wallet is not token owner"
            if token.functions.isExcludedFromFee(pair_address).call():
                return "Pool already excluded from fees"
            signer.transact(token.functions.setFeeExclusion(pair_address, True))
            return "Pool excluded from transfer fees"
        except Exception as exc:
            failure = BestEffortFailure(f"Could not exclude pool from fees: {exc}")
            log.warning("[EVM][POOL] %s", failure.message)
            return failure.message

    def create_pool(
            self,
            token_address: str,
            token_amount: str,
            base_amount: str,
            network: str,
            credentials: str,
            slippage_bps: Optional[int] = None,
    ) -> PoolResult:
        descriptor = evm_registry.lookup(network)
        router_address = get_router_address(descriptor.key)
        if not validate_evm_address(token_address):
            raise ValidationError("Invalid token address")
        validate_evm_private_key(credentials)
        bps = self.slippage_bps if slippage_bps is None else slippage_bps
        native_symbol = native_currency_symbol(BackendFamily.EVM, descriptor.key)

        signer = self.signer_factory(descriptor.rpc_endpoint, credentials, int(descriptor.chain_or_cluster_id))
        token = signer.contract(token_address, LAUNCHPAD_TOKEN_ABI)
        router = signer.contract(router_address, UNISWAP_V2_ROUTER_ABI)
        token_checksum = Web3.to_checksum_address(token_address)
        router_checksum = Web3.to_checksum_address(router_address)

        token_decimals = int(token.functions.decimals().call())
        token_units = parse_token_amount(token_amount, token_decimals, "token amount")
        native_units = parse_token_amount(base_amount, EVM_NATIVE_DECIMALS, f"{native_symbol} amount")
        symbol = token.functions.symbol().call()

        check = BalanceCheck(
            token_balance=int(token.functions.balanceOf(signer.address).call()),
            native_balance=signer.native_balance(),
            token_required=token_units,
            native_required=native_units,
        )
        shortfalls = self._shortfalls(check, token_decimals, symbol, native_symbol)
        if shortfalls:
            raise BalanceError(shortfalls)

        factory = signer.contract(router.functions.factory().call(), UNISWAP_V2_FACTORY_ABI)
        weth_address = router.functions.WETH().call()
        pair_preexisted = self._pair_address(factory, token_checksum, weth_address) is not None
        if pair_preexisted:
            log.info("[EVM][POOL] Pair already exists for token …%s, adding liquidity to it", _tail(token_address))

        allowance = int(token.functions.allowance(signer.address, router_checksum).call())
        if allowance < token_units:
            log.info("[EVM][POOL] Approving router …%s for %s %s", _tail(router_address),
                     format_units(token_units, token_decimals), symbol)
            signer.transact(token.functions.approve(router_checksum, token_units))
        else:
            log.info("[EVM][POOL] Router allowance already covers %s %s, skipping approval",
                     format_units(token_units, token_decimals), symbol)

        deadline = int(self.clock()) + self.deadline_seconds
        tx_hash = signer.transact(
            router.functions.addLiquidityETH(
                token_checksum,
                token_units,
                apply_slippage(token_units, bps),
                apply_slippage(native_units, bps),
                signer.address,
                deadline,
            ),
            value_wei=native_units,
        )
        log.info("[EVM][POOL] Liquidity added on %s (tx=%s)", descriptor.display_name, tx_hash)

        notes: List[str] = []
        pair_address = self._pair_address(factory, token_checksum, weth_address)
        if pair_address is None:
            notes.append("Pair address not yet visible on the factory")
        else:
            notes.append(self._exclude_pair_from_fee(signer, token, pair_address))

        return PoolResult(
            status=PoolStatus.CREATED,
            token_amount=token_amount,
            base_amount=base_amount,
            native_symbol=native_symbol,
            pool_address=pair_address,
            transaction_id=tx_hash,
            explorer_url=f"{descriptor.explorer_base_url}/tx/{tx_hash}",
            dex_name=DEX_NAME,
            pair_preexisted=pair_preexisted,
            notes=tuple(notes),
        )

    def get_pool_info(self, token_address: str, network: str) -> PoolInfo:
        """Look up the token/native pair on the network's router factory."""
        descriptor = evm_registry.lookup(network)
        router_address = get_router_address(descriptor.key)
        if not validate_evm_address(token_address):
            raise ValidationError("Invalid token address")

        web3 = self.web3_factory(descriptor.rpc_endpoint)
        router = web3.eth.contract(address=Web3.to_checksum_address(router_address), abi=UNISWAP_V2_ROUTER_ABI)
        factory = web3.eth.contract(address=router.functions.factory().call(), abi=UNISWAP_V2_FACTORY_ABI)
        pair = self._pair_address(factory, Web3.to_checksum_address(token_address), router.functions.WETH().call())
        return PoolInfo(exists=pair is not None, pair_address=pair)

    def validate_balances(
            self,
            token_address: str,
            owner_address: str,
            token_amount: str,
            base_amount: str,
            network: str,
    ) -> BalanceCheck:
        """Read-only balance check of an arbitrary wallet against pool funding amounts."""
        descriptor = evm_registry.lookup(network)
        for address in (token_address, owner_address):
            if not validate_evm_address(address):
                raise ValidationError(f"Invalid address: {address}")

        web3 = self.web3_factory(descriptor.rpc_endpoint)
        owner = Web3.to_checksum_address(owner_address)
        token = web3.eth.contract(address=Web3.to_checksum_address(token_address), abi=LAUNCHPAD_TOKEN_ABI)
        token_decimals = int(token.functions.decimals().call())
        return BalanceCheck(
            token_balance=int(token.functions.balanceOf(owner).call()),
            native_balance=int(web3.eth.get_balance(owner)),
            token_required=parse_token_amount(token_amount, token_decimals, "token amount"),
            native_required=parse_token_amount(base_amount, EVM_NATIVE_DECIMALS, "base amount"),
        )
