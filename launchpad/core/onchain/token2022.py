"""
Token-2022 instruction builders for mints carrying the TransferFeeConfig extension.

solana-py ships the classic SPL Token instructions; the transfer-fee extension and
the associated-token-account creation for the Token-2022 program are encoded here.
"""
from __future__ import annotations

import struct
from typing import Final, Optional

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID

# Account layout sizes (bytes)
BASE_ACCOUNT_LENGTH: Final[int] = 165
ACCOUNT_TYPE_SIZE: Final[int] = 1
TLV_HEADER_SIZE: Final[int] = 4
TRANSFER_FEE_CONFIG_SIZE: Final[int] = 108

MINT_WITH_TRANSFER_FEE_LENGTH: Final[int] = (
        BASE_ACCOUNT_LENGTH + ACCOUNT_TYPE_SIZE + TLV_HEADER_SIZE + TRANSFER_FEE_CONFIG_SIZE
)

TRANSFER_FEE_EXTENSION_INSTRUCTION: Final[int] = 26
INITIALIZE_TRANSFER_FEE_CONFIG: Final[int] = 0
MAX_FEE_BASIS_POINTS: Final[int] = 10_000
U64_MAX: Final[int] = 2 ** 64 - 1


def _encode_optional_pubkey(key: Optional[Pubkey]) -> bytes:
    if key is None:
        return b"\x00" + bytes(32)
    return b"\x01" + bytes(key)


def initialize_transfer_fee_config(
        mint: Pubkey,
        transfer_fee_config_authority: Optional[Pubkey],
        withdraw_withheld_authority: Optional[Pubkey],
        transfer_fee_basis_points: int,
        maximum_fee: int,
) -> Instruction:
    """Must run before InitializeMint on an uninitialized mint account."""
    if not 0 <= transfer_fee_basis_points <= MAX_FEE_BASIS_POINTS:
        raise ValueError(f"transfer fee basis points out of range: {transfer_fee_basis_points}")
    if not 0 <= maximum_fee <= U64_MAX:
        raise ValueError(f"maximum fee out of u64 range: {maximum_fee}")

    data = (
            struct.pack("<BB", TRANSFER_FEE_EXTENSION_INSTRUCTION, INITIALIZE_TRANSFER_FEE_CONFIG)
            + _encode_optional_pubkey(transfer_fee_config_authority)
            + _encode_optional_pubkey(withdraw_withheld_authority)
            + struct.pack("<HQ", transfer_fee_basis_points, maximum_fee)
    )
    return Instruction(
        program_id=TOKEN_2022_PROGRAM_ID,
        data=data,
        accounts=[AccountMeta(pubkey=mint, is_signer=False, is_writable=True)],
    )


def get_associated_token_address_2022(owner: Pubkey, mint: Pubkey) -> Pubkey:
    address, _bump = Pubkey.find_program_address(
        [bytes(owner), bytes(TOKEN_2022_PROGRAM_ID), bytes(mint)],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )
    return address


def create_associated_token_account_2022(payer: Pubkey, owner: Pubkey, mint: Pubkey) -> Instruction:
    associated_account = get_associated_token_address_2022(owner, mint)
    return Instruction(
        program_id=ASSOCIATED_TOKEN_PROGRAM_ID,
        data=b"",
        accounts=[
            AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
            AccountMeta(pubkey=associated_account, is_signer=False, is_writable=True),
            AccountMeta(pubkey=owner, is_signer=False, is_writable=False),
            AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
            AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(pubkey=TOKEN_2022_PROGRAM_ID, is_signer=False, is_writable=False),
        ],
    )
