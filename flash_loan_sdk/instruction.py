"""Flash loan instruction encoding — FlashBorrow, FlashRepay and CPI-style FlashLoan.

Wire format (little-endian):
  FlashLoan    tag=5 | amount u64 | receive_flash_loan_instruction_tag u8
  FlashBorrow  tag=7 | amount u64
  FlashRepay   tag=8 | amount u64

Builders are pure: amounts are not checked against reserve liquidity.
The on-chain program enforces that at execution time.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from loguru import logger
from solders.instruction import AccountMeta, Instruction  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from flash_loan_sdk.constants import (
    FLASH_BORROW_TAG,
    FLASH_LOAN_PROGRAM_ID,
    FLASH_LOAN_TAG,
    FLASH_REPAY_TAG,
    SYSVAR_INSTRUCTIONS_ID,
    TOKEN_PROGRAM_ID,
    U64_MAX,
)
from flash_loan_sdk.exceptions import DeserializationError, InvalidAmountError

_AMOUNT = struct.Struct("<BQ")
_AMOUNT_WITH_TAG = struct.Struct("<BQB")

TAG_NAMES = {
    FLASH_LOAN_TAG: "FlashLoan",
    FLASH_BORROW_TAG: "FlashBorrow",
    FLASH_REPAY_TAG: "FlashRepay",
}


def to_pubkey(address: Pubkey | str) -> Pubkey:
    if isinstance(address, Pubkey):
        return address
    return Pubkey.from_string(address)


def lending_market_authority(
    lending_market: Pubkey | str, program_id: Pubkey | str = FLASH_LOAN_PROGRAM_ID
) -> Pubkey:
    """Derive the lending market authority PDA (seed: lending market address)."""
    authority, _bump = Pubkey.find_program_address(
        [bytes(to_pubkey(lending_market))], to_pubkey(program_id)
    )
    return authority


@dataclass(frozen=True)
class FlashLoanInstruction:
    """An encoded flash loan program instruction, ready to put in a transaction."""

    program_id: Pubkey
    tag: int
    amount: int
    accounts: tuple[AccountMeta, ...]
    receive_flash_loan_instruction_tag: int | None = None

    def __post_init__(self) -> None:
        if self.tag not in TAG_NAMES:
            raise ValueError(f"Unknown flash loan instruction tag: {self.tag}")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise InvalidAmountError(f"Amount must be an integer, got {self.amount!r}")
        if not 0 <= self.amount <= U64_MAX:
            raise InvalidAmountError(f"Amount {self.amount} does not fit in u64")
        if self.tag == FLASH_LOAN_TAG:
            receiver_tag = self.receive_flash_loan_instruction_tag
            if (
                isinstance(receiver_tag, bool)
                or not isinstance(receiver_tag, int)
                or not 0 <= receiver_tag <= 255
            ):
                raise ValueError(f"Receiver instruction tag must be a u8, got {receiver_tag!r}")
        elif self.receive_flash_loan_instruction_tag is not None:
            raise ValueError(f"{self.name} does not take a receiver instruction tag")

    @property
    def name(self) -> str:
        return TAG_NAMES[self.tag]

    @property
    def data(self) -> bytes:
        """Instruction data as sent on the wire."""
        if self.tag == FLASH_LOAN_TAG:
            return _AMOUNT_WITH_TAG.pack(
                self.tag, self.amount, self.receive_flash_loan_instruction_tag
            )
        return _AMOUNT.pack(self.tag, self.amount)

    def to_instruction(self) -> Instruction:
        return Instruction(self.program_id, self.data, list(self.accounts))

    @classmethod
    def unpack(
        cls,
        data: bytes,
        accounts: Iterable[AccountMeta] = (),
        program_id: Pubkey = FLASH_LOAN_PROGRAM_ID,
    ) -> FlashLoanInstruction:
        """Decode instruction data produced by ``data``."""
        if not data:
            raise DeserializationError("Empty instruction data")

        tag = data[0]
        if tag == FLASH_LOAN_TAG:
            layout = _AMOUNT_WITH_TAG
        elif tag in (FLASH_BORROW_TAG, FLASH_REPAY_TAG):
            layout = _AMOUNT
        else:
            raise DeserializationError(f"Unknown flash loan instruction tag: {tag}")

        if len(data) != layout.size:
            raise DeserializationError(
                f"{TAG_NAMES[tag]} data must be {layout.size} bytes, got {len(data)}"
            )

        fields = layout.unpack(data)
        return cls(
            program_id=program_id,
            tag=tag,
            amount=fields[1],
            accounts=tuple(accounts),
            receive_flash_loan_instruction_tag=fields[2] if tag == FLASH_LOAN_TAG else None,
        )

    @classmethod
    def from_instruction(cls, ix: Instruction) -> FlashLoanInstruction:
        return cls.unpack(bytes(ix.data), ix.accounts, ix.program_id)


def _build(
    program_id: Pubkey | str,
    tag: int,
    amount: int,
    accounts: list[AccountMeta],
    receive_flash_loan_instruction_tag: int | None = None,
) -> FlashLoanInstruction:
    ix = FlashLoanInstruction(
        program_id=to_pubkey(program_id),
        tag=tag,
        amount=amount,
        accounts=tuple(accounts),
        receive_flash_loan_instruction_tag=receive_flash_loan_instruction_tag,
    )
    logger.debug(f"[FLASH] Built {ix.name} amount={amount} accounts={len(accounts)}")
    return ix


def flash_borrow(
    reserve: Pubkey | str,
    amount: int,
    source_liquidity: Pubkey | str,
    destination_liquidity: Pubkey | str,
    lending_market: Pubkey | str,
    *,
    program_id: Pubkey | str = FLASH_LOAN_PROGRAM_ID,
) -> FlashLoanInstruction:
    """Create a FlashBorrow instruction.

    ``source_liquidity`` is the reserve's liquidity supply account,
    ``destination_liquidity`` the user's token account receiving the loan.
    """
    authority = lending_market_authority(lending_market, program_id)
    accounts = [
        AccountMeta(to_pubkey(source_liquidity), is_signer=False, is_writable=True),
        AccountMeta(to_pubkey(destination_liquidity), is_signer=False, is_writable=True),
        AccountMeta(to_pubkey(reserve), is_signer=False, is_writable=True),
        AccountMeta(to_pubkey(lending_market), is_signer=False, is_writable=False),
        AccountMeta(authority, is_signer=False, is_writable=False),
        AccountMeta(SYSVAR_INSTRUCTIONS_ID, is_signer=False, is_writable=False),
        AccountMeta(TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return _build(program_id, FLASH_BORROW_TAG, amount, accounts)


def flash_repay(
    reserve: Pubkey | str,
    amount: int,
    source_liquidity: Pubkey | str,
    destination_liquidity: Pubkey | str,
    fee_receiver: Pubkey | str,
    lending_market: Pubkey | str,
    user_transfer_authority: Pubkey | str,
    *,
    program_id: Pubkey | str = FLASH_LOAN_PROGRAM_ID,
) -> FlashLoanInstruction:
    """Create a FlashRepay instruction.

    ``amount`` is the borrowed amount without fee and must equal the paired
    FlashBorrow amount. The program transfers amount + fee from
    ``source_liquidity``, so the authority must be able to cover both.
    """
    accounts = [
        AccountMeta(to_pubkey(source_liquidity), is_signer=False, is_writable=True),
        AccountMeta(to_pubkey(destination_liquidity), is_signer=False, is_writable=True),
        AccountMeta(to_pubkey(fee_receiver), is_signer=False, is_writable=True),
        AccountMeta(to_pubkey(reserve), is_signer=False, is_writable=True),
        AccountMeta(to_pubkey(lending_market), is_signer=False, is_writable=False),
        AccountMeta(to_pubkey(user_transfer_authority), is_signer=True, is_writable=False),
        AccountMeta(SYSVAR_INSTRUCTIONS_ID, is_signer=False, is_writable=False),
        AccountMeta(TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return _build(program_id, FLASH_REPAY_TAG, amount, accounts)


def flash_loan(
    reserve: Pubkey | str,
    amount: int,
    receive_flash_loan_instruction_tag: int,
    source_liquidity: Pubkey | str,
    destination_liquidity: Pubkey | str,
    fee_receiver: Pubkey | str,
    lending_market: Pubkey | str,
    receiver_program_id: Pubkey | str,
    receiver_accounts: Sequence[AccountMeta] = (),
    *,
    program_id: Pubkey | str = FLASH_LOAN_PROGRAM_ID,
) -> FlashLoanInstruction:
    """Create a CPI-style FlashLoan instruction.

    The program lends ``amount`` and invokes ``receiver_program_id`` with
    ``receive_flash_loan_instruction_tag``; the receiver must return
    amount + fee to the source account before it exits.
    ``receiver_accounts`` are appended after the fixed accounts.
    """
    authority = lending_market_authority(lending_market, program_id)
    accounts = [
        AccountMeta(to_pubkey(source_liquidity), is_signer=False, is_writable=True),
        AccountMeta(to_pubkey(destination_liquidity), is_signer=False, is_writable=True),
        AccountMeta(to_pubkey(reserve), is_signer=False, is_writable=True),
        AccountMeta(to_pubkey(fee_receiver), is_signer=False, is_writable=True),
        AccountMeta(to_pubkey(lending_market), is_signer=False, is_writable=False),
        AccountMeta(authority, is_signer=False, is_writable=False),
        AccountMeta(TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(to_pubkey(receiver_program_id), is_signer=False, is_writable=False),
    ]
    accounts.extend(receiver_accounts)
    return _build(
        program_id, FLASH_LOAN_TAG, amount, accounts, receive_flash_loan_instruction_tag
    )
