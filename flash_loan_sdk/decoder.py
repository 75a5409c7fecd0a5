"""Decode / encode the flash loan Reserve on-chain account.

Account size: 376 bytes, little-endian, packed (repr(C) without implicit padding).

Field offsets:
  0       version (u8, 0 = uninitialized, 1 = this layout)
  8:16    last_update_slot (u64)
  16:48   lending_market (Pubkey)
  48:80   liquidity.mint (Pubkey)
  80:88   liquidity.mint_decimals (u64)
  88:120  liquidity.supply (Pubkey)
  120:128 liquidity.total_amount (u64)
  128:136 liquidity.borrowed_amount (u64)
  136:168 lp.mint (Pubkey)
  168:176 lp.mint_total_supply (u64)
  176:208 lp.supply (Pubkey)
  208:216 config.fees.fee_numerator (u64)
  216:224 config.fees.fee_denominator (u64)
  224     config.fees.texture_fee_percentage (u8)
  232:240 config.deposit_limit (u64)
  240:272 config.fee_receiver (Pubkey)
  272:376 reserved
"""

import struct

from loguru import logger
from pydantic import ValidationError
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from flash_loan_sdk.constants import RESERVE_LEN, RESERVE_VERSION
from flash_loan_sdk.exceptions import DeserializationError
from flash_loan_sdk.models import Reserve

RESERVE_LAYOUT = struct.Struct("<B7xQ32s32sQ32sQQ32sQ32sQQB7xQ32s64x40x")

_FIELDS = (
    "version",
    "last_update_slot",
    "lending_market",
    "liquidity_mint",
    "liquidity_mint_decimals",
    "liquidity_supply",
    "total_liquidity",
    "borrowed_amount",
    "lp_mint",
    "lp_mint_total_supply",
    "lp_supply",
    "fee_numerator",
    "fee_denominator",
    "texture_fee_percentage",
    "deposit_limit",
    "fee_receiver",
)


def decode_reserve(data: bytes) -> Reserve:
    """Decode raw Reserve account data.

    Raises DeserializationError on wrong size, uninitialized or unknown version,
    or field values violating Reserve invariants.
    """
    if len(data) != RESERVE_LEN:
        raise DeserializationError(
            f"Reserve data must be {RESERVE_LEN} bytes, got {len(data)}"
        )

    values = dict(zip(_FIELDS, RESERVE_LAYOUT.unpack(data)))
    if values["version"] == 0:
        raise DeserializationError("Reserve account is not initialized")
    if values["version"] != RESERVE_VERSION:
        raise DeserializationError(
            f"Unsupported Reserve version {values['version']}, expected {RESERVE_VERSION}"
        )

    for name, value in values.items():
        if isinstance(value, bytes):
            values[name] = str(Pubkey.from_bytes(value))

    try:
        return Reserve(**values)
    except ValidationError as e:
        logger.debug(f"[RESERVE] Invalid field layout: {e}")
        raise DeserializationError(f"Reserve fields do not match layout: {e}") from e


def encode_reserve(reserve: Reserve) -> bytes:
    """Pack a Reserve into its on-chain byte layout."""
    values = []
    for name in _FIELDS:
        value = getattr(reserve, name)
        if isinstance(value, str):
            value = bytes(Pubkey.from_string(value))
        values.append(value)
    return RESERVE_LAYOUT.pack(*values)
