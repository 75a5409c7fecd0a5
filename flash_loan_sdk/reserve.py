"""Reserve fetching — one account read, then decode. No retries."""

from __future__ import annotations

from loguru import logger
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from flash_loan_sdk.decoder import decode_reserve
from flash_loan_sdk.exceptions import NotFoundError
from flash_loan_sdk.models import Reserve
from flash_loan_sdk.reader import AccountReader, AsyncAccountReader


def _decode(address: Pubkey | str, raw_data: bytes | None) -> Reserve:
    if raw_data is None:
        raise NotFoundError(f"Reserve account {address} not found")
    reserve = decode_reserve(raw_data)
    logger.debug(
        f"[RESERVE] Loaded {str(address)[:12]}: total={reserve.total_liquidity} "
        f"borrowed={reserve.borrowed_amount} fee={reserve.fee_numerator}/{reserve.fee_denominator}"
    )
    return reserve


def get_reserve(address: Pubkey | str, read_interface: AccountReader) -> Reserve:
    """Read and deserialize the Reserve account at ``address``.

    Raises NotFoundError if the account does not exist,
    DeserializationError if its bytes do not match the Reserve layout.
    """
    return _decode(address, read_interface.read_account(address))


async def get_reserve_async(address: Pubkey | str, read_interface: AsyncAccountReader) -> Reserve:
    """Async variant of get_reserve for readers with a coroutine read_account."""
    return _decode(address, await read_interface.read_account(address))
