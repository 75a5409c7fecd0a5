"""Flash loan economics — available liquidity and fee calculation.

All token amounts are integers in base units (lamports or equivalent).
Fees round UP: the program rejects a repayment that is one unit short,
so a floor-rounded fee would make the repay instruction fail.
"""

from __future__ import annotations

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from flash_loan_sdk.exceptions import DeserializationError, InvalidAmountError
from flash_loan_sdk.models import Reserve
from flash_loan_sdk.reader import AccountReader, AsyncAccountReader
from flash_loan_sdk.reserve import get_reserve, get_reserve_async


def available_liquidity(reserve: Reserve) -> int:
    """Maximum amount that can be flash borrowed from ``reserve``."""
    if reserve.borrowed_amount > reserve.total_liquidity:
        raise DeserializationError(
            f"Malformed reserve: borrowed {reserve.borrowed_amount} > "
            f"total {reserve.total_liquidity}"
        )
    return reserve.total_liquidity - reserve.borrowed_amount


def flash_loan_fee(reserve: Reserve, amount: int) -> int:
    """Fee for flash borrowing ``amount``: ceil(amount * numerator / denominator).

    Raises InvalidAmountError if amount is zero, negative, not an integer,
    or larger than the reserve's available liquidity.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(f"Amount must be an integer, got {amount!r}")
    if amount <= 0:
        raise InvalidAmountError(f"Amount must be positive, got {amount}")

    available = available_liquidity(reserve)
    if amount > available:
        raise InvalidAmountError(
            f"Amount {amount} exceeds available liquidity {available}"
        )

    return -(-amount * reserve.fee_numerator // reserve.fee_denominator)


def repay_amount(reserve: Reserve, amount: int) -> int:
    """Total pulled from the user's account by FlashRepay: amount + fee."""
    return amount + flash_loan_fee(reserve, amount)


# ─── Fetch + compute helpers ─────────────────────────────────────────


def available_liquidity_via_read(address: Pubkey | str, read_interface: AccountReader) -> int:
    return available_liquidity(get_reserve(address, read_interface))


def flash_loan_fee_via_read(
    address: Pubkey | str, amount: int, read_interface: AccountReader
) -> int:
    return flash_loan_fee(get_reserve(address, read_interface), amount)


async def available_liquidity_via_read_async(
    address: Pubkey | str, read_interface: AsyncAccountReader
) -> int:
    return available_liquidity(await get_reserve_async(address, read_interface))


async def flash_loan_fee_via_read_async(
    address: Pubkey | str, amount: int, read_interface: AsyncAccountReader
) -> int:
    return flash_loan_fee(await get_reserve_async(address, read_interface), amount)
