"""Shared test fixtures."""

import pytest
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from flash_loan_sdk.decoder import encode_reserve
from flash_loan_sdk.models import Reserve


class FakeReader:
    """In-memory read interface keyed by base58 address."""

    def __init__(self, accounts: dict[str, bytes] | None = None) -> None:
        self.accounts = accounts or {}
        self.calls: list[str] = []

    def read_account(self, address: Pubkey | str) -> bytes | None:
        self.calls.append(str(address))
        return self.accounts.get(str(address))


class AsyncFakeReader(FakeReader):
    async def read_account(self, address: Pubkey | str) -> bytes | None:  # type: ignore[override]
        return super().read_account(address)


@pytest.fixture
def reserve() -> Reserve:
    """1,000,000 total, 200,000 borrowed, 0.3% fee."""
    return Reserve(
        last_update_slot=250_000_000,
        lending_market=str(Pubkey.new_unique()),
        liquidity_mint="So11111111111111111111111111111111111111112",
        liquidity_mint_decimals=9,
        liquidity_supply=str(Pubkey.new_unique()),
        total_liquidity=1_000_000,
        borrowed_amount=200_000,
        lp_mint=str(Pubkey.new_unique()),
        lp_mint_total_supply=950_000,
        lp_supply=str(Pubkey.new_unique()),
        fee_numerator=30,
        fee_denominator=10_000,
        texture_fee_percentage=20,
        deposit_limit=5_000_000,
        fee_receiver=str(Pubkey.new_unique()),
    )


@pytest.fixture
def reserve_address() -> str:
    return str(Pubkey.new_unique())


@pytest.fixture
def reader(reserve: Reserve, reserve_address: str) -> FakeReader:
    return FakeReader({reserve_address: encode_reserve(reserve)})


@pytest.fixture
def async_reader(reserve: Reserve, reserve_address: str) -> AsyncFakeReader:
    return AsyncFakeReader({reserve_address: encode_reserve(reserve)})
