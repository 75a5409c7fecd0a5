"""Pydantic v2 model for the flash loan Reserve account."""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, field_validator, model_validator
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from flash_loan_sdk.constants import FLASH_LOAN_PROGRAM_ID, NULL_ADDRESS, RESERVE_VERSION, U64_MAX
from flash_loan_sdk.instruction import lending_market_authority

U64 = Annotated[int, Field(ge=0, le=U64_MAX)]


class Reserve(BaseModel):
    """Decoded on-chain Reserve: liquidity pool state and flash loan fee config.

    Read-only snapshot. Re-fetch to observe new on-chain state.
    """

    version: int = Field(default=RESERVE_VERSION, ge=1, le=255)
    last_update_slot: U64 = 0
    lending_market: str = NULL_ADDRESS

    # Liquidity
    liquidity_mint: str = NULL_ADDRESS
    liquidity_mint_decimals: U64 = 0
    liquidity_supply: str = NULL_ADDRESS
    total_liquidity: U64 = 0
    borrowed_amount: U64 = 0

    # LP tokens
    lp_mint: str = NULL_ADDRESS
    lp_mint_total_supply: U64 = 0
    lp_supply: str = NULL_ADDRESS

    # Config: fee rate is fee_numerator / fee_denominator
    fee_numerator: U64 = 0
    fee_denominator: int = Field(default=10_000, ge=1, le=U64_MAX)
    texture_fee_percentage: int = Field(default=0, ge=0, le=100)
    deposit_limit: int = Field(default=U64_MAX, ge=0, le=U64_MAX)
    fee_receiver: str = NULL_ADDRESS

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator(
        "lending_market",
        "liquidity_mint",
        "liquidity_supply",
        "lp_mint",
        "lp_supply",
        "fee_receiver",
    )
    @classmethod
    def check_pubkey(cls, value: str) -> str:
        try:
            Pubkey.from_string(value)
        except Exception as e:
            raise ValueError(f"invalid address {value!r}: {e}") from e
        return value

    @model_validator(mode="after")
    def check_invariants(self) -> "Reserve":
        if self.borrowed_amount > self.total_liquidity:
            raise ValueError(
                f"borrowed_amount {self.borrowed_amount} exceeds "
                f"total_liquidity {self.total_liquidity}"
            )
        if self.fee_numerator >= self.fee_denominator:
            raise ValueError("fee rate must be below 1")
        return self

    @property
    def available_liquidity(self) -> int:
        return self.total_liquidity - self.borrowed_amount

    @property
    def fee_rate(self) -> Decimal:
        return Decimal(self.fee_numerator) / Decimal(self.fee_denominator)

    def lending_market_authority(self, program_id: Pubkey = FLASH_LOAN_PROGRAM_ID) -> Pubkey:
        """Derived authority PDA of this reserve's lending market."""
        return lending_market_authority(self.lending_market, program_id)
