from flash_loan_sdk.constants import (
    FLASH_BORROW_TAG,
    FLASH_LOAN_ID,
    FLASH_LOAN_PROGRAM_ID,
    FLASH_LOAN_TAG,
    FLASH_REPAY_TAG,
)
from flash_loan_sdk.decoder import decode_reserve, encode_reserve
from flash_loan_sdk.economics import (
    available_liquidity,
    available_liquidity_via_read,
    available_liquidity_via_read_async,
    flash_loan_fee,
    flash_loan_fee_via_read,
    flash_loan_fee_via_read_async,
    repay_amount,
)
from flash_loan_sdk.exceptions import (
    DeserializationError,
    FlashLoanError,
    InvalidAmount,
    InvalidAmountError,
    NotFound,
    NotFoundError,
    RpcError,
)
from flash_loan_sdk.instruction import (
    FlashLoanInstruction,
    flash_borrow,
    flash_loan,
    flash_repay,
    lending_market_authority,
)
from flash_loan_sdk.models import Reserve
from flash_loan_sdk.reader import (
    AccountReader,
    AsyncAccountReader,
    AsyncSolanaRpcReader,
    SolanaRpcReader,
)
from flash_loan_sdk.reserve import get_reserve, get_reserve_async

__all__ = [
    "FLASH_LOAN_ID",
    "FLASH_LOAN_PROGRAM_ID",
    "FLASH_LOAN_TAG",
    "FLASH_BORROW_TAG",
    "FLASH_REPAY_TAG",
    "Reserve",
    "decode_reserve",
    "encode_reserve",
    "get_reserve",
    "get_reserve_async",
    "available_liquidity",
    "available_liquidity_via_read",
    "available_liquidity_via_read_async",
    "flash_loan_fee",
    "flash_loan_fee_via_read",
    "flash_loan_fee_via_read_async",
    "repay_amount",
    "FlashLoanInstruction",
    "flash_borrow",
    "flash_repay",
    "flash_loan",
    "lending_market_authority",
    "AccountReader",
    "AsyncAccountReader",
    "SolanaRpcReader",
    "AsyncSolanaRpcReader",
    "FlashLoanError",
    "NotFoundError",
    "NotFound",
    "DeserializationError",
    "InvalidAmountError",
    "InvalidAmount",
    "RpcError",
]
