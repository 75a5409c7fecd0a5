"""Flash loan program constants — program ids, instruction tags, account layout."""

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

# Devnet / mainnet deployment of the flash loan program
FLASH_LOAN_ID = "F1aShdFVv12jar3oM2fi6SDqbefSnnCVRzaxbPH3you7"
FLASH_LOAN_PROGRAM_ID = Pubkey.from_string(FLASH_LOAN_ID)

# SPL Token and sysvar accounts referenced by every flash borrow/repay
TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
SYSVAR_INSTRUCTIONS_ID = Pubkey.from_string("Sysvar1nstructions1111111111111111111111111")

# Instruction tags as defined by the on-chain program's instruction enum
FLASH_LOAN_TAG = 5
FLASH_BORROW_TAG = 7
FLASH_REPAY_TAG = 8

# Reserve account layout
RESERVE_VERSION = 1
RESERVE_LEN = 376

U64_MAX = 2**64 - 1

# Placeholder for unset pubkey fields (all-zero bytes)
NULL_ADDRESS = "11111111111111111111111111111111"
