"""Flash borrow and repay in a single transaction.

Loads the reserve once, prints available liquidity and the fee for
borrowing 10 whole tokens, then sends FlashBorrow + FlashRepay.
Real use puts instructions that spend the borrowed tokens (swaps etc.)
between the two.

Usage:
    python scripts/flash_loan_once.py --reserve <RESERVE> --wallet <TOKEN_ACCOUNT>
"""

import argparse
import asyncio
import base64
import json
import sys
from pathlib import Path
from typing import Any

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx  # noqa: E402
from loguru import logger  # noqa: E402
from solders.hash import Hash  # type: ignore[import-untyped]  # noqa: E402
from solders.keypair import Keypair  # type: ignore[import-untyped]  # noqa: E402
from solders.message import MessageV0  # type: ignore[import-untyped]  # noqa: E402
from solders.transaction import VersionedTransaction  # type: ignore[import-untyped]  # noqa: E402

from config.settings import settings  # noqa: E402
from flash_loan_sdk import (  # noqa: E402
    AsyncSolanaRpcReader,
    RpcError,
    available_liquidity,
    flash_borrow,
    flash_loan_fee,
    flash_repay,
    get_reserve_async,
)
from flash_loan_sdk.utils.logger import setup_logger  # noqa: E402


def load_keypair(path: str) -> Keypair:
    """Read a Solana CLI keypair file (JSON array of 64 bytes)."""
    with open(Path(path).expanduser()) as f:
        return Keypair.from_bytes(bytes(json.load(f)))


async def rpc_call(http: httpx.AsyncClient, url: str, method: str, params: list) -> Any:
    """Single JSON-RPC call; raises RpcError on HTTP or RPC errors."""
    payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
    resp = await http.post(url, json=payload)
    if resp.status_code != 200:
        raise RpcError(f"{method} HTTP {resp.status_code}")
    data = resp.json()
    if "error" in data:
        raise RpcError(f"{method} error: {data['error']}")
    return data["result"]


async def run(args: argparse.Namespace) -> str:
    authority = load_keypair(args.authority)

    logger.info("=====================Setup=====================")
    logger.info(f"Solana cluster       : {args.url}")
    logger.info(f"Flash loan program id: {args.program_id}")
    logger.info(f"Flash loan reserve   : {args.reserve}")
    logger.info("===============================================")

    async with httpx.AsyncClient(timeout=settings.rpc_timeout_sec) as http:
        reader = AsyncSolanaRpcReader(args.url, commitment=settings.commitment, client=http)

        # Load the reserve once and reuse it for every calculation
        reserve = await get_reserve_async(args.reserve, reader)

        amount = 10 ** reserve.liquidity_mint_decimals * args.tokens
        logger.info(f"Available liquidity: {available_liquidity(reserve)} base units")

        fee = flash_loan_fee(reserve, amount)
        logger.info(f"Fee to borrow {amount} base units will be: {fee} base units")

        borrow_ix = flash_borrow(
            args.reserve,
            amount,
            reserve.liquidity_supply,
            args.wallet,
            reserve.lending_market,
            program_id=args.program_id,
        )
        # Same amount without fee: the program pulls amount + fee from the wallet
        repay_ix = flash_repay(
            args.reserve,
            amount,
            args.wallet,
            reserve.liquidity_supply,
            reserve.fee_receiver,
            reserve.lending_market,
            authority.pubkey(),
            program_id=args.program_id,
        )

        bh = await rpc_call(
            http, args.url, "getLatestBlockhash", [{"commitment": settings.commitment}]
        )
        msg = MessageV0.try_compile(
            payer=authority.pubkey(),
            instructions=[borrow_ix.to_instruction(), repay_ix.to_instruction()],
            address_lookup_table_accounts=[],
            recent_blockhash=Hash.from_string(bh["value"]["blockhash"]),
        )
        tx = VersionedTransaction(msg, [authority])
        tx_b64 = base64.b64encode(bytes(tx)).decode("ascii")

        signature = await rpc_call(
            http,
            args.url,
            "sendTransaction",
            [tx_b64, {"encoding": "base64", "preflightCommitment": settings.commitment}],
        )
        logger.info(f"Signature: {signature}")
        return str(signature)


def main() -> None:
    parser = argparse.ArgumentParser(description="Flash borrow and repay once")
    parser.add_argument("--reserve", "-r", required=True, help="Flash loan reserve address")
    parser.add_argument(
        "--wallet", "-w", required=True, help="User token account of the reserve's liquidity mint"
    )
    parser.add_argument("--url", "-u", default=settings.rpc_url, help="Solana RPC endpoint")
    parser.add_argument("--program-id", default=settings.program_id, help="Flash loan program id")
    parser.add_argument(
        "--authority", "-a", default=settings.keypair_path, help="Keypair file signing the repay"
    )
    parser.add_argument("--tokens", type=int, default=10, help="Whole tokens to borrow")
    args = parser.parse_args()

    setup_logger(json_logs=settings.json_logs, level=settings.log_level, log_file=settings.log_file)
    asyncio.run(run(args))
    logger.info("Successfully flash borrowed!")


if __name__ == "__main__":
    main()
