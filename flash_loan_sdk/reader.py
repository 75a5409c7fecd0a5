"""Account read interfaces, the only I/O the SDK performs.

Any object with ``read_account(address) -> bytes | None`` works as a reader.
The JSON-RPC readers below call getAccountInfo over httpx; callers that
already hold an RPC client can wrap it in a few lines instead.
"""

from __future__ import annotations

import base64
from typing import Any, Protocol

import httpx
from loguru import logger
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from flash_loan_sdk.exceptions import NotFoundError, RpcError


class AccountReader(Protocol):
    def read_account(self, address: Pubkey | str) -> bytes | None: ...


class AsyncAccountReader(Protocol):
    async def read_account(self, address: Pubkey | str) -> bytes | None: ...


def _account_info_payload(address: Pubkey | str, commitment: str) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "getAccountInfo",
        "params": [
            str(address),
            {"encoding": "base64", "commitment": commitment},
        ],
    }


def _parse_account_info(address: Pubkey | str, resp: httpx.Response) -> bytes:
    """Extract raw account bytes from a getAccountInfo response."""
    if resp.status_code != 200:
        logger.warning(f"[RPC] getAccountInfo HTTP {resp.status_code} for {str(address)[:12]}")
        raise RpcError(f"getAccountInfo HTTP {resp.status_code}")

    try:
        data = resp.json()
    except ValueError as e:
        raise RpcError(f"getAccountInfo returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        logger.warning(f"[RPC] getAccountInfo unexpected body: {str(data)[:80]}")
        raise RpcError("malformed getAccountInfo response")

    if "error" in data:
        logger.warning(f"[RPC] getAccountInfo error: {data['error']}")
        raise RpcError(f"getAccountInfo error: {data['error']}")

    result = data.get("result")
    if not isinstance(result, dict):
        logger.warning(f"[RPC] getAccountInfo unexpected result: {str(result)[:80]}")
        raise RpcError("malformed getAccountInfo response")

    value = result.get("value")
    if value is None:
        raise NotFoundError(f"Account {address} not found")
    if not isinstance(value, dict) or "data" not in value:
        logger.warning(f"[RPC] getAccountInfo value has no data for {str(address)[:12]}")
        raise RpcError("malformed getAccountInfo response")

    account_data = value["data"]
    b64_data = account_data[0] if isinstance(account_data, list) and account_data else account_data
    try:
        return base64.b64decode(b64_data, validate=True)
    except (TypeError, ValueError) as e:
        raise RpcError(f"Account data is not valid base64: {e}") from e


class SolanaRpcReader:
    """Blocking getAccountInfo reader over Solana JSON-RPC."""

    def __init__(
        self,
        rpc_url: str,
        *,
        commitment: str = "confirmed",
        timeout: float = 15.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not rpc_url:
            raise ValueError("RPC URL is empty")
        self._rpc_url = rpc_url
        self._commitment = commitment
        self._http = client if client is not None else httpx.Client(timeout=timeout)

    def __repr__(self) -> str:
        return f"SolanaRpcReader(rpc_url={self._rpc_url!r})"

    def read_account(self, address: Pubkey | str) -> bytes:
        """Fetch raw account bytes. Raises NotFoundError / RpcError."""
        payload = _account_info_payload(address, self._commitment)
        try:
            resp = self._http.post(self._rpc_url, json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"[RPC] getAccountInfo failed for {str(address)[:12]}: {e}")
            raise RpcError(f"getAccountInfo failed: {e}") from e
        return _parse_account_info(address, resp)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> SolanaRpcReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class AsyncSolanaRpcReader:
    """Async getAccountInfo reader over Solana JSON-RPC."""

    def __init__(
        self,
        rpc_url: str,
        *,
        commitment: str = "confirmed",
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not rpc_url:
            raise ValueError("RPC URL is empty")
        self._rpc_url = rpc_url
        self._commitment = commitment
        self._http = client if client is not None else httpx.AsyncClient(timeout=timeout)

    def __repr__(self) -> str:
        return f"AsyncSolanaRpcReader(rpc_url={self._rpc_url!r})"

    async def read_account(self, address: Pubkey | str) -> bytes:
        payload = _account_info_payload(address, self._commitment)
        try:
            resp = await self._http.post(self._rpc_url, json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"[RPC] getAccountInfo failed for {str(address)[:12]}: {e}")
            raise RpcError(f"getAccountInfo failed: {e}") from e
        return _parse_account_info(address, resp)

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> AsyncSolanaRpcReader:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
