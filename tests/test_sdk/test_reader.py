"""Tests for the JSON-RPC account readers.

All HTTP calls are mocked via httpx client patching.
"""

from __future__ import annotations

import base64
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from flash_loan_sdk.decoder import encode_reserve
from flash_loan_sdk.exceptions import NotFoundError, RpcError
from flash_loan_sdk.models import Reserve
from flash_loan_sdk.reader import AsyncSolanaRpcReader, SolanaRpcReader
from flash_loan_sdk.reserve import get_reserve, get_reserve_async

RPC_URL = "https://api.devnet.solana.com"
ADDRESS = "F1aShdFVv12jar3oM2fi6SDqbefSnnCVRzaxbPH3you7"


def _account_response(data: bytes | None, *, as_list: bool = True) -> MagicMock:
    """Build a mock getAccountInfo response."""
    if data is None:
        value = None
    else:
        b64 = base64.b64encode(data).decode()
        value = {
            "data": [b64, "base64"] if as_list else b64,
            "executable": False,
            "lamports": 2_039_280,
            "owner": ADDRESS,
            "rentEpoch": 0,
        }
    mock_response = MagicMock(spec=httpx.Response)
    mock_response.status_code = 200
    mock_response.json.return_value = {
        "jsonrpc": "2.0",
        "id": 1,
        "result": {"context": {"slot": 1}, "value": value},
    }
    return mock_response


@pytest.fixture
def sync_reader() -> SolanaRpcReader:
    return SolanaRpcReader(RPC_URL, client=MagicMock(spec=httpx.Client))


@pytest.fixture
def rpc_reader() -> AsyncSolanaRpcReader:
    return AsyncSolanaRpcReader(RPC_URL, client=AsyncMock(spec=httpx.AsyncClient))


# ── SolanaRpcReader ────────────────────────────────────────────────────


class TestSolanaRpcReader:
    def test_empty_rpc_url_raises(self):
        with pytest.raises(ValueError, match="RPC URL is empty"):
            SolanaRpcReader("")

    def test_repr_shows_url(self):
        assert RPC_URL in repr(SolanaRpcReader(RPC_URL, client=MagicMock(spec=httpx.Client)))

    def test_read_account_returns_bytes(self, sync_reader: SolanaRpcReader):
        sync_reader._http.post.return_value = _account_response(b"\x01\x02\x03")
        assert sync_reader.read_account(ADDRESS) == b"\x01\x02\x03"

    def test_read_account_plain_string_data(self, sync_reader: SolanaRpcReader):
        sync_reader._http.post.return_value = _account_response(b"abc", as_list=False)
        assert sync_reader.read_account(ADDRESS) == b"abc"

    def test_request_payload(self, sync_reader: SolanaRpcReader):
        sync_reader._http.post.return_value = _account_response(b"\x00")
        sync_reader.read_account(Pubkey.from_string(ADDRESS))

        args, kwargs = sync_reader._http.post.call_args
        assert args[0] == RPC_URL
        payload = kwargs["json"]
        assert payload["method"] == "getAccountInfo"
        assert payload["params"][0] == ADDRESS
        assert payload["params"][1] == {"encoding": "base64", "commitment": "confirmed"}

    def test_missing_account_raises_not_found(self, sync_reader: SolanaRpcReader):
        sync_reader._http.post.return_value = _account_response(None)
        with pytest.raises(NotFoundError):
            sync_reader.read_account(ADDRESS)

    def test_http_error_raises_rpc_error(self, sync_reader: SolanaRpcReader):
        mock_response = MagicMock(spec=httpx.Response)
        mock_response.status_code = 429
        sync_reader._http.post.return_value = mock_response
        with pytest.raises(RpcError, match="HTTP 429"):
            sync_reader.read_account(ADDRESS)

    def test_rpc_error_object_raises(self, sync_reader: SolanaRpcReader):
        mock_response = MagicMock(spec=httpx.Response)
        mock_response.status_code = 200
        mock_response.json.return_value = {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32602, "message": "Invalid param: WrongSize"},
        }
        sync_reader._http.post.return_value = mock_response
        with pytest.raises(RpcError, match="WrongSize"):
            sync_reader.read_account(ADDRESS)

    def test_invalid_json_raises_rpc_error(self, sync_reader: SolanaRpcReader):
        mock_response = MagicMock(spec=httpx.Response)
        mock_response.status_code = 200
        mock_response.json.side_effect = ValueError("Expecting value")
        sync_reader._http.post.return_value = mock_response
        with pytest.raises(RpcError):
            sync_reader.read_account(ADDRESS)

    @pytest.mark.parametrize(
        "body",
        [
            [],
            {"result": "oops"},
            {"jsonrpc": "2.0", "id": 1},
            {"result": {"value": {"lamports": 1}}},
            {"result": {"value": "not-an-object"}},
            {"result": {"value": {"data": ["!!not base64!!", "base64"]}}},
            {"result": {"value": {"data": []}}},
            {"result": {"value": {"data": {"parsed": {}}}}},
        ],
    )
    def test_malformed_body_raises_rpc_error(self, sync_reader: SolanaRpcReader, body):
        mock_response = MagicMock(spec=httpx.Response)
        mock_response.status_code = 200
        mock_response.json.return_value = body
        sync_reader._http.post.return_value = mock_response
        with pytest.raises(RpcError):
            sync_reader.read_account(ADDRESS)

    def test_timeout_raises_rpc_error(self, sync_reader: SolanaRpcReader):
        sync_reader._http.post.side_effect = httpx.TimeoutException("timeout")
        with pytest.raises(RpcError):
            sync_reader.read_account(ADDRESS)

    def test_connect_error_raises_rpc_error(self, sync_reader: SolanaRpcReader):
        sync_reader._http.post.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(RpcError):
            sync_reader.read_account(ADDRESS)

    def test_get_reserve_through_rpc(self, sync_reader: SolanaRpcReader, reserve: Reserve):
        sync_reader._http.post.return_value = _account_response(encode_reserve(reserve))
        assert get_reserve(ADDRESS, sync_reader) == reserve

    def test_injected_client_is_used(self):
        client = MagicMock(spec=httpx.Client)
        client.post.return_value = _account_response(b"\x07")
        reader = SolanaRpcReader(RPC_URL, client=client)
        assert reader.read_account(ADDRESS) == b"\x07"
        client.post.assert_called_once()

    def test_context_manager_closes_client(self, sync_reader: SolanaRpcReader):
        with sync_reader as r:
            assert r is sync_reader
        sync_reader._http.close.assert_called_once()


# ── AsyncSolanaRpcReader ───────────────────────────────────────────────


class TestAsyncSolanaRpcReader:
    def test_empty_rpc_url_raises(self):
        with pytest.raises(ValueError, match="RPC URL is empty"):
            AsyncSolanaRpcReader("")

    async def test_read_account_returns_bytes(self, rpc_reader: AsyncSolanaRpcReader):
        rpc_reader._http.post = AsyncMock(return_value=_account_response(b"\x0a\x0b"))
        assert await rpc_reader.read_account(ADDRESS) == b"\x0a\x0b"

    async def test_custom_commitment(self):
        reader = AsyncSolanaRpcReader(
            RPC_URL, commitment="finalized", client=AsyncMock(spec=httpx.AsyncClient)
        )
        reader._http.post = AsyncMock(return_value=_account_response(b"\x00"))
        await reader.read_account(ADDRESS)
        payload = reader._http.post.call_args.kwargs["json"]
        assert payload["params"][1]["commitment"] == "finalized"

    async def test_missing_account_raises_not_found(self, rpc_reader: AsyncSolanaRpcReader):
        rpc_reader._http.post = AsyncMock(return_value=_account_response(None))
        with pytest.raises(NotFoundError):
            await rpc_reader.read_account(ADDRESS)

    async def test_http_error_raises_rpc_error(self, rpc_reader: AsyncSolanaRpcReader):
        mock_response = MagicMock(spec=httpx.Response)
        mock_response.status_code = 500
        rpc_reader._http.post = AsyncMock(return_value=mock_response)
        with pytest.raises(RpcError):
            await rpc_reader.read_account(ADDRESS)

    async def test_value_without_data_raises_rpc_error(self, rpc_reader: AsyncSolanaRpcReader):
        mock_response = MagicMock(spec=httpx.Response)
        mock_response.status_code = 200
        mock_response.json.return_value = {"result": {"value": {"lamports": 1}}}
        rpc_reader._http.post = AsyncMock(return_value=mock_response)
        with pytest.raises(RpcError, match="malformed"):
            await rpc_reader.read_account(ADDRESS)

    async def test_timeout_raises_rpc_error(self, rpc_reader: AsyncSolanaRpcReader):
        rpc_reader._http.post = AsyncMock(side_effect=httpx.TimeoutException("slow"))
        with pytest.raises(RpcError):
            await rpc_reader.read_account(ADDRESS)

    async def test_get_reserve_async_through_rpc(
        self, rpc_reader: AsyncSolanaRpcReader, reserve: Reserve
    ):
        rpc_reader._http.post = AsyncMock(return_value=_account_response(encode_reserve(reserve)))
        assert await get_reserve_async(ADDRESS, rpc_reader) == reserve

    async def test_close_calls_aclose(self, rpc_reader: AsyncSolanaRpcReader):
        rpc_reader._http.aclose = AsyncMock()
        await rpc_reader.close()
        rpc_reader._http.aclose.assert_awaited_once()

    async def test_async_context_manager(self, rpc_reader: AsyncSolanaRpcReader):
        rpc_reader._http.aclose = AsyncMock()
        async with rpc_reader as r:
            assert r is rpc_reader
        rpc_reader._http.aclose.assert_awaited_once()
