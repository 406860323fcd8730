"""Tests for the fork snapshot JSON-RPC client."""

from __future__ import annotations

import json

import httpx
import pytest

from hypercore_fixtures.core.constants import SPOT_BALANCE_PRECOMPILE, WITHDRAWABLE_PRECOMPILE
from hypercore_fixtures.errors import ConnectionFailure
from hypercore_fixtures.sim.snapshot import RpcSnapshot, _decode_words

ENDPOINT = "https://rpc.test/evm"
USER = "0x00000000000000000000000000000000000a11ce"

# --- Helpers ---


def _word(value: int) -> str:
    return value.to_bytes(32, "big").hex()


class FakeNode:
    """Minimal JSON-RPC node served through httpx.MockTransport."""

    def __init__(
        self,
        chain_id: int = 999,
        head: int = 1_000,
        calls: dict[str, str] | None = None,
        errors: dict[str, dict] | None = None,
    ) -> None:
        self.chain_id = chain_id
        self.head = head
        self.calls = calls or {}
        self.errors = errors or {}
        self.requests: list[dict] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        method = body["method"]
        if method in self.errors:
            error = self.errors[method]
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": error})
        if method == "eth_chainId":
            result = hex(self.chain_id)
        elif method == "eth_blockNumber":
            result = hex(self.head)
        elif method == "eth_call":
            result = self.calls.get(body["params"][0]["to"], "0x")
        else:
            return httpx.Response(404)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


# --- Tests ---


class TestConnect:
    def test_pins_head_block(self):
        node = FakeNode(chain_id=999, head=0x1234)
        snap = RpcSnapshot.connect(ENDPOINT, client=node.client())
        assert snap.info.chain_id == 999
        assert snap.info.block_number == 0x1234
        assert snap.endpoint == ENDPOINT
        assert [r["method"] for r in node.requests] == ["eth_chainId", "eth_blockNumber"]

    def test_pins_requested_block(self):
        node = FakeNode(head=500)
        snap = RpcSnapshot.connect(ENDPOINT, block_number=100, client=node.client())
        assert snap.info.block_number == 100
        assert snap.block_tag == "0x64"

    def test_block_beyond_head_fails(self):
        node = FakeNode(head=10)
        with pytest.raises(ConnectionFailure, match="beyond chain head"):
            RpcSnapshot.connect(ENDPOINT, block_number=11, client=node.client())

    def test_unreachable_endpoint_fails(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(refuse))
        with pytest.raises(ConnectionFailure) as exc_info:
            RpcSnapshot.connect(ENDPOINT, client=client)
        assert exc_info.value.endpoint == ENDPOINT
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_http_error_status_fails(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(503)))
        with pytest.raises(ConnectionFailure):
            RpcSnapshot.connect(ENDPOINT, client=client)

    def test_rpc_error_fails(self):
        node = FakeNode(errors={"eth_blockNumber": {"code": -32000, "message": "pruned"}})
        with pytest.raises(ConnectionFailure, match="pruned"):
            RpcSnapshot.connect(ENDPOINT, client=node.client())

    def test_invalid_json_fails(self):
        client = httpx.Client(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>"))
        )
        with pytest.raises(ConnectionFailure, match="invalid JSON"):
            RpcSnapshot.connect(ENDPOINT, client=client)

    def test_malformed_metadata_fails(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": 999})

        client = httpx.Client(transport=httpx.MockTransport(handler))
        with pytest.raises(ConnectionFailure, match="malformed"):
            RpcSnapshot.connect(ENDPOINT, client=client)

    def test_failed_connect_closes_client(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(500)))
        with pytest.raises(ConnectionFailure):
            RpcSnapshot.connect(ENDPOINT, client=client)
        assert client.is_closed

    def test_unparseable_endpoint_fails_and_closes_client(self):
        node = FakeNode()
        client = node.client()
        with pytest.raises(ConnectionFailure) as exc_info:
            RpcSnapshot.connect("http://[::1", client=client)
        assert isinstance(exc_info.value.__cause__, httpx.InvalidURL)
        assert client.is_closed
        assert node.requests == []


class TestReads:
    def setup_method(self) -> None:
        self.node = FakeNode(
            head=77,
            calls={
                SPOT_BALANCE_PRECOMPILE: "0x" + _word(5_000) + _word(100) + _word(0),
                WITHDRAWABLE_PRECOMPILE: "0x" + _word(42_000_000),
            },
        )
        self.snap = RpcSnapshot.connect(ENDPOINT, client=self.node.client())

    def teardown_method(self) -> None:
        self.snap.close()

    def test_spot_balance_returns_total(self):
        assert self.snap.read_spot_balance(USER, 0) == 5_000

    def test_spot_balance_call_encoding(self):
        self.snap.read_spot_balance(USER, 150)
        call, tag = self.node.requests[-1]["params"]
        assert tag == hex(77)
        assert call["to"] == SPOT_BALANCE_PRECOMPILE
        data = call["data"][2:]
        assert len(data) == 128
        assert int(data[:64], 16) == int(USER, 16)
        assert int(data[64:], 16) == 150

    def test_margin_balance(self):
        assert self.snap.read_margin_balance(USER) == 42_000_000

    def test_margin_read_targets_withdrawable_precompile(self):
        self.snap.read_margin_balance(USER)
        call, _ = self.node.requests[-1]["params"]
        assert call["to"] == "0x0000000000000000000000000000000000000803"
        assert int(call["data"][2:], 16) == int(USER, 16)

    def test_spot_read_targets_spot_balance_precompile(self):
        self.snap.read_spot_balance(USER, 0)
        call, _ = self.node.requests[-1]["params"]
        assert call["to"] == "0x0000000000000000000000000000000000000801"

    def test_empty_return_is_connection_failure(self):
        self.node.calls[WITHDRAWABLE_PRECOMPILE] = "0x"
        with pytest.raises(ConnectionFailure, match="no data"):
            self.snap.read_margin_balance(USER)

    def test_misaligned_return_is_connection_failure(self):
        self.node.calls[SPOT_BALANCE_PRECOMPILE] = "0xabc"
        with pytest.raises(ConnectionFailure):
            self.snap.read_spot_balance(USER, 0)

    def test_close(self):
        self.snap.close()
        assert self.snap._client.is_closed


class TestDecodeWords:
    def test_decodes_multiple_words(self):
        assert _decode_words("0x" + _word(1) + _word(2)) == [1, 2]

    def test_empty(self):
        assert _decode_words("0x") == []
