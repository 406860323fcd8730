"""Fork snapshot — pins a block on an EVM JSON-RPC endpoint and serves real reads.

The snapshot is established once per test. Connection and metadata problems
surface as ``ConnectionFailure``; reads that fail after connecting are
treated the same way, since a partially available snapshot cannot give the
test a trustworthy starting state.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any

import httpx

from hypercore_fixtures.core.constants import SPOT_BALANCE_PRECOMPILE, WITHDRAWABLE_PRECOMPILE
from hypercore_fixtures.core.types import SnapshotInfo
from hypercore_fixtures.errors import ConnectionFailure

logger = logging.getLogger(__name__)

_WORD = 32


def _encode_word(value: int) -> str:
    return value.to_bytes(_WORD, "big").hex()


def _encode_address(address: str) -> str:
    return _encode_word(int(address, 16))


def _decode_words(data: str) -> list[int]:
    """Split an ABI-encoded hex payload into unsigned 32-byte words."""
    raw = data[2:] if data.startswith("0x") else data
    if len(raw) % (_WORD * 2) != 0:
        raise ValueError(f"Return data is not word aligned ({len(raw)} hex chars)")
    return [int(raw[i : i + _WORD * 2], 16) for i in range(0, len(raw), _WORD * 2)]


def _parse_quantity(value: Any) -> int:
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError(f"Expected hex quantity, got {value!r}")
    return int(value, 16)


class RpcSnapshot:
    """Connection to a live network, pinned to a single block."""

    def __init__(self, client: httpx.Client, info: SnapshotInfo) -> None:
        self._client = client
        self.info = info
        self._ids = itertools.count(1)

    @property
    def endpoint(self) -> str:
        return self.info.endpoint

    @property
    def block_tag(self) -> str:
        return hex(self.info.block_number)

    @classmethod
    def connect(
        cls,
        endpoint: str,
        *,
        block_number: int | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> RpcSnapshot:
        """Open a snapshot on ``endpoint``, pinned at ``block_number`` or the head.

        Raises:
            ConnectionFailure: endpoint unreachable, RPC error, malformed
                metadata, or a requested block beyond the current head.
        """
        client = client or httpx.Client(timeout=timeout)
        probe = cls(client, SnapshotInfo(endpoint=endpoint, chain_id=0, block_number=0))
        try:
            chain_id = _parse_quantity(probe._rpc("eth_chainId", []))
            head = _parse_quantity(probe._rpc("eth_blockNumber", []))
        except ConnectionFailure:
            client.close()
            raise
        except ValueError as exc:
            client.close()
            raise ConnectionFailure(endpoint, f"malformed snapshot metadata: {exc}") from exc

        if block_number is not None and block_number > head:
            client.close()
            raise ConnectionFailure(
                endpoint, f"fork block {block_number} is beyond chain head {head}"
            )

        pinned = head if block_number is None else block_number
        logger.info("Fork snapshot: endpoint=%s chain_id=%d block=%d", endpoint, chain_id, pinned)
        return cls(client, SnapshotInfo(endpoint=endpoint, chain_id=chain_id, block_number=pinned))

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def _rpc(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            response = self._client.post(self.endpoint, json=payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("RPC %s to %s failed: %s", method, self.endpoint, exc)
            raise ConnectionFailure(self.endpoint, f"{method} failed: {exc}") from exc
        except ValueError as exc:
            raise ConnectionFailure(self.endpoint, f"{method} returned invalid JSON") from exc

        if not isinstance(body, dict):
            raise ConnectionFailure(self.endpoint, f"{method} returned a non-object response")
        if body.get("error") is not None:
            error = body["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ConnectionFailure(self.endpoint, f"{method} error: {message}")
        if "result" not in body:
            raise ConnectionFailure(self.endpoint, f"{method} response has no result")
        return body["result"]

    def _call(self, to: str, data: str) -> list[int]:
        result = self._rpc("eth_call", [{"to": to, "data": data}, self.block_tag])
        try:
            return _decode_words(result if isinstance(result, str) else "")
        except ValueError as exc:
            raise ConnectionFailure(self.endpoint, f"eth_call to {to}: {exc}") from exc

    # --- Real reads ---

    def read_spot_balance(self, address: str, token_index: int) -> int:
        """Total spot balance of ``address`` for ``token_index`` at the pinned block."""
        words = self._call(
            SPOT_BALANCE_PRECOMPILE, "0x" + _encode_address(address) + _encode_word(token_index)
        )
        if not words:
            raise ConnectionFailure(self.endpoint, "spot balance read returned no data")
        return words[0]

    def read_margin_balance(self, address: str) -> int:
        """Withdrawable perp margin of ``address`` at the pinned block."""
        words = self._call(WITHDRAWABLE_PRECOMPILE, "0x" + _encode_address(address))
        if not words:
            raise ConnectionFailure(self.endpoint, "margin read returned no data")
        return words[0]
