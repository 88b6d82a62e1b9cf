"""Pytest hooks and fixtures."""

import json
import os
from typing import Any, Callable

import pytest


def pytest_configure(config):
    """Register custom markers (also in pyproject.toml)."""
    config.addinivalue_line(
        "markers",
        "requires_node: requires a running bitcoind reachable through BITCOIND_URL (skipped otherwise)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip requires_node tests when no node is configured."""
    if os.environ.get("BITCOIND_URL"):
        return
    skip = pytest.mark.skip(reason="Requires a running bitcoind (set BITCOIND_URL)")
    for item in items:
        if "requires_node" in item.keywords:
            item.add_marker(skip)


# Mainnet genesis block.
GENESIS_HASH = "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f"
GENESIS_MERKLE_ROOT = "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"
GENESIS_NEXT_HASH = "00000000839a8e6886ab5951d76f411475428afc90947ee320161bbf18eb6048"
GENESIS_HEADER_HEX = (
    "0100000000000000000000000000000000000000000000000000000000000000"
    "000000003ba3edfd7a7b12b27ac72c3e67768f617fc81bc3888a51323a9fb8aa"
    "4b1e5e4a29ab5f49ffff001d1dac2b7c"
)
GENESIS_COINBASE_HEX = (
    "01000000010000000000000000000000000000000000000000000000000000000000000000"
    "ffffffff4d04ffff001d0104455468652054696d65732030332f4a616e2f32303039204368"
    "616e63656c6c6f72206f6e206272696e6b206f66207365636f6e64206261696c6f757420"
    "666f722062616e6b73ffffffff0100f2052a01000000434104678afdb0fe554827196"
    "7f1a67130b7105cd6a828e03909a67962e0ea1f61deb649f6bc3f4cef38c4f35504e51ec1"
    "12de5c384df7ba0b8d578a4c702b6bf11d5fac00000000"
)
GENESIS_BLOCK_HEX = GENESIS_HEADER_HEX + "01" + GENESIS_COINBASE_HEX
GENESIS_TARGET = "00000000ffff" + "0" * 52


class FakeTransport:
    """In-memory transport: records calls and replays canned JSON-RPC responses."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[Any]]] = []
        self._replies: dict[str, Callable[[list[Any]], bytes]] = {}

    def reply(self, method: str, result: Any) -> "FakeTransport":
        body = json.dumps({"result": result, "error": None, "id": "1"}).encode()
        self._replies[method] = lambda params: body
        return self

    def reply_with(self, method: str, fn: Callable[[list[Any]], Any]) -> "FakeTransport":
        self._replies[method] = lambda params: json.dumps(
            {"result": fn(params), "error": None, "id": "1"}
        ).encode()
        return self

    def fail(self, method: str, code: int, message: str) -> "FakeTransport":
        body = json.dumps({"result": None, "error": {"code": code, "message": message}, "id": "1"}).encode()
        self._replies[method] = lambda params: body
        return self

    def raw(self, method: str, body: bytes) -> "FakeTransport":
        self._replies[method] = lambda params: body
        return self

    def send_request(self, method: str, params: bytes) -> bytes:
        decoded = json.loads(params)
        self.calls.append((method, decoded))
        if method not in self._replies:
            return json.dumps(
                {"result": None, "error": {"code": -32601, "message": "Method not found"}, "id": "1"}
            ).encode()
        return self._replies[method](decoded)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


def _genesis_header_result(version: str) -> dict[str, Any]:
    result: dict[str, Any] = {
        "hash": GENESIS_HASH,
        "confirmations": 2,
        "height": 0,
        "version": 1,
        "versionHex": "00000001",
        "merkleroot": GENESIS_MERKLE_ROOT,
        "time": 1231006505,
        "mediantime": 1231006505,
        "nonce": 2083236893,
        "bits": "1d00ffff",
        "difficulty": 1,
        "chainwork": "0000000000000000000000000000000000000000000000000000000100010001",
        "nTx": 1,
        "nextblockhash": GENESIS_NEXT_HASH,
    }
    if version in ("29", "30"):
        result["target"] = GENESIS_TARGET
    return result


def _genesis_block_result(version: str) -> dict[str, Any]:
    result = _genesis_header_result(version)
    result.update(
        size=285,
        strippedsize=285,
        weight=1140,
        tx=[GENESIS_MERKLE_ROOT],
    )
    return result


@pytest.fixture
def header_result() -> Callable[[str], dict[str, Any]]:
    """Verbose ``getblockheader`` result for the genesis block, per protocol version."""
    return _genesis_header_result


@pytest.fixture
def block_result() -> Callable[[str], dict[str, Any]]:
    """Verbose ``getblock`` result for the genesis block, per protocol version."""
    return _genesis_block_result
