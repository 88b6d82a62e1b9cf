"""Canonical result models and per-protocol-version raw shapes."""

from bitcoind_client.models.model import (
    CoinbaseTx,
    GetBlockFilter,
    GetBlockHeaderVerbose,
    GetBlockVerboseOne,
)

__all__ = ["CoinbaseTx", "GetBlockFilter", "GetBlockHeaderVerbose", "GetBlockVerboseOne"]
