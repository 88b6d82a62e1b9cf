"""
Adapter over the python-bitcoinlib consensus codec.

Turns hex strings returned by the node into ``CBlock``, ``CBlockHeader`` and
``CTransaction`` values. Any hex or consensus failure, including trailing
bytes after a complete object, raises ``DecodeHexError``.
"""

from __future__ import annotations

import binascii
import struct
from typing import TypeVar

from bitcoin.core import CBlock, CBlockHeader, CTransaction, x
from bitcoin.core.serialize import SerializationError

from bitcoind_client.errors import DecodeHexError, HexToBytesError
from bitcoind_client.hashes import BlockHash, Txid

T = TypeVar("T", CBlock, CBlockHeader, CTransaction)


def hex_to_bytes(value: str) -> bytes:
    """Decode an arbitrary-length hex string."""
    if not isinstance(value, str):
        raise HexToBytesError(f"expected hex string, got {type(value).__name__}")
    try:
        return x(value)
    except (binascii.Error, ValueError) as exc:
        raise HexToBytesError(f"invalid hex string of length {len(value)}") from exc


def _deserialize_hex(cls: type[T], value: str, object_type: str) -> T:
    try:
        data = hex_to_bytes(value)
    except HexToBytesError as exc:
        raise DecodeHexError(f"{object_type} is not valid hex: {exc.message}", object_type) from exc
    try:
        return cls.deserialize(data)
    except (SerializationError, struct.error, ValueError) as exc:
        raise DecodeHexError(f"failed to decode {object_type} ({len(data)} bytes): {exc}", object_type) from exc


def decode_block(value: str) -> CBlock:
    return _deserialize_hex(CBlock, value, "block")


def decode_header(value: str) -> CBlockHeader:
    return _deserialize_hex(CBlockHeader, value, "header")


def decode_transaction(value: str) -> CTransaction:
    return _deserialize_hex(CTransaction, value, "transaction")


def block_hash(block: CBlock | CBlockHeader) -> BlockHash:
    """Hash of a decoded block or header."""
    return BlockHash(block.GetHash())


def txid(tx: CTransaction) -> Txid:
    """Witness-stripped transaction id."""
    return Txid(tx.GetTxid())
