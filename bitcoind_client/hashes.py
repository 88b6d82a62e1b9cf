"""Fixed-size 32-byte hash types."""

from __future__ import annotations

import binascii
from dataclasses import dataclass
from typing import ClassVar

from bitcoin.core import b2lx, lx

from bitcoind_client.errors import HexToArrayError


@dataclass(frozen=True)
class Hash256:
    """32-byte double-SHA256 hash stored in internal (wire) byte order."""

    raw: bytes

    SIZE: ClassVar[int] = 32

    def __post_init__(self) -> None:
        if not isinstance(self.raw, bytes) or len(self.raw) != self.SIZE:
            raise HexToArrayError(
                f"{type(self).__name__} requires {self.SIZE} bytes",
                expected_len=self.SIZE,
            )

    @classmethod
    def from_hex(cls, value: str) -> "Hash256":
        """Parse display (byte-reversed) hex as returned by the node."""
        if not isinstance(value, str):
            raise HexToArrayError(f"expected hex string, got {type(value).__name__}", expected_len=cls.SIZE)
        if len(value) != cls.SIZE * 2:
            raise HexToArrayError(
                f"invalid hex length {len(value)} for {cls.__name__}, expected {cls.SIZE * 2}",
                expected_len=cls.SIZE,
            )
        try:
            return cls(lx(value))
        except (binascii.Error, ValueError, UnicodeEncodeError) as exc:
            raise HexToArrayError(f"invalid hex for {cls.__name__}: {value!r}", expected_len=cls.SIZE) from exc

    def to_hex(self) -> str:
        return b2lx(self.raw)

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_hex()})"


class BlockHash(Hash256):
    pass


class Txid(Hash256):
    pass


class TxMerkleNode(Hash256):
    pass


class FilterHash(Hash256):
    """BIP 157 compact filter header."""
