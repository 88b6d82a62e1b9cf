"""Shared pieces of the version-specific raw response shapes."""

import re
from abc import abstractmethod
from typing import Any, Callable, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bitcoind_client.codec import hex_to_bytes
from bitcoind_client.errors import BitcoindClientError, JsonError, ModelConversionError
from bitcoind_client.hashes import BlockHash, FilterHash, TxMerkleNode, Txid

U32_MAX = 0xFFFF_FFFF

_HEX_RE = re.compile(r"[0-9a-fA-F]+")

T = TypeVar("T")


def check_u32(value: int) -> int:
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"{value} is outside the u32 range")
    return value


def parse_fixed_hex(value: str, width: int) -> int:
    """Parse a big-endian hex number of exactly ``width`` digits."""
    if len(value) != width:
        raise ValueError(f"expected {width} hex digits, got {len(value)}")
    return parse_hex_number(value)


def parse_hex_number(value: str) -> int:
    if not _HEX_RE.fullmatch(value):
        raise ValueError(f"invalid hex {value!r}")
    return int(value, 16)


def compact_to_target(bits: int) -> int:
    """Expand the compact ``nBits`` encoding into the full 256-bit target."""
    exponent = bits >> 24
    mantissa = bits & 0x007F_FFFF
    if mantissa and bits & 0x0080_0000:
        raise ValueError(f"bits {bits:08x} encode a negative target")
    if mantissa and (
        exponent > 34
        or (mantissa > 0xFF and exponent > 33)
        or (mantissa > 0xFFFF and exponent > 32)
    ):
        raise ValueError(f"bits {bits:08x} overflow 256 bits")
    if exponent <= 3:
        return mantissa >> (8 * (3 - exponent))
    return mantissa << (8 * (exponent - 3))


class RawShape(BaseModel):
    """
    Base for raw response shapes.

    Unknown fields and loosely typed values (``"0"`` for an int) are
    rejected, so a response produced by a different protocol version fails
    here, before conversion.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    conversion_error: ClassVar[type[ModelConversionError]] = ModelConversionError

    @classmethod
    def from_result(cls, result: Any) -> "RawShape":
        try:
            return cls.model_validate(result)
        except ValidationError as exc:
            raise JsonError(f"{cls.__module__.rsplit('.', 1)[-1]}.{cls.__name__}: {exc}") from exc

    @abstractmethod
    def into_model(self) -> Any:
        """Convert to the canonical model, raising ``conversion_error`` on bad values."""

    def _convert(self, field: str, parse: Callable[..., T], *args: Any) -> T:
        try:
            return parse(*args)
        except (BitcoindClientError, ValueError) as exc:
            message = exc.message if isinstance(exc, BitcoindClientError) else str(exc)
            raise self.conversion_error(f"invalid {field}: {message}", field=field) from exc

    def _optional_hash(self, field: str, value: str | None) -> BlockHash | None:
        if value is None:
            return None
        return self._convert(field, BlockHash.from_hex, value)


class HeaderFields(RawShape):
    """Fields shared by ``getblockheader`` verbose and ``getblock`` verbosity 1."""

    hash: str
    confirmations: int
    height: int
    version: int
    version_hex: str = Field(alias="versionHex")
    merkleroot: str
    time: int
    mediantime: int
    nonce: int
    bits: str
    difficulty: float
    chainwork: str
    n_tx: int = Field(alias="nTx")
    previousblockhash: str | None = None
    nextblockhash: str | None = None

    def _header_fields(self, target: str | None) -> dict[str, Any]:
        convert = self._convert
        version_bits = convert("versionHex", parse_fixed_hex, self.version_hex, 8)
        if version_bits != self.version & U32_MAX:
            raise self.conversion_error(
                f"versionHex {self.version_hex} does not match version {self.version}",
                field="versionHex",
            )
        bits = convert("bits", parse_fixed_hex, self.bits, 8)
        expanded = convert("bits", compact_to_target, bits)
        if target is not None:
            reported = convert("target", parse_fixed_hex, target, 64)
            if reported != expanded:
                raise self.conversion_error(f"target {target} does not match bits {self.bits}", field="target")
        return {
            "hash": convert("hash", BlockHash.from_hex, self.hash),
            "confirmations": self.confirmations,
            "height": convert("height", check_u32, self.height),
            "version": self.version,
            "merkle_root": convert("merkleroot", TxMerkleNode.from_hex, self.merkleroot),
            "time": convert("time", check_u32, self.time),
            "median_time": convert("mediantime", check_u32, self.mediantime),
            "nonce": convert("nonce", check_u32, self.nonce),
            "bits": bits,
            "target": expanded,
            "difficulty": self.difficulty,
            "chain_work": convert("chainwork", parse_hex_number, self.chainwork),
            "n_tx": convert("nTx", check_u32, self.n_tx),
            "previous_block_hash": self._optional_hash("previousblockhash", self.previousblockhash),
            "next_block_hash": self._optional_hash("nextblockhash", self.nextblockhash),
        }


class BlockFields(HeaderFields):
    """``getblock`` verbosity 1 adds sizes and the txid list."""

    size: int
    strippedsize: int
    weight: int
    tx: list[str]

    def _block_fields(self, target: str | None) -> dict[str, Any]:
        fields = self._header_fields(target)
        if fields["n_tx"] != len(self.tx):
            raise self.conversion_error(f"nTx {self.n_tx} does not match {len(self.tx)} txids", field="nTx")
        fields.update(
            size=self._convert("size", check_u32, self.size),
            stripped_size=self._convert("strippedsize", check_u32, self.strippedsize),
            weight=self._convert("weight", check_u32, self.weight),
            tx=tuple(self._convert("tx", Txid.from_hex, txid) for txid in self.tx),
        )
        return fields


class FilterFields(RawShape):
    """``getblockfilter`` result."""

    filter: str
    header: str

    def _filter_fields(self) -> dict[str, Any]:
        return {
            "filter": self._convert("filter", hex_to_bytes, self.filter),
            "header": self._convert("header", FilterHash.from_hex, self.header),
        }
