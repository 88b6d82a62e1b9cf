"""
Raw response shapes for node protocol version 30.

``getblock`` verbosity 1 may attach a ``coinbase_tx`` summary; the other
shapes are unchanged from version 29.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from bitcoind_client.codec import hex_to_bytes
from bitcoind_client.errors import GetBlockVerboseOneError, ModelConversionError
from bitcoind_client.models import model
from bitcoind_client.models.raw import BlockFields, check_u32
from bitcoind_client.models.v29 import GetBlockFilter, GetBlockHeaderVerbose

__all__ = ["CoinbaseTx", "GetBlockFilter", "GetBlockHeaderVerbose", "GetBlockVerboseOne"]


class CoinbaseTx(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    version: int
    locktime: int
    sequence: int
    coinbase: str
    witness: str | None = None


class GetBlockVerboseOne(BlockFields):
    conversion_error: ClassVar[type[ModelConversionError]] = GetBlockVerboseOneError

    target: str
    coinbase_tx: CoinbaseTx | None = None

    def _coinbase_tx(self) -> model.CoinbaseTx | None:
        raw = self.coinbase_tx
        if raw is None:
            return None
        convert = self._convert
        return model.CoinbaseTx(
            version=raw.version,
            locktime=convert("coinbase_tx.locktime", check_u32, raw.locktime),
            sequence=convert("coinbase_tx.sequence", check_u32, raw.sequence),
            coinbase=convert("coinbase_tx.coinbase", hex_to_bytes, raw.coinbase),
            witness=None if raw.witness is None else convert("coinbase_tx.witness", hex_to_bytes, raw.witness),
        )

    def into_model(self) -> model.GetBlockVerboseOne:
        fields = self._block_fields(self.target)
        return model.GetBlockVerboseOne(**fields, coinbase_tx=self._coinbase_tx())
