"""
Raw response shapes for node protocol version 29.

``getblockheader`` and ``getblock`` report the full ``target`` alongside
``bits``; the two must agree.
"""

from typing import ClassVar

from bitcoind_client.errors import (
    GetBlockHeaderVerboseError,
    GetBlockVerboseOneError,
    ModelConversionError,
)
from bitcoind_client.models import model
from bitcoind_client.models.raw import BlockFields, HeaderFields
from bitcoind_client.models.v28 import GetBlockFilter

__all__ = ["GetBlockFilter", "GetBlockHeaderVerbose", "GetBlockVerboseOne"]


class GetBlockHeaderVerbose(HeaderFields):
    conversion_error: ClassVar[type[ModelConversionError]] = GetBlockHeaderVerboseError

    target: str

    def into_model(self) -> model.GetBlockHeaderVerbose:
        return model.GetBlockHeaderVerbose(**self._header_fields(self.target))


class GetBlockVerboseOne(BlockFields):
    conversion_error: ClassVar[type[ModelConversionError]] = GetBlockVerboseOneError

    target: str

    def into_model(self) -> model.GetBlockVerboseOne:
        return model.GetBlockVerboseOne(**self._block_fields(self.target))
