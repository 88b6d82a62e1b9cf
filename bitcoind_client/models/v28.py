"""
Raw response shapes for node protocol version 28.

``getblockheader`` and ``getblock`` carry no ``target`` field; the canonical
target is derived from ``bits``.
"""

from typing import ClassVar

from bitcoind_client.errors import (
    GetBlockFilterError,
    GetBlockHeaderVerboseError,
    GetBlockVerboseOneError,
    ModelConversionError,
)
from bitcoind_client.models import model
from bitcoind_client.models.raw import BlockFields, FilterFields, HeaderFields


class GetBlockHeaderVerbose(HeaderFields):
    conversion_error: ClassVar[type[ModelConversionError]] = GetBlockHeaderVerboseError

    def into_model(self) -> model.GetBlockHeaderVerbose:
        return model.GetBlockHeaderVerbose(**self._header_fields(None))


class GetBlockVerboseOne(BlockFields):
    conversion_error: ClassVar[type[ModelConversionError]] = GetBlockVerboseOneError

    def into_model(self) -> model.GetBlockVerboseOne:
        return model.GetBlockVerboseOne(**self._block_fields(None))


class GetBlockFilter(FilterFields):
    conversion_error: ClassVar[type[ModelConversionError]] = GetBlockFilterError

    def into_model(self) -> model.GetBlockFilter:
        return model.GetBlockFilter(**self._filter_fields())
