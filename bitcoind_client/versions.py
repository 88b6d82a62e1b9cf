"""
Protocol-version capability tags and the response modelers bound to them.

A ``ResponseModeler`` knows which raw shape each version-sensitive RPC result
takes for one node protocol version and converts it into the canonical model.
The client holds exactly one modeler, chosen by its ``ProtocolVersion``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from bitcoind_client.models import model, v28, v29, v30
from bitcoind_client.models.raw import RawShape


class ProtocolVersion(str, Enum):
    """Node protocol version a client speaks."""
    V28 = "28"
    V29 = "29"
    V30 = "30"

    @classmethod
    def parse(cls, value: Any) -> ProtocolVersion:
        """Accept ``28``, ``"28"``, ``"28.0"``, ``"v28"`` or a member."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower().lstrip("v")
        major = text.split(".", 1)[0]
        try:
            return cls(major)
        except ValueError:
            supported = ", ".join(v.value for v in cls)
            raise ValueError(f"unsupported protocol version {value!r} (supported: {supported})") from None


DEFAULT_PROTOCOL_VERSION = ProtocolVersion.V30


class ResponseModeler:
    """Maps version-sensitive results to their raw shapes and converts them."""

    version: ProtocolVersion
    block_header_verbose_shape: type[RawShape]
    block_verbose_one_shape: type[RawShape]
    block_filter_shape: type[RawShape]

    def block_header_verbose(self, raw: RawShape) -> model.GetBlockHeaderVerbose:
        return self._into_model(self.block_header_verbose_shape, raw)

    def block_verbose_one(self, raw: RawShape) -> model.GetBlockVerboseOne:
        return self._into_model(self.block_verbose_one_shape, raw)

    def block_filter(self, raw: RawShape) -> model.GetBlockFilter:
        return self._into_model(self.block_filter_shape, raw)

    def _into_model(self, shape: type[RawShape], raw: Any) -> Any:
        if not isinstance(raw, shape):
            raw = shape.from_result(raw)
        return raw.into_model()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(version={self.version.value})"


class V28Modeler(ResponseModeler):
    version = ProtocolVersion.V28
    block_header_verbose_shape = v28.GetBlockHeaderVerbose
    block_verbose_one_shape = v28.GetBlockVerboseOne
    block_filter_shape = v28.GetBlockFilter


class V29Modeler(ResponseModeler):
    version = ProtocolVersion.V29
    block_header_verbose_shape = v29.GetBlockHeaderVerbose
    block_verbose_one_shape = v29.GetBlockVerboseOne
    block_filter_shape = v29.GetBlockFilter


class V30Modeler(ResponseModeler):
    version = ProtocolVersion.V30
    block_header_verbose_shape = v30.GetBlockHeaderVerbose
    block_verbose_one_shape = v30.GetBlockVerboseOne
    block_filter_shape = v30.GetBlockFilter


_MODELERS: dict[ProtocolVersion, ResponseModeler] = {
    modeler.version: modeler for modeler in (V28Modeler(), V29Modeler(), V30Modeler())
}


def get_modeler(version: ProtocolVersion | str | int = DEFAULT_PROTOCOL_VERSION) -> ResponseModeler:
    """Return the modeler for ``version``."""
    return _MODELERS[ProtocolVersion.parse(version)]
