"""
Bitcoin Core JSON-RPC client.

``Client.call`` is the single dispatch primitive: it encodes positional
arguments, sends them through the transport, checks the response envelope and
validates the ``result`` into the requested type. Every typed wrapper below is
a thin layer over it.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from bitcoin.core import CBlock, CBlockHeader, CTransaction
from pydantic import NonNegativeInt, TypeAdapter, ValidationError

from bitcoind_client import codec
from bitcoind_client.auth import Auth, CookieStrategy, resolve_credentials
from bitcoind_client.errors import (
    IntegerOverflowError,
    InvalidResponseError,
    JsonError,
    JsonRpcError,
)
from bitcoind_client.hashes import BlockHash, Hash256, Txid
from bitcoind_client.models.model import GetBlockFilter, GetBlockHeaderVerbose, GetBlockVerboseOne
from bitcoind_client.transport import DEFAULT_TIMEOUT, Transport, TransportBuilder
from bitcoind_client.versions import DEFAULT_PROTOCOL_VERSION, ProtocolVersion, ResponseModeler, get_modeler

if TYPE_CHECKING:
    from bitcoind_client.config.schema import ClientConfig

U32_MAX = 0xFFFF_FFFF


def _json_default(value: Any) -> Any:
    if isinstance(value, Hash256):
        return value.to_hex()
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def encode_params(args: Sequence[Any]) -> bytes:
    """Serialize positional arguments into the JSON array sent as ``params``."""
    try:
        return json.dumps(list(args), default=_json_default).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise JsonError(f"cannot encode params: {exc}") from exc


class Client:
    """
    Bitcoin Core JSON-RPC client.

    Holds one transport and the response modeler for its protocol version;
    nothing else. Calls are synchronous and independent of each other.
    """

    __slots__ = ("_transport", "_modeler")

    def __init__(
        self,
        transport: Transport,
        *,
        protocol_version: ProtocolVersion | str | int = DEFAULT_PROTOCOL_VERSION,
    ):
        self._transport = transport
        self._modeler: ResponseModeler = get_modeler(protocol_version)

    @classmethod
    def with_auth(
        cls,
        url: str,
        auth: Auth,
        *,
        protocol_version: ProtocolVersion | str | int = DEFAULT_PROTOCOL_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        cookie_strategy: CookieStrategy = CookieStrategy.TOKEN,
        require_auth: bool = True,
    ) -> Client:
        """
        Create a client for ``url`` authenticated by ``auth``.

        Args:
            url: RPC server URL (http or https).
            auth: ``UserPass``, ``CookieFile`` or ``NoAuth``.
            protocol_version: Node protocol version the responses follow.
            timeout: Per-request timeout in seconds.
            cookie_strategy: How a cookie file is presented to the transport.
            require_auth: Reject ``NoAuth`` with ``MissingAuthenticationError``.

        Raises:
            InvalidUrlError: ``url`` is not an http(s) URL.
            InvalidCookieFileError: cookie file is missing or malformed.
            MissingAuthenticationError: no credentials while ``require_auth``.
        """
        builder = TransportBuilder().url(url).timeout(timeout)
        creds = resolve_credentials(auth, strategy=cookie_strategy, require_auth=require_auth)
        return cls(builder.credentials(creds).build(), protocol_version=protocol_version)

    @classmethod
    def with_transport(
        cls,
        transport: Transport,
        *,
        protocol_version: ProtocolVersion | str | int = DEFAULT_PROTOCOL_VERSION,
    ) -> Client:
        """Create a client over a caller-supplied transport."""
        return cls(transport, protocol_version=protocol_version)

    @classmethod
    def from_config(cls, config: ClientConfig) -> Client:
        return cls.with_auth(
            config.url,
            config.to_auth(),
            protocol_version=config.protocol_version,
            timeout=config.timeout,
            cookie_strategy=config.cookie_strategy,
            require_auth=config.require_auth,
        )

    @property
    def protocol_version(self) -> ProtocolVersion:
        return self._modeler.version

    @property
    def transport(self) -> Transport:
        return self._transport

    def __repr__(self) -> str:
        return f"Client(transport={self._transport!r}, protocol_version={self.protocol_version.value})"

    def call(self, method: str, args: Sequence[Any] = (), result_type: Any = Any) -> Any:
        """
        Call RPC ``method`` with positional ``args`` and validate the result.

        ``result_type`` is anything pydantic can validate into (``str``,
        ``int``, ``list[str]``, a ``BaseModel`` subclass, ...). Validation is
        strict: ``"101"`` or ``true`` is not an ``int``.
        """
        params = encode_params(args)
        raw = self._transport.send_request(method, params)
        try:
            envelope = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise JsonError(f"{method}: response is not valid JSON") from exc
        if not isinstance(envelope, dict):
            raise InvalidResponseError(f"{method}: response is not a JSON object")

        error = envelope.get("error")
        if error is not None:
            code = error.get("code") if isinstance(error, dict) else None
            if not isinstance(code, int) or isinstance(code, bool):
                raise InvalidResponseError(f"{method}: malformed error object {error!r}")
            raise JsonRpcError(code, str(error.get("message") or "error message not specified"), method=method)
        if "result" not in envelope:
            raise InvalidResponseError(f"{method}: response has neither result nor error")

        try:
            return TypeAdapter(result_type).validate_python(envelope["result"], strict=True)
        except ValidationError as exc:
            raise JsonError(f"{method}: unexpected result shape: {exc}") from exc

    # --- Blockchain ---

    def get_best_block_hash(self) -> BlockHash:
        """Hash of the tip of the most-work chain."""
        return BlockHash.from_hex(self.call("getbestblockhash", [], str))

    def get_block_count(self) -> int:
        """Height of the most-work chain, narrowed to u32."""
        count = self.call("getblockcount", [], NonNegativeInt)
        if count > U32_MAX:
            raise IntegerOverflowError(count, 32)
        return count

    def get_block_hash(self, height: int) -> BlockHash:
        """Hash of the block at ``height`` in the most-work chain."""
        return BlockHash.from_hex(self.call("getblockhash", [height], str))

    def get_block(self, block_hash: BlockHash) -> CBlock:
        """
        Raw block (verbosity 0) decoded with the consensus codec.

        Args:
            block_hash: Hash of the block to retrieve.

        Returns:
            The decoded ``CBlock``.
        """
        return codec.decode_block(self.call("getblock", [block_hash, 0], str))

    def get_block_verbose(self, block_hash: BlockHash) -> GetBlockVerboseOne:
        """
        Verbose block (verbosity 1) converted to the canonical model.

        Args:
            block_hash: Hash of the block to retrieve.

        Returns:
            ``GetBlockVerboseOne`` built from this client's protocol-version shape.
        """
        modeler = self._modeler
        raw = self.call("getblock", [block_hash, 1], modeler.block_verbose_one_shape)
        return modeler.block_verbose_one(raw)

    def get_block_header(self, block_hash: BlockHash) -> CBlockHeader:
        """Raw 80-byte block header decoded with the consensus codec."""
        return codec.decode_header(self.call("getblockheader", [block_hash, False], str))

    def get_block_header_verbose(self, block_hash: BlockHash) -> GetBlockHeaderVerbose:
        """Verbose block header converted to the canonical model."""
        modeler = self._modeler
        raw = self.call("getblockheader", [block_hash], modeler.block_header_verbose_shape)
        return modeler.block_header_verbose(raw)

    def get_block_filter(self, block_hash: BlockHash) -> GetBlockFilter:
        """
        BIP 157 ``basic`` filter for a block.

        The node must run with ``-blockfilterindex=1``; otherwise it answers
        with a JSON-RPC error.
        """
        modeler = self._modeler
        raw = self.call("getblockfilter", [block_hash], modeler.block_filter_shape)
        return modeler.block_filter(raw)

    # --- Mempool / transactions ---

    def get_raw_mempool(self) -> list[Txid]:
        return [Txid.from_hex(txid) for txid in self.call("getrawmempool", [], list[str])]

    def get_raw_transaction(self, txid: Txid) -> CTransaction:
        """
        Raw transaction decoded with the consensus codec.

        Unknown ids surface as ``JsonRpcError`` (code -5); transactions outside
        the mempool require ``-txindex=1``.
        """
        return codec.decode_transaction(self.call("getrawtransaction", [txid], str))
