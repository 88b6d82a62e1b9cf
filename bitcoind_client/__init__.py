"""Typed client for the Bitcoin Core JSON-RPC interface."""

__version__ = "0.1.0"

from bitcoind_client.auth import (
    Auth,
    CookieFile,
    CookieStrategy,
    Credentials,
    NoAuth,
    UserPass,
    read_cookie_token,
    read_cookie_user_pass,
    resolve_credentials,
)
from bitcoind_client.client import Client
from bitcoind_client.errors import (
    BitcoindClientError,
    DecodeHexError,
    ErrorCategory,
    GetBlockFilterError,
    GetBlockHeaderVerboseError,
    GetBlockVerboseOneError,
    HexToArrayError,
    HexToBytesError,
    IntegerOverflowError,
    InvalidCookieFileError,
    InvalidResponseError,
    InvalidUrlError,
    JsonError,
    JsonRpcError,
    MissingAuthenticationError,
    ModelConversionError,
    RpcErrorCode,
    TransportError,
)
from bitcoind_client.hashes import BlockHash, FilterHash, TxMerkleNode, Txid
from bitcoind_client.models import CoinbaseTx, GetBlockFilter, GetBlockHeaderVerbose, GetBlockVerboseOne
from bitcoind_client.transport import HttpTransport, Transport, TransportBuilder
from bitcoind_client.versions import ProtocolVersion, ResponseModeler, get_modeler

__all__ = [
    "Auth",
    "CookieFile",
    "CookieStrategy",
    "Credentials",
    "NoAuth",
    "UserPass",
    "read_cookie_token",
    "read_cookie_user_pass",
    "resolve_credentials",
    "Client",
    "BitcoindClientError",
    "DecodeHexError",
    "ErrorCategory",
    "GetBlockFilterError",
    "GetBlockHeaderVerboseError",
    "GetBlockVerboseOneError",
    "HexToArrayError",
    "HexToBytesError",
    "IntegerOverflowError",
    "InvalidCookieFileError",
    "InvalidResponseError",
    "InvalidUrlError",
    "JsonError",
    "JsonRpcError",
    "MissingAuthenticationError",
    "ModelConversionError",
    "RpcErrorCode",
    "TransportError",
    "BlockHash",
    "FilterHash",
    "TxMerkleNode",
    "Txid",
    "CoinbaseTx",
    "GetBlockFilter",
    "GetBlockHeaderVerbose",
    "GetBlockVerboseOne",
    "HttpTransport",
    "Transport",
    "TransportBuilder",
    "ProtocolVersion",
    "ResponseModeler",
    "get_modeler",
]
