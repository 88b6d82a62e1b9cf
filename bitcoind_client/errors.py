"""
Error taxonomy for the bitcoind RPC client.

Every public operation raises exactly one subclass of ``BitcoindClientError``.
Each class belongs to one ``ErrorCategory`` that names the stage which failed:

- authentication configuration (credentials, cookie file, URL)
- transport (network, HTTP, or a JSON-RPC error reported by the node)
- serialization (request/response JSON)
- decoding (hex, hashes, consensus codec)
- model conversion (version-specific response shape -> canonical model)
- numeric conversion (value does not fit the target integer width)

Library exceptions are chained as ``__cause__`` and exposed through ``cause``;
they are never raised directly.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any


class ErrorCategory(Enum):
    """Stage of the call pipeline an error originated from."""
    AUTHENTICATION = "authentication"
    TRANSPORT = "transport"
    SERIALIZATION = "serialization"
    DECODING = "decoding"
    MODEL_CONVERSION = "model_conversion"
    NUMERIC = "numeric"


class RpcErrorCode(IntEnum):
    """Well-known Bitcoin Core JSON-RPC error codes."""
    MISC_ERROR = -1
    FORBIDDEN_BY_SAFE_MODE = -2
    TYPE_ERROR = -3
    INVALID_ADDRESS_OR_KEY = -5
    OUT_OF_MEMORY = -7
    INVALID_PARAMETER = -8
    DATABASE_ERROR = -20
    DESERIALIZATION_ERROR = -22
    VERIFY_ERROR = -25
    VERIFY_REJECTED = -26
    VERIFY_ALREADY_IN_CHAIN = -27
    IN_WARMUP = -28
    METHOD_DEPRECATED = -32
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    PARSE_ERROR = -32700


class BitcoindClientError(Exception):
    """Base exception for all client errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.TRANSPORT,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    @property
    def cause(self) -> BaseException | None:
        """Underlying library exception, if any."""
        return self.__cause__

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# --- Authentication configuration ---


class MissingAuthenticationError(BitcoindClientError):
    """Authentication is required but no credentials were provided."""

    def __init__(self, message: str = "authentication is required but none was provided"):
        super().__init__(message, code="MISSING_AUTHENTICATION", category=ErrorCategory.AUTHENTICATION)


class InvalidCookieFileError(BitcoindClientError):
    """Cookie file is missing, unreadable, empty, or malformed."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"invalid cookie file {path}: {reason}",
            code="INVALID_COOKIE_FILE",
            category=ErrorCategory.AUTHENTICATION,
            details={"path": path, "reason": reason},
        )
        self.path = path


class InvalidUrlError(BitcoindClientError):
    """RPC server URL could not be used."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            f"invalid url {url!r}: {reason}",
            code="INVALID_URL",
            category=ErrorCategory.AUTHENTICATION,
            details={"url": url, "reason": reason},
        )
        self.url = url


# --- Transport ---


class TransportError(BitcoindClientError):
    """Connection, TLS, or HTTP-level failure."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "TRANSPORT_ERROR",
        status_code: int | None = None,
    ):
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(message, code=code, category=ErrorCategory.TRANSPORT, details=details)
        self.status_code = status_code


class JsonRpcError(BitcoindClientError):
    """Error object returned by the node, passed through verbatim."""

    def __init__(self, rpc_code: int, rpc_message: str, method: str | None = None):
        details: dict[str, Any] = {"rpc_code": rpc_code, "rpc_message": rpc_message}
        if method:
            details["method"] = method
        super().__init__(
            f"JSON-RPC error {rpc_code}: {rpc_message}",
            code="JSON_RPC_ERROR",
            category=ErrorCategory.TRANSPORT,
            details=details,
        )
        self.rpc_code = rpc_code
        self.rpc_message = rpc_message
        self.method = method

    @property
    def rpc_error_code(self) -> RpcErrorCode | None:
        try:
            return RpcErrorCode(self.rpc_code)
        except ValueError:
            return None


# --- Serialization ---


class JsonError(BitcoindClientError):
    """Request could not be encoded, or the response does not match the expected shape."""

    def __init__(self, message: str):
        super().__init__(message, code="JSON_ERROR", category=ErrorCategory.SERIALIZATION)


class InvalidResponseError(BitcoindClientError):
    """Response envelope is not a JSON-RPC response."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_RESPONSE", category=ErrorCategory.SERIALIZATION)


# --- Decoding ---


class HexToBytesError(BitcoindClientError):
    """Hex string could not be decoded to bytes."""

    def __init__(self, message: str):
        super().__init__(message, code="HEX_TO_BYTES", category=ErrorCategory.DECODING)


class HexToArrayError(BitcoindClientError):
    """Hex string is not a valid fixed-size hash."""

    def __init__(self, message: str, expected_len: int | None = None):
        details = {"expected_len": expected_len} if expected_len is not None else {}
        super().__init__(message, code="HEX_TO_ARRAY", category=ErrorCategory.DECODING, details=details)


class DecodeHexError(BitcoindClientError):
    """Hex-encoded block, header, or transaction failed to decode."""

    def __init__(self, message: str, object_type: str):
        super().__init__(
            message,
            code="DECODE_HEX",
            category=ErrorCategory.DECODING,
            details={"object_type": object_type},
        )
        self.object_type = object_type


# --- Model conversion ---


class ModelConversionError(BitcoindClientError):
    """Version-specific response shape could not be converted to the canonical model."""

    result_kind = "model"

    def __init__(self, message: str, field: str | None = None):
        details: dict[str, Any] = {"result_kind": self.result_kind}
        if field:
            details["field"] = field
        super().__init__(
            f"{self.result_kind}: {message}",
            code="MODEL_CONVERSION",
            category=ErrorCategory.MODEL_CONVERSION,
            details=details,
        )
        self.field = field


class GetBlockHeaderVerboseError(ModelConversionError):
    result_kind = "getblockheader"


class GetBlockVerboseOneError(ModelConversionError):
    result_kind = "getblock"


class GetBlockFilterError(ModelConversionError):
    result_kind = "getblockfilter"


# --- Numeric conversion ---


class IntegerOverflowError(BitcoindClientError):
    """Server-reported integer does not fit the target width."""

    def __init__(self, value: int, bits: int):
        super().__init__(
            f"integer {value} does not fit in u{bits}",
            code="OVERFLOW",
            category=ErrorCategory.NUMERIC,
            details={"value": value, "bits": bits},
        )
        self.value = value
        self.bits = bits
