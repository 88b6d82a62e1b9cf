"""HTTP transport for the bitcoind JSON-RPC interface."""

from __future__ import annotations

import base64
import json
import time
import uuid
from typing import Any, Protocol, runtime_checkable

import httpx
from loguru import logger

from bitcoind_client.auth import Credentials
from bitcoind_client.errors import InvalidUrlError, JsonError, TransportError

DEFAULT_TIMEOUT = 60.0
USER_AGENT = "bitcoind-client/0.1"


@runtime_checkable
class Transport(Protocol):
    """Moves one JSON-RPC request to the node and returns the raw response body."""

    def send_request(self, method: str, params: bytes) -> bytes:
        ...


class HttpTransport:
    """
    JSON-RPC over HTTP(S) using httpx.

    A fresh ``httpx.Client`` is opened per call and closed on return; the
    transport itself is immutable after construction.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        basic_auth: tuple[str, str] | None = None,
        cookie: str | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._auth = httpx.BasicAuth(*basic_auth) if basic_auth else None
        self._headers = {"Content-Type": "application/json", "User-Agent": USER_AGENT}
        if cookie:
            token = base64.b64encode(cookie.encode("utf-8")).decode("ascii")
            self._headers["Authorization"] = f"Basic {token}"

    def __repr__(self) -> str:
        return f"HttpTransport(url={self.url!r}, timeout={self.timeout})"

    @staticmethod
    def _build_body(method: str, params: bytes) -> bytes:
        try:
            decoded = json.loads(params) if params else []
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise JsonError(f"params for {method} are not valid JSON") from exc
        envelope = {
            "jsonrpc": "2.0",
            "id": uuid.uuid4().hex,
            "method": method,
            "params": decoded,
        }
        return json.dumps(envelope).encode("utf-8")

    @staticmethod
    def _is_rpc_error_body(content: bytes) -> bool:
        try:
            body = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return False
        return isinstance(body, dict) and isinstance(body.get("error"), dict)

    def send_request(self, method: str, params: bytes) -> bytes:
        body = self._build_body(method, params)
        started = time.monotonic()
        try:
            with httpx.Client(timeout=self.timeout, auth=self._auth, headers=self._headers) as client:
                resp = client.post(self.url, content=body)
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"timeout after {self.timeout}s calling {method}",
                code="TRANSPORT_TIMEOUT",
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(
                f"network error calling {method}: {exc}",
                code="TRANSPORT_NETWORK_ERROR",
            ) from exc

        status_code = int(resp.status_code)
        elapsed_ms = (time.monotonic() - started) * 1000
        logger.debug(f"bitcoind rpc {method} status={status_code} elapsed_ms={elapsed_ms:.1f}")

        if status_code in (401, 403):
            logger.warning(f"bitcoind rejected credentials for {method} (HTTP {status_code})")
            raise TransportError(
                f"authentication rejected by node (HTTP {status_code})",
                code="TRANSPORT_AUTH_ERROR",
                status_code=status_code,
            )
        content = resp.content
        if status_code >= 400:
            # Pre-2.0 bitcoind answers RPC errors with HTTP 404/500 and a JSON-RPC error body.
            if self._is_rpc_error_body(content):
                return content
            text = (resp.text or "").strip()[:200] or "request failed"
            raise TransportError(
                f"http error {status_code} calling {method}: {text}",
                code="TRANSPORT_HTTP_ERROR",
                status_code=status_code,
            )
        return content


class TransportBuilder:
    """
    Fluent builder for ``HttpTransport``.

        transport = TransportBuilder().url(url).timeout(30).basic_auth(user, pw).build()
    """

    def __init__(self) -> None:
        self._url: str | None = None
        self._timeout: float = DEFAULT_TIMEOUT
        self._basic_auth: tuple[str, str] | None = None
        self._cookie: str | None = None

    def url(self, url: str) -> TransportBuilder:
        self._url = validate_url(url)
        return self

    def timeout(self, seconds: float) -> TransportBuilder:
        self._timeout = float(seconds)
        return self

    def basic_auth(self, username: str, password: str | None = None) -> TransportBuilder:
        self._basic_auth = (username, password or "")
        self._cookie = None
        return self

    def cookie_auth(self, cookie: str) -> TransportBuilder:
        self._cookie = cookie
        self._basic_auth = None
        return self

    def credentials(self, creds: Credentials) -> TransportBuilder:
        """Apply resolved credentials; empty credentials leave the transport unauthenticated."""
        if creds.cookie is not None:
            return self.cookie_auth(creds.cookie)
        if creds.username is not None or creds.password is not None:
            return self.basic_auth(creds.username or "", creds.password)
        return self

    def build(self) -> HttpTransport:
        if self._url is None:
            raise InvalidUrlError("", "no url configured")
        return HttpTransport(
            self._url,
            timeout=self._timeout,
            basic_auth=self._basic_auth,
            cookie=self._cookie,
        )


def validate_url(url: Any) -> str:
    """Check that ``url`` is an absolute http(s) URL with a host."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError(str(url), "empty url")
    try:
        parsed = httpx.URL(url.strip())
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise InvalidUrlError(url, str(exc)) from exc
    if parsed.scheme not in ("http", "https"):
        raise InvalidUrlError(url, f"unsupported scheme {parsed.scheme!r}")
    if not parsed.host:
        raise InvalidUrlError(url, "missing host")
    return url.strip()
