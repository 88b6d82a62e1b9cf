import base64
import json

import httpx
import pytest

import bitcoind_client.transport as transport_mod
from bitcoind_client.auth import Credentials
from bitcoind_client.errors import InvalidUrlError, JsonError, TransportError
from bitcoind_client.transport import HttpTransport, Transport, TransportBuilder, validate_url


class FakeResponse:
    def __init__(self, status_code: int, body: bytes):
        self.status_code = status_code
        self.content = body
        self.text = body.decode("utf-8", errors="replace")


def _fake_client_factory(response=None, raises=None):
    sent: list[dict] = []

    class FakeClient:
        def __init__(self, timeout: float, auth=None, headers=None):
            self.timeout = timeout
            self.auth = auth
            self.headers = headers or {}

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

        def post(self, url: str, content: bytes = b""):
            sent.append(
                {
                    "url": url,
                    "body": json.loads(content),
                    "auth": self.auth,
                    "headers": dict(self.headers),
                    "timeout": self.timeout,
                }
            )
            if raises is not None:
                raise raises(url)
            return response

    return FakeClient, sent


def test_send_request_posts_json_rpc_envelope(monkeypatch) -> None:
    body = b'{"result": 101, "error": null, "id": "x"}'
    fake, sent = _fake_client_factory(FakeResponse(200, body))
    monkeypatch.setattr(transport_mod.httpx, "Client", fake)

    t = HttpTransport("http://127.0.0.1:18443", timeout=5.0, basic_auth=("alice", "pw"))
    assert t.send_request("getblockcount", b"[]") == body

    request = sent[0]
    assert request["url"] == "http://127.0.0.1:18443"
    assert request["timeout"] == 5.0
    assert request["body"]["method"] == "getblockcount"
    assert request["body"]["params"] == []
    assert request["body"]["jsonrpc"] == "2.0"
    assert request["body"]["id"]
    assert isinstance(request["auth"], httpx.BasicAuth)
    assert request["headers"]["Content-Type"] == "application/json"


def test_request_ids_are_unique(monkeypatch) -> None:
    fake, sent = _fake_client_factory(FakeResponse(200, b'{"result": null, "error": null, "id": "x"}'))
    monkeypatch.setattr(transport_mod.httpx, "Client", fake)
    t = HttpTransport("http://127.0.0.1:8332")
    t.send_request("getbestblockhash", b"[]")
    t.send_request("getbestblockhash", b"[]")
    assert sent[0]["body"]["id"] != sent[1]["body"]["id"]


def test_cookie_token_is_sent_as_basic_authorization(monkeypatch) -> None:
    fake, sent = _fake_client_factory(FakeResponse(200, b'{"result": 0, "error": null, "id": "x"}'))
    monkeypatch.setattr(transport_mod.httpx, "Client", fake)
    t = HttpTransport("http://127.0.0.1:8332", cookie="__cookie__:abc")
    t.send_request("getblockcount", b"[]")
    expected = base64.b64encode(b"__cookie__:abc").decode("ascii")
    assert sent[0]["headers"]["Authorization"] == f"Basic {expected}"
    assert sent[0]["auth"] is None


def test_timeout_is_normalized(monkeypatch) -> None:
    def timeout(url):
        return httpx.ReadTimeout("read timed out", request=httpx.Request("POST", url))

    fake, _ = _fake_client_factory(raises=timeout)
    monkeypatch.setattr(transport_mod.httpx, "Client", fake)
    with pytest.raises(TransportError) as err:
        HttpTransport("http://127.0.0.1:8332", timeout=1.5).send_request("getblockcount", b"[]")
    assert err.value.code == "TRANSPORT_TIMEOUT"
    assert isinstance(err.value.cause, httpx.TimeoutException)


def test_network_error_is_normalized(monkeypatch) -> None:
    def refused(url):
        return httpx.ConnectError("connection refused", request=httpx.Request("POST", url))

    fake, _ = _fake_client_factory(raises=refused)
    monkeypatch.setattr(transport_mod.httpx, "Client", fake)
    with pytest.raises(TransportError) as err:
        HttpTransport("http://127.0.0.1:8332").send_request("getblockcount", b"[]")
    assert err.value.code == "TRANSPORT_NETWORK_ERROR"
    assert "connection refused" in str(err.value)


@pytest.mark.parametrize("status", [401, 403])
def test_rejected_credentials(monkeypatch, status: int) -> None:
    fake, _ = _fake_client_factory(FakeResponse(status, b""))
    monkeypatch.setattr(transport_mod.httpx, "Client", fake)
    with pytest.raises(TransportError) as err:
        HttpTransport("http://127.0.0.1:8332").send_request("getblockcount", b"[]")
    assert err.value.code == "TRANSPORT_AUTH_ERROR"
    assert err.value.status_code == status


def test_rpc_error_body_on_http_error_is_returned(monkeypatch) -> None:
    body = b'{"result": null, "error": {"code": -5, "message": "Block not found"}, "id": "x"}'
    fake, _ = _fake_client_factory(FakeResponse(500, body))
    monkeypatch.setattr(transport_mod.httpx, "Client", fake)
    assert HttpTransport("http://127.0.0.1:8332").send_request("getblock", b'["00"]') == body


def test_plain_http_error_is_normalized(monkeypatch) -> None:
    fake, _ = _fake_client_factory(FakeResponse(503, b"Work queue depth exceeded"))
    monkeypatch.setattr(transport_mod.httpx, "Client", fake)
    with pytest.raises(TransportError) as err:
        HttpTransport("http://127.0.0.1:8332").send_request("getblockcount", b"[]")
    assert err.value.code == "TRANSPORT_HTTP_ERROR"
    assert err.value.status_code == 503
    assert "Work queue depth exceeded" in err.value.message


def test_invalid_params_bytes_rejected() -> None:
    with pytest.raises(JsonError):
        HttpTransport("http://127.0.0.1:8332").send_request("getblockcount", b"[not json")


def test_http_transport_satisfies_protocol() -> None:
    assert isinstance(HttpTransport("http://127.0.0.1:8332"), Transport)


class TestTransportBuilder:
    def test_build_with_basic_auth(self) -> None:
        t = TransportBuilder().url("http://127.0.0.1:8332").timeout(10).basic_auth("u", "p").build()
        assert t.url == "http://127.0.0.1:8332"
        assert t.timeout == 10.0

    def test_credentials_with_cookie(self, monkeypatch) -> None:
        fake, sent = _fake_client_factory(FakeResponse(200, b'{"result": 0, "error": null, "id": "x"}'))
        monkeypatch.setattr(transport_mod.httpx, "Client", fake)
        t = TransportBuilder().url("http://h:1").credentials(Credentials(cookie="tok")).build()
        t.send_request("getblockcount", b"[]")
        assert sent[0]["headers"]["Authorization"].startswith("Basic ")

    def test_build_without_url(self) -> None:
        with pytest.raises(InvalidUrlError):
            TransportBuilder().build()

    @pytest.mark.parametrize("url", ["", "   ", "ftp://127.0.0.1", "127.0.0.1:8332", "http://"])
    def test_invalid_url(self, url: str) -> None:
        with pytest.raises(InvalidUrlError):
            TransportBuilder().url(url)


def test_validate_url_keeps_path_and_port() -> None:
    assert validate_url(" https://node.example:8332/wallet/main ") == "https://node.example:8332/wallet/main"
