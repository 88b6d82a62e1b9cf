"""
Credential selectors and resolution.

A selector names where credentials come from; resolution turns it into the
``Credentials`` a transport builder consumes. Cookie files are read with one
of two strategies:

- ``USER_PASS``: first line split at the first colon into user and password.
- ``TOKEN``: whole file, trimmed, passed to the transport as an opaque token.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from loguru import logger

from bitcoind_client.errors import InvalidCookieFileError, MissingAuthenticationError


class CookieStrategy(str, Enum):
    """How a cookie file is turned into credentials."""
    USER_PASS = "user_pass"
    TOKEN = "token"


@dataclass(frozen=True)
class Credentials:
    """Resolved credentials handed to a transport builder."""
    username: str | None = None
    password: str | None = None
    cookie: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.username is None and self.password is None and self.cookie is None

    def __repr__(self) -> str:
        user = self.username if self.username is not None else "-"
        secret = "***" if (self.password is not None or self.cookie is not None) else "-"
        return f"Credentials(username={user}, secret={secret})"


@dataclass(frozen=True)
class Auth(ABC):
    """Base class for credential selectors."""

    @abstractmethod
    def get_user_pass(self) -> tuple[str | None, str | None]:
        """Resolve to the (username, password) pair used for basic authentication."""

    def resolve(self, strategy: CookieStrategy = CookieStrategy.USER_PASS) -> Credentials:
        user, password = self.get_user_pass()
        if user is None and password is None:
            return Credentials()
        return Credentials(username=user, password=password)


@dataclass(frozen=True)
class NoAuth(Auth):
    """No credentials."""

    def get_user_pass(self) -> tuple[str | None, str | None]:
        return None, None


@dataclass(frozen=True)
class UserPass(Auth):
    """Explicit RPC username and password."""
    username: str
    password: str

    def get_user_pass(self) -> tuple[str | None, str | None]:
        return self.username, self.password

    def __repr__(self) -> str:
        return f"UserPass(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class CookieFile(Auth):
    """Path to the cookie file written by the node at startup."""
    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path).expanduser())

    def get_user_pass(self) -> tuple[str | None, str | None]:
        user, password = read_cookie_user_pass(self.path)
        return user, password

    def resolve(self, strategy: CookieStrategy = CookieStrategy.USER_PASS) -> Credentials:
        if strategy == CookieStrategy.TOKEN:
            return Credentials(cookie=read_cookie_token(self.path))
        return super().resolve(strategy)


def _read_cookie_text(path: Path) -> str:
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError as exc:
        raise InvalidCookieFileError(str(path), "file not found") from exc
    except UnicodeDecodeError as exc:
        raise InvalidCookieFileError(str(path), "file is not valid utf-8") from exc
    except OSError as exc:
        raise InvalidCookieFileError(str(path), f"unreadable: {exc.strerror or exc}") from exc


def read_cookie_user_pass(path: Path) -> tuple[str, str]:
    """Split the first line of a cookie file into (user, password)."""
    text = _read_cookie_text(path)
    if not text:
        raise InvalidCookieFileError(str(path), "file is empty")
    line = text.split("\n", 1)[0].removesuffix("\r")
    user, sep, password = line.partition(":")
    if not sep:
        raise InvalidCookieFileError(str(path), "missing ':' separator")
    return user, password


def read_cookie_token(path: Path) -> str:
    """Return the whole cookie file, trimmed, as an opaque token."""
    token = _read_cookie_text(path).strip()
    if not token:
        raise InvalidCookieFileError(str(path), "file is empty")
    return token


def resolve_credentials(
    auth: Auth,
    *,
    strategy: CookieStrategy = CookieStrategy.USER_PASS,
    require_auth: bool = True,
) -> Credentials:
    """
    Resolve a selector into credentials.

    ``require_auth`` is the deployment policy: when set, a selector that
    resolves to no credentials raises ``MissingAuthenticationError``.
    """
    strategy = CookieStrategy(strategy)
    creds = auth.resolve(strategy)
    if creds.is_empty and require_auth:
        raise MissingAuthenticationError()
    logger.debug(f"Resolved RPC credentials via {type(auth).__name__} (strategy={strategy.value})")
    return creds
