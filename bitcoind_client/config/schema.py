"""Configuration schema using Pydantic.

Values come from ``~/.bitcoind_client/config.json`` (see ``loader``) or from
``BITCOIND_*`` environment variables.
"""

from pathlib import Path

from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings

from bitcoind_client.auth import Auth, CookieFile, CookieStrategy, NoAuth, UserPass
from bitcoind_client.transport import DEFAULT_TIMEOUT
from bitcoind_client.versions import DEFAULT_PROTOCOL_VERSION, ProtocolVersion


class ClientConfig(BaseSettings):
    """Connection settings for one bitcoind node."""
    url: str = "http://127.0.0.1:8332"
    rpc_user: str = ""
    rpc_password: str = ""
    cookie_file: str = ""  # Takes precedence over rpc_user/rpc_password
    cookie_strategy: CookieStrategy = CookieStrategy.TOKEN
    protocol_version: ProtocolVersion = DEFAULT_PROTOCOL_VERSION
    timeout: float = DEFAULT_TIMEOUT  # Seconds per request
    require_auth: bool = True  # Reject a config with no credentials

    @field_validator("protocol_version", mode="before")
    @classmethod
    def _parse_protocol_version(cls, value):
        return ProtocolVersion.parse(value)

    def to_auth(self) -> Auth:
        """Credential selector described by this config."""
        if self.cookie_file:
            return CookieFile(Path(self.cookie_file))
        if self.rpc_user or self.rpc_password:
            return UserPass(self.rpc_user, self.rpc_password)
        return NoAuth()

    model_config = ConfigDict(
        env_prefix="BITCOIND_",
        extra="ignore",
    )
