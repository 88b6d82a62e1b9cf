"""Configuration module for bitcoind_client."""

from bitcoind_client.config.loader import load_config, get_config_path, save_config
from bitcoind_client.config.schema import ClientConfig

__all__ = ["ClientConfig", "load_config", "get_config_path", "save_config"]
