"""Load and save ``ClientConfig`` as a camelCase JSON file."""

import json
import re
from pathlib import Path
from typing import Any, Callable

from bitcoind_client.config.schema import ClientConfig

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def get_config_path() -> Path:
    """Default location of the client config file."""
    return Path.home() / ".bitcoind_client" / "config.json"


def load_config(config_path: Path | None = None) -> ClientConfig:
    """
    Load client settings.

    Keys in the file may be camelCase (``rpcUser``) or snake_case. Values the
    file leaves out come from ``BITCOIND_*`` environment variables, then from
    the schema defaults. A missing file is not an error.

    Raises:
        ValueError: the file is not a JSON object or fails validation.
    """
    path = config_path or get_config_path()
    if not path.exists():
        return ClientConfig()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object at the top level")
        return ClientConfig(**convert_keys(data))
    except (json.JSONDecodeError, ValueError) as e:
        raise ValueError(f"Failed to load config from {path}: {e}") from e


def save_config(config: ClientConfig, config_path: Path | None = None) -> None:
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = convert_to_camel(config.model_dump(mode="json"))
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def _rename_keys(data: Any, rename: Callable[[str], str]) -> Any:
    if isinstance(data, dict):
        return {rename(key): _rename_keys(value, rename) for key, value in data.items()}
    if isinstance(data, list):
        return [_rename_keys(item, rename) for item in data]
    return data


def convert_keys(data: Any) -> Any:
    """camelCase keys -> snake_case, recursively."""
    return _rename_keys(data, camel_to_snake)


def convert_to_camel(data: Any) -> Any:
    """snake_case keys -> camelCase, recursively."""
    return _rename_keys(data, snake_to_camel)


def camel_to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)
