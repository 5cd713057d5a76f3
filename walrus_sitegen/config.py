"""Application configuration read from a YAML file and the environment."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_NAME = "config"
_CONFIG_EXTENSIONS = (".yaml", ".yml")


class ConfigError(Exception):
    """The configuration could not be read or decoded."""


def _setting(key: str | None = None) -> Any:
    """Declare a setting; without a key, the upper-cased field name is used."""
    return field(default="", metadata={"key": key})


@dataclass(frozen=True)
class Config:
    """All settings of the server; each field maps to one upper-case key."""

    server_address: str = _setting()

    neo4j_uri: str = _setting()
    neo4j_user: str = _setting()
    neo4j_password: str = _setting()

    openai_key: str = _setting("OPENAI_API_KEY")
    embedding_model_id: str = _setting()

    site_builder_path: str = _setting()
    walrus_cli_path: str = _setting()

    seal_api_key: str = _setting()
    seal_endpoint: str = _setting()

    sui_rpc: str = _setting("SUI_RPC_ENDPOINT")
    sui_network: str = _setting()
    site_deployed_event_type: str = _setting("SUI_SITE_DEPLOYED_EVENT_TYPE")

    suins_contract_address: str = _setting()
    suins_nft_type: str = _setting()


def _setting_key(setting: Any) -> str:
    return setting.metadata["key"] or setting.name.upper()


def _find_config_file(directory: Path) -> Path | None:
    for extension in _CONFIG_EXTENSIONS:
        candidate = directory / (CONFIG_NAME + extension)
        if candidate.is_file():
            return candidate
    return None


def _read_config_file(file_path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"error reading config file: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"error reading config file: top level is a {type(data).__name__}, not a mapping"
        )
    return {str(key).lower(): value for key, value in data.items()}


def _as_string(key: str, value: Any) -> str:
    """Decode a scalar setting into a string, accepting numbers and booleans."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value == int(value) and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    raise ConfigError(
        f"unable to decode config into struct: '{key}' expected a string, "
        f"got {type(value).__name__}"
    )


def load_config(path: str | os.PathLike[str] = ".") -> Config:
    """Read ``config.yaml`` from ``path`` and overlay non-empty environment variables."""
    file_path = _find_config_file(Path(path))
    if file_path is None:
        logger.info(
            "Config file ('config.yaml') not found in specified path, "
            "relying solely on environment variables."
        )
        file_values: dict[str, Any] = {}
    else:
        file_values = _read_config_file(file_path)
        logger.info("Using configuration file: %s", file_path)

    settings: dict[str, str] = {}
    for setting in fields(Config):
        key = _setting_key(setting)
        from_env = os.environ.get(key)
        raw = from_env if from_env else file_values.get(key.lower())
        settings[setting.name] = _as_string(key, raw)

    config = Config(**settings)
    if not config.sui_rpc:
        logger.warning("SUI_RPC_ENDPOINT is not set.")
    return config