"""Configuration: YAML + env overlay, validated before any connection is made."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from discord_irc.errors import ConfigurationError

REQUIRED_FIELDS = ("server", "nickname", "channel_mapping", "irc_password", "discord_token")

# Env keys that override credentials from the YAML file
_ENV_OVERRIDES = {
    "DISCORD_TOKEN": "discord_token",
    "IRC_PASSWORD": "irc_password",
}


def load_config(path: str | Path) -> dict[str, Any]:
    """Load config from YAML file. Use SafeLoader. Returns raw dict."""
    path = Path(path)
    if not path.exists():
        logger.warning("Config file not found: {}", path)
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse config {}: {}", path, exc)
        raise ConfigurationError(
            f"Invalid YAML in {path}",
            code="invalid_yaml",
            original_error=exc,
        ) from exc
    if not isinstance(data, dict):
        logger.warning("Config file {} has invalid structure (expected dict)", path)
        return {}
    return data


def load_config_with_env(path: str | Path) -> dict[str, Any]:
    """Load config from YAML and overlay credentials from the environment.

    Loads .env via python-dotenv when present.
    """
    from dotenv import load_dotenv

    load_dotenv()
    data = load_config(path)
    for env_key, field in _ENV_OVERRIDES.items():
        value = os.environ.get(env_key)
        if value:
            data[field] = value
    return data


class Config:
    """Config accessor with attribute-style access for known keys."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}

    def validate(self) -> None:
        """Validate config shape; raise ConfigurationError on the first problem."""
        for field in REQUIRED_FIELDS:
            if not self._data.get(field):
                raise ConfigurationError(
                    f"Missing configuration field {field}",
                    code="missing_field",
                    details={"field": field},
                )

        mapping = self._data["channel_mapping"]
        if not isinstance(mapping, dict):
            raise ConfigurationError(
                "channel_mapping must be a mapping of Discord channel to IRC channel",
                code="invalid_channel_mapping",
                details={"type": type(mapping).__name__},
            )

        chars = self._data.get("command_characters")
        if chars is not None:
            if not isinstance(chars, list):
                raise ConfigurationError(
                    "command_characters must be a list",
                    code="invalid_command_characters",
                    details={"type": type(chars).__name__},
                )
            for i, char in enumerate(chars):
                if not isinstance(char, str) or len(char) != 1:
                    raise ConfigurationError(
                        f"command_characters[{i}] must be a single character",
                        code="invalid_command_character",
                        details={"index": i, "value": char},
                    )

        commands = self._data.get("auto_send_commands")
        if commands is not None:
            if not isinstance(commands, list):
                raise ConfigurationError(
                    "auto_send_commands must be a list",
                    code="invalid_auto_send_commands",
                    details={"type": type(commands).__name__},
                )
            for i, command in enumerate(commands):
                if not isinstance(command, list) or not command:
                    raise ConfigurationError(
                        f"auto_send_commands[{i}] must be a non-empty list of arguments",
                        code="invalid_auto_send_command",
                        details={"index": i},
                    )

        names = self._data.get("irc_bridge_bot_names")
        if names is not None and not isinstance(names, list):
            raise ConfigurationError(
                "irc_bridge_bot_names must be a list",
                code="invalid_bridge_bot_names",
                details={"type": type(names).__name__},
            )

        logger.debug("Config validated: {} channel mappings", len(mapping))

    @property
    def raw(self) -> dict[str, Any]:
        """Raw config dict."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Get value by dot-separated path (e.g. 'irc_options.port')."""
        parts = key.split(".")
        obj: Any = self._data
        for part in parts:
            if isinstance(obj, dict) and part in obj:
                obj = obj[part]
            else:
                return default
        return obj

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    @property
    def server(self) -> str:
        return str(self._data.get("server", ""))

    @property
    def nickname(self) -> str:
        return str(self._data.get("nickname", ""))

    @property
    def channel_mapping(self) -> dict[str, str]:
        """Discord channel -> IRC channel (value may carry a channel key)."""
        m = self._data.get("channel_mapping")
        return dict(m) if isinstance(m, dict) else {}

    @property
    def irc_password(self) -> str:
        return str(self._data.get("irc_password", ""))

    @property
    def discord_token(self) -> str:
        return str(self._data.get("discord_token", ""))

    @property
    def command_characters(self) -> tuple[str, ...]:
        val = self._data.get("command_characters")
        if isinstance(val, list):
            return tuple(str(c) for c in val)
        return ()

    @property
    def irc_bridge_bot_names(self) -> frozenset[str]:
        """Names of upstream relay bots, lowercased."""
        val = self._data.get("irc_bridge_bot_names")
        if isinstance(val, list):
            return frozenset(str(n).lower() for n in val)
        return frozenset()

    @property
    def auto_send_commands(self) -> list[list[str]]:
        val = self._data.get("auto_send_commands")
        if isinstance(val, list):
            return [[str(arg) for arg in cmd] for cmd in val if isinstance(cmd, list)]
        return []

    @property
    def irc_port(self) -> int:
        return int(self.get("irc_options.port", 6667))

    @property
    def irc_tls(self) -> bool:
        return bool(self.get("irc_options.tls", False))

    @property
    def irc_tls_verify(self) -> bool:
        return bool(self.get("irc_options.tls_verify", True))

    @property
    def irc_throttle_limit(self) -> int:
        return int(self._data.get("irc_throttle_limit", 2))

    @property
    def irc_throttle_rate(self) -> float:
        return float(self._data.get("irc_throttle_rate", 2.0))

    @property
    def discord_send_delay(self) -> float:
        return float(self._data.get("discord_send_delay", 0.25))
