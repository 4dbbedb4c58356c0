"""Channel router: Discord channel <-> IRC channel mapping."""

from __future__ import annotations

from collections.abc import Mapping

from loguru import logger

from discord_irc.errors import ConfigurationError


def _normalize_irc_channel(value: str) -> str:
    """Drop a trailing channel key ("#chan key") and lowercase."""
    return value.split(" ")[0].lower()


class ChannelRouter:
    """Bidirectional channel mapping. Read-only once built."""

    def __init__(self, mapping: dict[str, str], join_list: list[str]) -> None:
        self._mapping = mapping
        self._inverted = {irc: discord for discord, irc in mapping.items()}
        self._join_list = join_list

    @classmethod
    def from_config(cls, raw: Mapping[str, str]) -> ChannelRouter:
        """Build from the ``channel_mapping`` table; fail on the first bad entry.

        Keys are Discord channels ("#general"), values IRC channels with an
        optional key ("#general secret").
        """
        mapping: dict[str, str] = {}
        join_list: list[str] = []
        for discord_channel, irc_value in raw.items():
            if not isinstance(discord_channel, str) or not discord_channel.strip():
                raise ConfigurationError(
                    f"Invalid Discord channel in channel_mapping: {discord_channel!r}",
                    code="invalid_discord_channel",
                    details={"key": discord_channel},
                )
            if not isinstance(irc_value, str):
                raise ConfigurationError(
                    f"channel_mapping[{discord_channel}] must be a string",
                    code="invalid_irc_channel",
                    details={"key": discord_channel},
                )
            irc_channel = _normalize_irc_channel(irc_value.strip())
            if not irc_channel:
                raise ConfigurationError(
                    f"channel_mapping[{discord_channel}] has an empty IRC channel",
                    code="empty_irc_channel",
                    details={"key": discord_channel},
                )
            key = discord_channel.strip().lower()
            if key in mapping:
                raise ConfigurationError(
                    f"Discord channel {key} is mapped more than once",
                    code="duplicate_discord_channel",
                    details={"key": discord_channel},
                )
            if irc_channel in mapping.values():
                other = next(k for k, v in mapping.items() if v == irc_channel)
                raise ConfigurationError(
                    f"IRC channel {irc_channel} is mapped from both {other} and {key}",
                    code="ambiguous_irc_channel",
                    details={"key": discord_channel, "irc_channel": irc_channel, "other": other},
                )
            mapping[key] = irc_channel
            join_list.append(irc_value.strip())

        logger.info("Router: loaded {} channel mappings", len(mapping))
        return cls(mapping, join_list)

    def get_irc_channel(self, discord_channel: str) -> str | None:
        """IRC channel for a Discord channel name, or None if not bridged."""
        return self._mapping.get(discord_channel.lower())

    def get_discord_channel(self, irc_channel: str) -> str | None:
        """Discord channel for an IRC channel, or None if not bridged."""
        return self._inverted.get(irc_channel.lower())

    def irc_join_list(self) -> list[str]:
        """IRC channels to join, with channel keys where configured."""
        return list(self._join_list)

    def all_mappings(self) -> dict[str, str]:
        """Return a copy of the normalized Discord -> IRC mapping."""
        return dict(self._mapping)
