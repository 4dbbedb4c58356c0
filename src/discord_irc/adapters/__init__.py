"""Protocol adapters. Each implements base.AdapterBase and one transport protocol."""

from discord_irc.adapters.base import AdapterBase, DiscordTransport, IRCTransport

__all__ = ["AdapterBase", "DiscordTransport", "IRCTransport"]
