"""Gateway: event bus, channel router, relay."""

from discord_irc.gateway.bus import Bus
from discord_irc.gateway.relay import Relay
from discord_irc.gateway.router import ChannelRouter

__all__ = ["Bus", "ChannelRouter", "Relay"]
