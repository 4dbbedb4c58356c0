"""Message formatting for cross-protocol bridging."""

from discord_irc.formatting.bridge_bot import reattribute
from discord_irc.formatting.discord_to_irc import discord_to_irc
from discord_irc.formatting.emoji import normalize_emoji
from discord_irc.formatting.irc_message_split import split_irc_message
from discord_irc.formatting.irc_to_discord import irc_to_discord, strip_colors

__all__ = [
    "discord_to_irc",
    "irc_to_discord",
    "normalize_emoji",
    "reattribute",
    "split_irc_message",
    "strip_colors",
]
