"""Relay: inbound events from one network -> rendered sends on the other."""

from __future__ import annotations

from collections.abc import Collection, Iterable

from loguru import logger

from discord_irc.adapters.base import DiscordTransport, IRCTransport
from discord_irc.errors import TransportError, UnresolvedReferenceError
from discord_irc.events import (
    DiscordMessage,
    IRCAction,
    IRCInvite,
    IRCMessage,
    IRCNotice,
    OutboundMessage,
)
from discord_irc.formatting.discord_to_irc import NameResolver, discord_to_irc
from discord_irc.formatting.irc_to_discord import irc_to_discord
from discord_irc.gateway.router import ChannelRouter

_INBOUND = (DiscordMessage, IRCMessage, IRCNotice, IRCAction, IRCInvite)


class Relay:
    """Routes inbound events through the channel mapping and formatting pipeline.

    Holds no state beyond the router and the two config sets, all read-only.
    Transports are injected; sends are fire-and-forget.
    """

    def __init__(
        self,
        router: ChannelRouter,
        irc: IRCTransport,
        discord: DiscordTransport,
        *,
        command_characters: Iterable[str] = (),
        bridge_bot_names: Collection[str] = frozenset(),
    ) -> None:
        self._router = router
        self._irc = irc
        self._discord = discord
        self._command_characters = frozenset(command_characters)
        self._bridge_bot_names = frozenset(n.lower() for n in bridge_bot_names)

    def accept_event(self, source: str, evt: object) -> bool:
        return isinstance(evt, _INBOUND)

    def push_event(self, source: str, evt: object) -> None:
        match evt:
            case DiscordMessage():
                self.send_to_irc(evt)
            case IRCMessage(author=author, channel=channel, text=text):
                self.send_to_discord(author, channel, text)
            case IRCNotice(author=author, channel=channel, text=text):
                self.send_to_discord(author, channel, f"*{text}*")
            case IRCAction(author=author, channel=channel, text=text):
                self.send_to_discord(author, channel, f"_{text}_")
            case IRCInvite(channel=channel, from_user=from_user):
                self.handle_invite(channel, from_user)
            case _:
                logger.debug("Relay: ignoring {} from {}", type(evt).__name__, source)

    def is_command(self, text: str) -> bool:
        """Whether text starts with a configured command character."""
        return bool(text) and text[0] in self._command_characters

    def send_to_irc(self, msg: DiscordMessage) -> None:
        """Relay a Discord message to its mapped IRC channel."""
        if msg.author_id == self._discord.user_id:
            return

        irc_channel = self._router.get_irc_channel(msg.channel)
        logger.debug("Channel mapping {} -> {}", msg.channel, irc_channel)
        if not irc_channel:
            return

        try:
            text = discord_to_irc(msg.content, msg.mentions.get, self._channel_name(msg))
        except UnresolvedReferenceError as exc:
            logger.warning(
                "Dropping message from {} in {}: {}", msg.author, msg.channel, exc
            )
            return

        if self.is_command(text):
            self._deliver(OutboundMessage("irc", irc_channel, f"Command sent from Discord by {msg.author}:"))
            self._deliver(OutboundMessage("irc", irc_channel, text))
        else:
            self._deliver(OutboundMessage("irc", irc_channel, f"<{msg.author}> {text}"))

    def send_to_discord(self, author: str, channel: str, text: str) -> None:
        """Relay an IRC line to its mapped Discord channel."""
        discord_channel = self._router.get_discord_channel(channel)
        if not discord_channel:
            logger.debug("Relay: no mapping for IRC channel {}", channel)
            return

        if not self._discord.has_channel(discord_channel):
            logger.info("Tried to send a message to a channel the bot isn't in: {}", discord_channel)
            return

        rendered = irc_to_discord(author, text, self._bridge_bot_names)
        self._deliver(OutboundMessage("discord", discord_channel, rendered))

    def handle_invite(self, channel: str, from_user: str) -> None:
        """Join an IRC channel we were invited to, if it is bridged."""
        logger.debug("Received invite to {} from {}", channel, from_user)
        if not self._router.get_discord_channel(channel):
            logger.debug("Channel not found in config, not joining: {}", channel)
            return
        logger.debug("Joining channel: {}", channel)
        self._irc.join(channel)

    def _channel_name(self, msg: DiscordMessage) -> NameResolver:
        def resolve(channel_id: str) -> str | None:
            return msg.channel_mentions.get(channel_id) or self._discord.channel_name(channel_id)

        return resolve

    def _deliver(self, out: OutboundMessage) -> None:
        transport = self._irc if out.target == "irc" else self._discord
        logger.debug("Sending message to {} {}: {}", out.target, out.channel, out.text)
        try:
            transport.send(out.channel, out.text)
        except TransportError as exc:
            logger.error("Send to {} {} failed: {}", out.target, out.channel, exc)
