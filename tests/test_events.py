"""Test event factories and types."""

import dataclasses

import pytest

from discord_irc.events import (
    DiscordMessage,
    IRCAction,
    IRCInvite,
    IRCMessage,
    IRCNotice,
    OutboundMessage,
    discord_message,
    irc_action,
    irc_invite,
    irc_message,
    irc_notice,
)


class TestFactories:
    @pytest.mark.parametrize(
        "factory,args,cls,type_name",
        [
            (irc_message, ("bob", "#c", "hi"), IRCMessage, "irc_message"),
            (irc_notice, ("bob", "#c", "hi"), IRCNotice, "irc_notice"),
            (irc_action, ("bob", "#c", "hi"), IRCAction, "irc_action"),
            (irc_invite, ("#c", "op"), IRCInvite, "irc_invite"),
        ],
    )
    def test_irc_factories(self, factory, args, cls, type_name):
        name, evt = factory(*args)
        assert name == type_name == factory.TYPE
        assert isinstance(evt, cls)

    def test_discord_message_defaults(self):
        name, evt = discord_message("#general", "7", "alice", "hi")
        assert name == "discord_message"
        assert isinstance(evt, DiscordMessage)
        assert evt.mentions == {}
        assert evt.channel_mentions == {}

    def test_discord_message_mentions(self):
        _, evt = discord_message("#general", "7", "alice", "<@1>", mentions={"1": "bob"})
        assert evt.mentions == {"1": "bob"}


class TestImmutability:
    def test_inbound_events_frozen(self):
        _, evt = irc_message("bob", "#c", "hi")
        with pytest.raises(dataclasses.FrozenInstanceError):
            evt.text = "changed"

    def test_outbound_message(self):
        out = OutboundMessage("irc", "#c", "hi")
        assert (out.target, out.channel, out.text) == ("irc", "#c", "hi")
        with pytest.raises(dataclasses.FrozenInstanceError):
            out.text = "changed"
