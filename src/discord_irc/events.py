"""Event types and dispatcher.

Inbound events form a closed union (``InboundEvent``) that the relay matches
on exhaustively. Events are created per message and discarded after relay.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, Union

Target = Literal["discord", "irc"]


@dataclass(frozen=True)
class DiscordMessage:
    """Message posted in a Discord channel."""

    channel: str  # "#name"
    author_id: str
    author: str
    content: str
    mentions: dict[str, str] = field(default_factory=dict)  # user id -> name
    channel_mentions: dict[str, str] = field(default_factory=dict)  # channel id -> name


@dataclass(frozen=True)
class IRCMessage:
    """PRIVMSG to an IRC channel."""

    author: str
    channel: str
    text: str


@dataclass(frozen=True)
class IRCNotice:
    """NOTICE to an IRC channel."""

    author: str
    channel: str
    text: str


@dataclass(frozen=True)
class IRCAction:
    """CTCP ACTION (/me) in an IRC channel."""

    author: str
    channel: str
    text: str


@dataclass(frozen=True)
class IRCInvite:
    """INVITE of the bridge nick to an IRC channel."""

    channel: str
    from_user: str


InboundEvent = Union[DiscordMessage, IRCMessage, IRCNotice, IRCAction, IRCInvite]


@dataclass(frozen=True)
class OutboundMessage:
    """Rendered line handed to a transport."""

    target: Target
    channel: str
    text: str


class EventTarget(Protocol):
    """Bus target interface: accept_event + push_event."""

    def accept_event(self, source: str, evt: object) -> bool:
        """Return True if this target wants the event."""
        ...

    def push_event(self, source: str, evt: object) -> None:
        """Handle the event."""
        ...


def event(type_name: str):
    """Decorator to mark a factory as producing an event with a given type."""

    def decorator(f: Any) -> Any:
        @functools.wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> tuple[str, object]:
            evt = f(*args, **kwargs)
            return (type_name, evt)

        wrapper.TYPE = type_name
        return wrapper

    return decorator


@event("discord_message")
def discord_message(
    channel: str,
    author_id: str,
    author: str,
    content: str,
    *,
    mentions: dict[str, str] | None = None,
    channel_mentions: dict[str, str] | None = None,
) -> DiscordMessage:
    return DiscordMessage(
        channel=channel,
        author_id=author_id,
        author=author,
        content=content,
        mentions=mentions or {},
        channel_mentions=channel_mentions or {},
    )


@event("irc_message")
def irc_message(author: str, channel: str, text: str) -> IRCMessage:
    return IRCMessage(author=author, channel=channel, text=text)


@event("irc_notice")
def irc_notice(author: str, channel: str, text: str) -> IRCNotice:
    return IRCNotice(author=author, channel=channel, text=text)


@event("irc_action")
def irc_action(author: str, channel: str, text: str) -> IRCAction:
    return IRCAction(author=author, channel=channel, text=text)


@event("irc_invite")
def irc_invite(channel: str, from_user: str) -> IRCInvite:
    return IRCInvite(channel=channel, from_user=from_user)


class Dispatcher:
    """Central event dispatcher; targets filter by type and receive events."""

    def __init__(self) -> None:
        self._targets: list[EventTarget] = []

    def register(self, target: EventTarget) -> None:
        """Register an event target."""
        self._targets.append(target)

    def unregister(self, target: EventTarget) -> None:
        """Unregister an event target."""
        if target in self._targets:
            self._targets.remove(target)

    def dispatch(self, source: str, evt: object) -> None:
        """Dispatch event to all targets that accept it."""
        from loguru import logger

        for target in self._targets:
            try:
                if target.accept_event(source, evt):
                    target.push_event(source, evt)
            except Exception as exc:
                logger.exception("Failed to pass event to target {}: {}", target, exc)
