"""Adapter interfaces: lifecycle base class and the transport capabilities the relay uses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol


class AdapterBase(ABC):
    """Interface for protocol adapters. Publish inbound events to the bus, start/stop."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Adapter identifier ('discord' or 'irc')."""
        ...

    @abstractmethod
    async def start(self) -> None:
        """Start the adapter (connect, register handlers)."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Stop the adapter (disconnect, cleanup)."""
        ...


class IRCTransport(Protocol):
    """What the relay may ask of the IRC side."""

    def send(self, channel: str, text: str) -> None:
        """Queue one line for a channel. Raises TransportError if it cannot be queued."""
        ...

    def join(self, channel: str) -> None:
        """Request a JOIN."""
        ...


class DiscordTransport(Protocol):
    """What the relay may ask of the Discord side."""

    @property
    def user_id(self) -> str | None:
        """Id of the bridge's own Discord user, None before login."""
        ...

    def send(self, channel: str, text: str) -> None:
        """Queue a message for a "#name" channel. Raises TransportError if it cannot be queued."""
        ...

    def has_channel(self, channel: str) -> bool:
        """Whether the client can currently see the "#name" text channel."""
        ...

    def channel_name(self, channel_id: str) -> str | None:
        """Name (without '#') of a channel by id, None if unknown."""
        ...
