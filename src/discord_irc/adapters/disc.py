"""Discord adapter: discord.py client, outbound queue with send delay."""

from __future__ import annotations

import asyncio
import contextlib

import discord
from discord import Intents, Message, TextChannel
from loguru import logger

from discord_irc.adapters.base import AdapterBase
from discord_irc.config import Config
from discord_irc.errors import TransportError
from discord_irc.events import discord_message
from discord_irc.gateway.bus import Bus

# Discord message length limit
MAX_MESSAGE_LEN = 2000


def _message_to_event(message: Message) -> tuple[str, object]:
    """Build a DiscordMessage event from a discord.py message."""
    return discord_message(
        channel=f"#{message.channel.name}",
        author_id=str(message.author.id),
        author=message.author.name,
        content=message.content or "",
        mentions={str(user.id): user.name for user in message.mentions},
        channel_mentions={str(ch.id): ch.name for ch in message.channel_mentions},
    )


class DiscordAdapter(AdapterBase):
    """Discord side of the bridge. Implements DiscordTransport for the relay."""

    def __init__(self, bus: Bus, config: Config) -> None:
        self._bus = bus
        self._config = config
        self._queue: asyncio.Queue[tuple[str, str]] = asyncio.Queue()
        self._client: discord.Client | None = None
        self._consumer_task: asyncio.Task | None = None
        self._client_task: asyncio.Task | None = None

    @property
    def name(self) -> str:
        return "discord"

    @property
    def user_id(self) -> str | None:
        if not self._client or not self._client.user:
            return None
        return str(self._client.user.id)

    def _find_channel(self, channel: str) -> TextChannel | None:
        """Text channel by "#name" (or bare name) among visible guild channels."""
        if not self._client:
            return None
        name = channel.lstrip("#")
        found = discord.utils.get(self._client.get_all_channels(), name=name)
        return found if isinstance(found, TextChannel) else None

    def has_channel(self, channel: str) -> bool:
        return self._find_channel(channel) is not None

    def channel_name(self, channel_id: str) -> str | None:
        if not self._client:
            return None
        try:
            found = self._client.get_channel(int(channel_id))
        except ValueError:
            return None
        return getattr(found, "name", None)

    def send(self, channel: str, text: str) -> None:
        """Queue a message for a "#name" channel."""
        if not self._client:
            raise TransportError("Discord client not started", code="not_started", details={"channel": channel})
        self._queue.put_nowait((channel, text))

    async def _deliver(self, channel: str, text: str) -> None:
        target = self._find_channel(channel)
        if not target:
            logger.warning("Discord channel {} not found or not a text channel", channel)
            return
        await target.send(text[:MAX_MESSAGE_LEN])

    async def _queue_consumer(self) -> None:
        """Background consumer: pop from queue, send, wait between sends."""
        delay = self._config.discord_send_delay
        while True:
            try:
                channel, text = await self._queue.get()
                await self._deliver(channel, text)
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                break
            except Exception as exc:
                logger.exception("Discord send failed: {}", exc)

    async def _run_client(self, client: discord.Client) -> None:
        """Run the client until closed; log a fatal error (bad token, gateway failure)."""
        try:
            await client.start(self._config.discord_token)
        except Exception:
            logger.exception("Discord client stopped with an error")
            raise

    async def _on_message(self, message: Message) -> None:
        """Publish a guild text message to the bus."""
        if not isinstance(message.channel, TextChannel):
            return
        if not (message.content or "").strip():
            return
        _, evt = _message_to_event(message)
        self._bus.publish("discord", evt)

    async def start(self) -> None:
        """Start Discord client and queue consumer."""
        intents = Intents.default()
        intents.message_content = True
        intents.guilds = True

        client = discord.Client(intents=intents)

        @client.event
        async def on_ready() -> None:
            logger.info("Connected to Discord as {}", client.user)

        @client.event
        async def on_message(message: Message) -> None:
            await self._on_message(message)

        @client.event
        async def on_error(event_method: str, *args: object, **kwargs: object) -> None:
            logger.exception("Received error event from Discord in {}", event_method)

        self._client = client
        self._consumer_task = asyncio.create_task(self._queue_consumer())
        self._client_task = asyncio.create_task(self._run_client(client))

    async def stop(self) -> None:
        """Stop Discord client and consumer."""
        if self._consumer_task:
            self._consumer_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer_task
        if self._client:
            await self._client.close()
        if self._client_task:
            self._client_task.cancel()
            try:
                await self._client_task
            except asyncio.CancelledError:
                pass
            except Exception as exc:
                logger.debug("Discord client task ended with: {}", exc)
        self._client = None
        self._client_task = None
        self._consumer_task = None
