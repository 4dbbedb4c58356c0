"""IRC adapter: pydle client publishing inbound events, throttled outbound queue."""

from __future__ import annotations

import asyncio
import contextlib

import pydle
from loguru import logger
from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt, wait_exponential_jitter

from discord_irc.adapters.base import AdapterBase
from discord_irc.adapters.irc_throttle import TokenBucket
from discord_irc.config import Config
from discord_irc.errors import TransportError
from discord_irc.events import irc_action, irc_invite, irc_message, irc_notice
from discord_irc.formatting.irc_message_split import split_irc_message
from discord_irc.gateway.bus import Bus
from discord_irc.gateway.router import ChannelRouter

# Backoff: min 2s, max 60s, jitter
_BACKOFF_MIN = 2
_BACKOFF_MAX = 60
_MAX_ATTEMPTS = 10


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    wait = state.next_action.sleep if state.next_action else 0
    logger.warning(
        "IRC connect failed (attempt {}): {}, retrying in {:.1f}s",
        state.attempt_number,
        exc,
        wait,
    )


async def _connect_with_backoff(
    client: pydle.Client,
    hostname: str,
    port: int,
    *,
    tls: bool,
    tls_verify: bool,
    password: str | None,
) -> None:
    """Connect with exponential backoff and jitter. pydle reconnects on its own afterwards."""
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(_MAX_ATTEMPTS),
            wait=wait_exponential_jitter(multiplier=_BACKOFF_MIN, max=_BACKOFF_MAX),
            before_sleep=_log_retry,
            reraise=True,
        ):
            with attempt:
                await client.connect(
                    hostname=hostname,
                    port=port,
                    tls=tls,
                    tls_verify=tls_verify,
                    password=password,
                )
    except Exception:
        logger.exception("IRC connect failed after {} attempts", _MAX_ATTEMPTS)
        raise


def _split_channel_key(entry: str) -> tuple[str, str | None]:
    """'#chan key' -> ('#chan', 'key')."""
    channel, _, key = entry.partition(" ")
    return channel, key or None


class IRCClient(pydle.Client):
    """Pydle IRC client that turns channel traffic into bus events."""

    def __init__(
        self,
        bus: Bus,
        nick: str,
        channels: list[str],
        auto_send_commands: list[list[str]] | None = None,
        throttle: TokenBucket | None = None,
        **kwargs,
    ):
        super().__init__(nick, realname=nick, username=nick, **kwargs)
        self._bus = bus
        self._channels = channels
        self._auto_send_commands = auto_send_commands or []
        self._throttle = throttle or TokenBucket(limit=2, rate=2.0)
        self._outbound: asyncio.Queue[tuple[str, str]] = asyncio.Queue()
        self._consumer_task: asyncio.Task | None = None

    async def on_connect(self):
        """After registration: send configured commands, join channels, start consumer."""
        await super().on_connect()
        logger.info("IRC registered as {}", self.nickname)
        for command in self._auto_send_commands:
            logger.debug("IRC auto-send: {}", command)
            await self.rawmsg(*command)
        for entry in self._channels:
            channel, key = _split_channel_key(entry)
            await self.join(channel, password=key)
        if not self._consumer_task or self._consumer_task.done():
            self._consumer_task = asyncio.create_task(self._consume_outbound())

    async def on_disconnect(self, expected: bool) -> None:
        await super().on_disconnect(expected)
        if not expected:
            logger.error("Received error event from IRC: unexpected disconnect")

    async def on_channel_message(self, target, by, message):
        await super().on_channel_message(target, by, message)
        _, evt = irc_message(by, target, message)
        self._bus.publish("irc", evt)

    async def on_channel_notice(self, target, by, message):
        await super().on_channel_notice(target, by, message)
        _, evt = irc_notice(by, target, message)
        self._bus.publish("irc", evt)

    async def on_ctcp_action(self, by, target, contents):
        """Handle /me action."""
        await super().on_ctcp_action(by, target, contents)
        if not self.is_channel(target):
            return
        _, evt = irc_action(by, target, contents)
        self._bus.publish("irc", evt)

    async def on_invite(self, channel, by):
        await super().on_invite(channel, by)
        _, evt = irc_invite(channel, by)
        self._bus.publish("irc", evt)

    def queue_message(self, channel: str, text: str) -> None:
        """Queue one outbound line."""
        self._outbound.put_nowait((channel, text))

    async def _consume_outbound(self):
        """Consume outbound queue, one PRIVMSG per chunk, gated by the token bucket."""
        while True:
            try:
                channel, text = await self._outbound.get()
                for chunk in split_irc_message(text):
                    await self._throttle.take()
                    await self.message(channel, chunk)
            except asyncio.CancelledError:
                break
            except Exception as exc:
                logger.exception("IRC send failed: {}", exc)

    async def disconnect(self, expected=True):
        """Disconnect and cleanup."""
        if self._consumer_task:
            self._consumer_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer_task
            self._consumer_task = None
        if self.connected:
            await super().disconnect(expected)


class IRCAdapter(AdapterBase):
    """IRC side of the bridge. Implements IRCTransport for the relay."""

    def __init__(self, bus: Bus, router: ChannelRouter, config: Config):
        self._bus = bus
        self._router = router
        self._config = config
        self._client: IRCClient | None = None
        self._task: asyncio.Task | None = None
        self._join_tasks: set[asyncio.Task] = set()

    @property
    def name(self) -> str:
        return "irc"

    def send(self, channel: str, text: str) -> None:
        if not self._client:
            raise TransportError("IRC client not started", code="not_started", details={"channel": channel})
        self._client.queue_message(channel, text)

    def join(self, channel: str) -> None:
        if not self._client:
            raise TransportError("IRC client not started", code="not_started", details={"channel": channel})
        task = asyncio.create_task(self._client.join(channel))
        self._join_tasks.add(task)
        task.add_done_callback(self._join_tasks.discard)

    async def start(self) -> None:
        """Create the client and connect in the background."""
        cfg = self._config
        channels = self._router.irc_join_list()
        self._client = IRCClient(
            bus=self._bus,
            nick=cfg.nickname,
            channels=channels,
            auto_send_commands=cfg.auto_send_commands,
            throttle=TokenBucket(limit=cfg.irc_throttle_limit, rate=cfg.irc_throttle_rate),
        )
        self._task = asyncio.create_task(
            _connect_with_backoff(
                self._client,
                cfg.server,
                cfg.irc_port,
                tls=cfg.irc_tls,
                tls_verify=cfg.irc_tls_verify,
                password=cfg.irc_password or None,
            )
        )
        logger.info("IRC connection started: {}:{}, channels {}", cfg.server, cfg.irc_port, channels)

    async def stop(self) -> None:
        """Stop IRC connection."""
        if self._client:
            await self._client.disconnect()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception as exc:
                logger.debug("IRC connection task ended with: {}", exc)
        self._client = None
        self._task = None
