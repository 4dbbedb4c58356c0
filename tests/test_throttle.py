"""Test IRC flood protection token bucket."""

from unittest.mock import AsyncMock, patch

import pytest

from discord_irc.adapters.irc_throttle import TokenBucket


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestTokenBucket:
    def test_starts_full(self):
        bucket = TokenBucket(limit=3, rate=1.0)
        assert bucket.delay() == 0.0

    def test_rejects_bad_arguments(self):
        with pytest.raises(ValueError):
            TokenBucket(limit=0)
        with pytest.raises(ValueError):
            TokenBucket(limit=1, rate=0)

    @pytest.mark.asyncio
    async def test_take_consumes_without_waiting_while_tokens_left(self):
        bucket = TokenBucket(limit=2, rate=1.0, clock=FakeClock())
        with patch("discord_irc.adapters.irc_throttle.asyncio.sleep", new=AsyncMock()) as sleep:
            await bucket.take()
            await bucket.take()
        sleep.assert_not_awaited()
        assert bucket.tokens == 0.0

    @pytest.mark.asyncio
    async def test_take_waits_when_empty(self):
        clock = FakeClock(100.0)
        bucket = TokenBucket(limit=1, rate=2.0, clock=clock)
        await bucket.take()
        assert bucket.delay() == pytest.approx(0.5)

        async def fake_sleep(seconds):
            clock.now += seconds

        with patch("discord_irc.adapters.irc_throttle.asyncio.sleep", new=AsyncMock(side_effect=fake_sleep)) as sleep:
            await bucket.take()
        sleep.assert_awaited_once_with(pytest.approx(0.5))
        assert bucket.tokens == pytest.approx(0.0)

    def test_refill_caps_at_limit(self):
        clock = FakeClock()
        bucket = TokenBucket(limit=2, rate=10.0, clock=clock)
        clock.now = 100.0
        assert bucket.tokens == 2.0

    def test_partial_refill(self):
        clock = FakeClock()
        bucket = TokenBucket(limit=4, rate=1.0, clock=clock)
        bucket._tokens = 0.0
        clock.now = 1.5
        assert bucket.tokens == pytest.approx(1.5)
