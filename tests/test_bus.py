"""Test event bus and dispatcher."""

import asyncio

import pytest

from discord_irc.events import Dispatcher, irc_message
from discord_irc.gateway.bus import Bus
from tests.mocks import RecordingTarget


class MockTarget:
    """Mock event target for testing."""

    def __init__(self, accept_filter=None):
        self.received_events = []
        self.accept_filter = accept_filter or (lambda s, e: True)

    def accept_event(self, source: str, evt: object) -> bool:
        return self.accept_filter(source, evt)

    def push_event(self, source: str, evt: object) -> None:
        self.received_events.append((source, evt))


class TestDispatcher:
    """Test event dispatcher."""

    def test_register_target(self):
        dispatcher = Dispatcher()
        target = MockTarget()
        dispatcher.register(target)
        assert target in dispatcher._targets

    def test_unregister_nonexistent_target_is_safe(self):
        dispatcher = Dispatcher()
        dispatcher.unregister(MockTarget())  # never registered, should not raise

    def test_dispatch_respects_accept(self):
        dispatcher = Dispatcher()
        accepting = MockTarget()
        rejecting = MockTarget(lambda s, e: False)
        dispatcher.register(accepting)
        dispatcher.register(rejecting)
        _, evt = irc_message("bob", "#c", "hi")
        dispatcher.dispatch("irc", evt)
        assert accepting.received_events == [("irc", evt)]
        assert rejecting.received_events == []

    def test_exception_in_target_isolated(self):
        dispatcher = Dispatcher()

        class Broken(MockTarget):
            def push_event(self, source, evt):
                raise RuntimeError("boom")

        after = MockTarget()
        dispatcher.register(Broken())
        dispatcher.register(after)
        _, evt = irc_message("bob", "#c", "hi")
        dispatcher.dispatch("irc", evt)
        assert len(after.received_events) == 1


class TestBus:
    """Test the serialized bus queue."""

    def test_publish_only_queues(self):
        bus = Bus()
        target = RecordingTarget()
        bus.register(target)
        bus.publish("irc", irc_message("bob", "#c", "hi")[1])
        assert bus.pending == 1
        assert target.received == []

    def test_drain_dispatches_in_order(self):
        bus = Bus()
        target = RecordingTarget()
        bus.register(target)
        for i in range(5):
            bus.publish("irc", irc_message("bob", "#c", str(i))[1])
        assert bus.drain() == 5
        assert [evt.text for _, evt in target.received] == ["0", "1", "2", "3", "4"]
        assert bus.pending == 0

    def test_unregister(self):
        bus = Bus()
        target = RecordingTarget()
        bus.register(target)
        bus.unregister(target)
        bus.publish("irc", irc_message("bob", "#c", "hi")[1])
        bus.drain()
        assert target.received == []

    @pytest.mark.asyncio
    async def test_run_consumes_queue(self):
        bus = Bus()
        target = RecordingTarget()
        bus.register(target)
        task = asyncio.create_task(bus.run())
        bus.publish("irc", irc_message("bob", "#c", "a")[1])
        bus.publish("discord", irc_message("bob", "#c", "b")[1])
        await asyncio.wait_for(bus._queue.join(), timeout=1)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert [src for src, _ in target.received] == ["irc", "discord"]

    @pytest.mark.asyncio
    async def test_run_handles_one_event_at_a_time(self):
        bus = Bus()
        active = {"now": 0, "max": 0}

        class Tracker:
            def accept_event(self, source, evt):
                return True

            def push_event(self, source, evt):
                active["now"] += 1
                active["max"] = max(active["max"], active["now"])
                active["now"] -= 1

        bus.register(Tracker())
        task = asyncio.create_task(bus.run())
        for i in range(10):
            bus.publish("irc", irc_message("bob", "#c", str(i))[1])
        await asyncio.wait_for(bus._queue.join(), timeout=1)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert active["max"] == 1
