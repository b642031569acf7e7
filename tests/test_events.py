"""Test the event bus."""
from fireworks.core.events import EventBus, ReloadEvent, SequenceEvent


class TestEventBus:
    """Tests for EventBus."""

    def test_publish_reaches_subscribers_of_type(self):
        bus = EventBus()
        sequences, reloads = [], []
        bus.subscribe(SequenceEvent, sequences.append)
        bus.subscribe(ReloadEvent, reloads.append)
        bus.publish(SequenceEvent(name="random", delay=100))
        assert len(sequences) == 1
        assert reloads == []

    def test_unsubscribe(self):
        bus = EventBus()
        seen = []
        bus.subscribe(ReloadEvent, seen.append)
        bus.unsubscribe(ReloadEvent, seen.append)
        bus.unsubscribe(ReloadEvent, seen.append)
        bus.publish(ReloadEvent())
        assert seen == []

    def test_handlers_run_in_subscription_order(self):
        bus = EventBus()
        order = []
        bus.subscribe(ReloadEvent, lambda e: order.append("log"))
        bus.subscribe(ReloadEvent, lambda e: order.append("hud"))
        bus.publish(ReloadEvent())
        assert order == ["log", "hud"]

    def test_handler_can_unsubscribe_during_publish(self):
        bus = EventBus()
        seen = []

        def once(event):
            seen.append(event)
            bus.unsubscribe(ReloadEvent, once)

        bus.subscribe(ReloadEvent, once)
        bus.subscribe(ReloadEvent, seen.append)
        bus.publish(ReloadEvent())
        bus.publish(ReloadEvent())
        assert len(seen) == 3

    def test_simulations_have_separate_buses(self):
        from fireworks.core.simulation import Simulation
        a, b = Simulation(seed=1), Simulation(seed=2)
        seen = []
        a.events.subscribe(ReloadEvent, seen.append)
        b.reload()
        assert seen == []
        a.reload()
        assert len(seen) == 1
