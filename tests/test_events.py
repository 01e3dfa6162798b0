"""Tests for the simulation-time event queue."""

from doom_platformer.events import TimedEventQueue


class TestTimedEventQueue:
    """Delayed actions run on simulation time."""

    def test_runs_when_due(self):
        """Actions run once their delay has elapsed, not before."""
        queue = TimedEventQueue()
        ran = []
        queue.schedule(1.0, lambda state: ran.append(state), "victory")
        assert queue.advance(0.5, "s") == 0
        assert ran == []
        assert queue.advance(0.5, "s") == 1
        assert ran == ["s"]
        assert len(queue) == 0

    def test_order(self):
        """Due actions run earliest first, ties in scheduling order."""
        queue = TimedEventQueue()
        ran = []
        queue.schedule(0.3, lambda s: ran.append("c"))
        queue.schedule(0.1, lambda s: ran.append("a"))
        queue.schedule(0.1, lambda s: ran.append("b"))
        queue.advance(1.0, None)
        assert ran == ["a", "b", "c"]

    def test_pending_labels(self):
        """Pending labels are listed in due order."""
        queue = TimedEventQueue()
        queue.schedule(2.0, lambda s: None, "later")
        queue.schedule(1.0, lambda s: None, "sooner")
        assert queue.pending() == ["sooner", "later"]

    def test_zero_delay_runs_next_advance(self):
        """A zero delay runs on the next advance, even with no time passing."""
        queue = TimedEventQueue()
        ran = []
        queue.schedule(0, lambda s: ran.append(1))
        queue.advance(0.0, None)
        assert ran == [1]

    def test_clear(self):
        """Clearing drops everything and resets the clock."""
        queue = TimedEventQueue()
        queue.schedule(1.0, lambda s: None)
        queue.advance(0.5, None)
        queue.clear()
        assert len(queue) == 0
        assert queue.now == 0.0
