"""
Tests für ManualScheduler und ClockScheduler
"""
import pytest

from blockfall.scheduler import ClockScheduler, ManualScheduler


class FakeClock:
    """Zeitquelle, die nur durch sleep() oder advance() weiterläuft."""

    def __init__(self):
        self.now = 1000.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds):
        self.now += seconds


def repeating(scheduler, calls, limit=None):
    """Callback, der sich selbst neu einplant (wie der Driver)."""
    def callback():
        calls.append(len(calls))
        if limit is None or len(calls) < limit:
            scheduler.request_frame(callback)
    return callback


class TestManualScheduler:

    def test_tick_without_pending_frame(self):
        scheduler = ManualScheduler()
        assert scheduler.tick() is False
        assert scheduler.frames_run == 0

    def test_tick_runs_single_pending_callback(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.request_frame(lambda: calls.append('frame'))

        assert scheduler.tick() is True
        assert calls == ['frame']
        assert not scheduler.has_pending

    def test_run_stops_when_callback_does_not_reschedule(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.request_frame(repeating(scheduler, calls, limit=4))

        assert scheduler.run(10) == 4
        assert scheduler.frames_run == 4

    def test_cancel_drops_pending_callback(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.request_frame(repeating(scheduler, calls))
        scheduler.run(2)

        scheduler.cancel()

        assert scheduler.run(10) == 0
        assert len(calls) == 2


class TestClockScheduler:

    def test_runs_until_max_frames(self):
        clock = FakeClock()
        scheduler = ClockScheduler(fps=50, max_frames=25, clock=clock, sleep=clock.sleep)
        calls = []
        scheduler.request_frame(repeating(scheduler, calls))

        assert scheduler.run() == 25
        assert len(calls) == 25
        assert not scheduler.has_pending

    def test_sleeps_one_frame_time_between_frames(self):
        clock = FakeClock()
        scheduler = ClockScheduler(fps=50, max_frames=5, clock=clock, sleep=clock.sleep)
        scheduler.request_frame(repeating(scheduler, []))

        scheduler.run()

        assert scheduler.frame_time == pytest.approx(0.02)
        assert all(s == pytest.approx(0.02) for s in clock.sleeps)
        assert clock.now == pytest.approx(1000.0 + 5 * 0.02)

    def test_frame_time_follows_fps(self):
        assert ClockScheduler(fps=30).frame_time == pytest.approx(1.0 / 30)

    def test_frame_slower_than_one_second_is_logged(self, caplog):
        clock = FakeClock()
        scheduler = ClockScheduler(fps=50, max_frames=2, clock=clock, sleep=clock.sleep)

        def callback():
            if not scheduler.frames_run:
                clock.advance(1.5)
            scheduler.request_frame(callback)

        scheduler.request_frame(callback)
        with caplog.at_level("DEBUG", logger="blockfall.scheduler"):
            scheduler.run()

        warnings = [r for r in caplog.records if r.levelname == "WARNING"]
        assert len(warnings) == 1
        assert "Frame 1" in warnings[0].getMessage()
        assert any("Frame 2" in r.getMessage() and r.levelname == "DEBUG" for r in caplog.records)

    def test_ends_when_nothing_is_requested(self):
        clock = FakeClock()
        scheduler = ClockScheduler(fps=60, clock=clock, sleep=clock.sleep)
        calls = []
        scheduler.request_frame(repeating(scheduler, calls, limit=3))

        assert scheduler.run() == 3

    def test_cancel_from_callback_ends_loop(self):
        clock = FakeClock()
        scheduler = ClockScheduler(fps=60, clock=clock, sleep=clock.sleep)
        calls = []

        def callback():
            calls.append(1)
            scheduler.request_frame(callback)
            if len(calls) == 2:
                scheduler.cancel()

        scheduler.request_frame(callback)

        assert scheduler.run() == 2

    def test_slow_frames_resync_timing(self):
        clock = FakeClock()
        scheduler = ClockScheduler(fps=50, max_frames=3, clock=clock, sleep=clock.sleep)

        def slow_callback():
            clock.advance(0.5)  # deutlich länger als ein Frame
            scheduler.request_frame(slow_callback)

        scheduler.request_frame(slow_callback)
        scheduler.run()

        assert scheduler.late_frames == 3
        assert clock.sleeps == []
