"""Tests for the cooperative scheduler, gesture listeners and single-flight memo."""

import threading

import pytest

from memory_journal.player.events import KEY_DOWN, POINTER_DOWN, GestureListeners
from memory_journal.player.scheduler import Scheduler
from memory_journal.player.singleflight import SingleFlight


class TestScheduler:
    def test_call_later_runs_once_when_due(self, scheduler):
        calls = []
        scheduler.call_later(100, lambda: calls.append(scheduler.now()))
        scheduler.advance(99)
        assert calls == []
        scheduler.advance(1)
        scheduler.advance(500)
        assert calls == [100]

    def test_cancelled_task_does_not_run(self, scheduler):
        calls = []
        handle = scheduler.call_later(10, lambda: calls.append(1))
        handle.cancel()
        scheduler.advance(20)
        assert calls == []

    def test_call_every_fires_once_after_late_tick(self, scheduler):
        calls = []
        scheduler.call_every(100, lambda: calls.append(scheduler.now()))
        scheduler.advance(350)
        assert calls == [350]
        scheduler.advance(99)
        assert calls == [350]
        scheduler.advance(1)
        assert calls == [350, 450]

    def test_call_every_skips_missed_periods_after_stall(self, scheduler):
        calls = []
        scheduler.call_every(3000, lambda: calls.append(scheduler.now()))
        scheduler.tick(16)
        scheduler.tick(10016)
        assert calls == [10016]
        scheduler.tick(13015)
        assert calls == [10016]
        scheduler.tick(13016)
        assert calls == [10016, 13016]

    def test_call_every_keeps_cadence_when_slightly_late(self, scheduler):
        calls = []
        scheduler.call_every(100, lambda: calls.append(scheduler.now()))
        scheduler.tick(130)
        scheduler.tick(199)
        scheduler.tick(200)
        scheduler.tick(320)
        assert calls == [130, 200, 320]

    def test_timers_run_in_due_order(self, scheduler):
        order = []
        scheduler.call_later(30, lambda: order.append("b"))
        scheduler.call_later(10, lambda: order.append("a"))
        scheduler.advance(50)
        assert order == ["a", "b"]

    def test_frame_requested_inside_frame_waits_for_next_tick(self, scheduler):
        stamps = []

        def frame(now):
            stamps.append(now)
            if len(stamps) < 3:
                scheduler.request_frame(frame)

        scheduler.request_frame(frame)
        scheduler.tick(16)
        assert stamps == [16]
        scheduler.tick(32)
        scheduler.tick(48)
        assert stamps == [16, 32, 48]

    def test_call_soon_from_other_thread(self, scheduler):
        calls = []
        thread = threading.Thread(target=lambda: scheduler.call_soon(lambda: calls.append("x")))
        thread.start()
        thread.join()
        scheduler.tick(1)
        assert calls == ["x"]

    def test_failing_task_does_not_stop_tick(self, scheduler):
        calls = []
        scheduler.call_later(1, lambda: 1 / 0)
        scheduler.call_later(2, lambda: calls.append("ok"))
        scheduler.advance(5)
        assert calls == ["ok"]

    def test_clock_never_moves_backwards(self):
        scheduler = Scheduler(start_ms=100)
        scheduler.tick(50)
        assert scheduler.now() == 100


class TestGestureListeners:
    def test_once_any_fires_once_across_kinds(self):
        gestures = GestureListeners()
        calls = []
        gestures.once_any((POINTER_DOWN, KEY_DOWN), lambda: calls.append(1))
        gestures.dispatch(KEY_DOWN)
        gestures.dispatch(POINTER_DOWN)
        assert calls == [1]
        assert gestures.count(POINTER_DOWN) == 0
        assert gestures.count(KEY_DOWN) == 0


class TestSingleFlight:
    def test_result_is_memoized(self):
        calls = []
        flight = SingleFlight(lambda: calls.append(1) or "loaded")
        assert flight.run() == "loaded"
        assert flight.run() == "loaded"
        assert calls == [1]
        assert flight.done

    def test_failure_is_forgotten(self):
        attempts = []

        def load():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("offline")
            return "ok"

        flight = SingleFlight(load)
        with pytest.raises(RuntimeError):
            flight.run()
        assert not flight.done
        assert flight.run() == "ok"
        assert len(attempts) == 2

    def test_concurrent_callers_share_one_call(self):
        started = threading.Event()
        release = threading.Event()
        calls = []

        def load():
            calls.append(1)
            started.set()
            release.wait(5)
            return "shared"

        flight = SingleFlight(load)
        results = []
        first = threading.Thread(target=lambda: results.append(flight.run()))
        first.start()
        started.wait(5)
        second = threading.Thread(target=lambda: results.append(flight.run(timeout=5)))
        second.start()
        release.set()
        first.join(5)
        second.join(5)
        assert results == ["shared", "shared"]
        assert calls == [1]

    def test_invalidate_forces_reload(self):
        calls = []
        flight = SingleFlight(lambda: calls.append(1))
        flight.run()
        flight.invalidate()
        flight.run()
        assert len(calls) == 2
