"""Tests for the debounce and throttle gates."""

from __future__ import annotations

import asyncio

import pytest

from steadycall.core.config import GateSettings
from steadycall.core.exceptions import InvalidGateConfigError
from steadycall.core.patterns import Debouncer, GateState, Throttler, debounce, throttle


class Recorder:
    """Callable recording (time, args, kwargs) of each invocation."""

    def __init__(self, clock) -> None:
        self.clock = clock
        self.calls: list[tuple[float, tuple, dict]] = []

    def __call__(self, *args, **kwargs):
        self.calls.append((self.clock.now(), args, kwargs))
        return len(self.calls)


class TestDebounce:
    """Trailing-edge debounce behaviour."""

    def test_burst_collapses_to_last_call(self, virtual_time):
        fn = Recorder(virtual_time)
        gated = debounce(fn, 0.1, scheduler=virtual_time)

        virtual_time.advance_to(0.0)
        gated("A")
        virtual_time.advance_to(0.03)
        gated("B")
        virtual_time.advance_to(0.06)
        gated("C")
        virtual_time.advance_to(1.0)

        assert len(fn.calls) == 1
        when, args, _ = fn.calls[0]
        assert when == pytest.approx(0.16)
        assert args == ("C",)

    def test_nothing_runs_before_delay(self, virtual_time):
        fn = Recorder(virtual_time)
        gated = debounce(fn, 0.1, scheduler=virtual_time)

        gated(1)
        virtual_time.advance_to(0.099)

        assert fn.calls == []
        assert gated.state is GateState.PENDING

    def test_state_machine(self, virtual_time):
        fn = Recorder(virtual_time)
        gated = debounce(fn, 0.1, scheduler=virtual_time)

        assert gated.state is GateState.IDLE
        gated()
        assert gated.state is GateState.PENDING
        gated()
        assert gated.state is GateState.PENDING
        assert virtual_time.pending == 1
        virtual_time.advance(0.1)
        assert gated.state is GateState.IDLE
        assert virtual_time.pending == 0

    def test_separate_bursts_run_separately(self, virtual_time):
        fn = Recorder(virtual_time)
        gated = debounce(fn, 0.1, scheduler=virtual_time)

        gated("first")
        virtual_time.advance_to(0.5)
        gated("second")
        virtual_time.advance_to(1.0)

        assert [args for _, args, _ in fn.calls] == [("first",), ("second",)]

    def test_keyword_arguments_are_forwarded(self, virtual_time):
        fn = Recorder(virtual_time)
        gated = debounce(fn, 0.05, scheduler=virtual_time)

        gated("q", limit=10)
        virtual_time.advance(0.05)

        assert fn.calls[0][1:] == (("q",), {"limit": 10})

    def test_failing_callback_leaves_gate_idle(self, virtual_time):
        def explode(value):
            raise RuntimeError(value)

        gated = debounce(explode, 0.1, scheduler=virtual_time)
        gated("boom")

        with pytest.raises(RuntimeError):
            virtual_time.advance(0.1)

        assert gated.state is GateState.IDLE

    def test_metrics(self, virtual_time, metrics):
        gated = debounce(Recorder(virtual_time), 0.1, scheduler=virtual_time)

        gated()
        gated()
        virtual_time.advance(0.1)

        def sample(decision):
            return metrics.registry.get_sample_value(
                "steadycall_gate_calls_total", {"policy": "debounce", "decision": decision}
            )

        assert sample("armed") == 2.0
        assert sample("superseded") == 1.0
        assert sample("executed") == 1.0

    @pytest.mark.asyncio
    async def test_default_scheduler_uses_running_loop(self):
        seen = []
        gated = debounce(seen.append, 0.01)

        gated(1)
        gated(2)
        await asyncio.sleep(0.05)

        assert seen == [2]

    def test_negative_delay_rejected(self):
        with pytest.raises(InvalidGateConfigError):
            debounce(print, -1)


class TestThrottle:
    """Leading-edge throttle behaviour."""

    def test_burst_runs_first_and_after_window(self, virtual_time):
        fn = Recorder(virtual_time)
        gated = throttle(fn, 0.1, clock=virtual_time)

        results = []
        for when, arg in [(0.0, "A"), (0.03, "B"), (0.06, "C"), (0.15, "D")]:
            virtual_time.advance_to(when)
            results.append(gated(arg))

        assert [(t, args) for t, args, _ in fn.calls] == [(0.0, ("A",)), (0.15, ("D",))]
        assert results == [1, None, None, 2]

    def test_first_call_always_runs(self, virtual_time):
        virtual_time.advance_to(0.0)
        fn = Recorder(virtual_time)
        gated = throttle(fn, 10.0, clock=virtual_time)

        assert gated.last_invocation is None
        gated()

        assert len(fn.calls) == 1
        assert gated.last_invocation == 0.0

    def test_window_measured_from_last_accepted_call(self, virtual_time):
        fn = Recorder(virtual_time)
        gated = throttle(fn, 0.1, clock=virtual_time)

        for when in (0.0, 0.09, 0.1, 0.19, 0.2):
            virtual_time.advance_to(when)
            gated()

        assert [t for t, _, _ in fn.calls] == [0.0, 0.1, 0.2]

    def test_dropped_calls_do_not_move_timestamp(self, virtual_time):
        gated = throttle(Recorder(virtual_time), 0.1, clock=virtual_time)

        gated()
        virtual_time.advance_to(0.05)
        gated()

        assert gated.last_invocation == 0.0

    def test_no_trailing_execution(self, virtual_time):
        fn = Recorder(virtual_time)
        gated = throttle(fn, 0.1, clock=virtual_time)

        gated("A")
        virtual_time.advance_to(0.05)
        gated("B")
        virtual_time.advance_to(5.0)

        assert len(fn.calls) == 1
        assert virtual_time.pending == 0

    def test_metrics(self, virtual_time, metrics):
        gated = throttle(Recorder(virtual_time), 0.1, clock=virtual_time)

        gated()
        gated()
        gated()

        assert metrics.registry.get_sample_value(
            "steadycall_gate_calls_total", {"policy": "throttle", "decision": "executed"}
        ) == 1.0
        assert metrics.registry.get_sample_value(
            "steadycall_gate_calls_total", {"policy": "throttle", "decision": "dropped"}
        ) == 2.0


class TestIndependence:
    """Each factory call yields an independent gate."""

    def test_debouncers_do_not_interact(self, virtual_time):
        fn = Recorder(virtual_time)
        left = debounce(fn, 0.1, scheduler=virtual_time)
        right = debounce(fn, 0.1, scheduler=virtual_time)

        left("L")
        virtual_time.advance_to(0.05)
        right("R")
        virtual_time.advance_to(1.0)

        assert [(round(t, 2), args) for t, args, _ in fn.calls] == [(0.1, ("L",)), (0.15, ("R",))]

    def test_throttlers_do_not_interact(self, virtual_time):
        fn = Recorder(virtual_time)
        first = throttle(fn, 0.1, clock=virtual_time)
        second = throttle(fn, 0.1, clock=virtual_time)

        first("x")
        second("y")

        assert len(fn.calls) == 2

    def test_wrappers_keep_metadata(self, virtual_time):
        def on_resize(width, height):
            """Redraw the layout."""

        debounced = debounce(on_resize, 0.1, scheduler=virtual_time)
        throttled = throttle(on_resize, 0.1, clock=virtual_time)

        assert isinstance(debounced, Debouncer)
        assert isinstance(throttled, Throttler)
        assert debounced.__name__ == throttled.__name__ == "on_resize"
        assert debounced.__doc__ == "Redraw the layout."
        assert debounced.__wrapped__ is on_resize


class TestFromSettings:
    """Gates built from configured default delays."""

    def test_debouncer_uses_debounce_delay(self, virtual_time):
        fn = Recorder(virtual_time)
        gated = Debouncer.from_settings(fn, GateSettings(debounce_delay=0.2, throttle_delay=5.0), scheduler=virtual_time)

        gated("x")
        virtual_time.advance_to(0.19)
        assert fn.calls == []
        virtual_time.advance_to(0.2)

        assert gated.delay == 0.2
        assert fn.calls == [(0.2, ("x",), {})]

    def test_throttler_uses_throttle_delay(self, virtual_time):
        fn = Recorder(virtual_time)
        gated = Throttler.from_settings(fn, GateSettings(debounce_delay=5.0, throttle_delay=0.5), clock=virtual_time)

        gated()
        virtual_time.advance_to(0.4)
        gated()
        virtual_time.advance_to(0.5)
        gated()

        assert gated.delay == 0.5
        assert [t for t, _, _ in fn.calls] == [0.0, 0.5]

    def test_invalid_configured_delay_rejected(self):
        with pytest.raises(InvalidGateConfigError):
            Throttler.from_settings(print, GateSettings(throttle_delay=-1.0))
