#!/usr/bin/env python3
"""
Tests for the FlyAnimation driver lifecycle.

What matters:
1. CREATED -> RUNNING -> COMPLETED, completion listeners fire exactly once
2. Cancelled flights make no further callbacks
3. Frames are a pure function of elapsed time (dropped ticks catch up)
4. Final frame sits on the destination, shrunk unless size is kept
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest

from fly_motion import FlightSpec, FlightState, FlyAnimation, Point


def make_flight(**kwargs) -> FlyAnimation:
    spec_kwargs = dict(origin=Point(0, 0), destination=Point(100, 100), duration_ms=500)
    spec_kwargs.update(kwargs)
    on_frame = spec_kwargs.pop('on_frame', None)
    return FlyAnimation(FlightSpec(**spec_kwargs), rng=np.random.default_rng(3), on_frame=on_frame)


def test_lifecycle_and_completion():
    """Flight runs to completion and notifies listeners once."""
    print("\n=== Test: Flight Lifecycle ===")

    completions = []
    flight = make_flight()
    flight.on_complete(lambda: completions.append(True))

    assert flight.state is FlightState.CREATED
    assert flight.tick(100) is None, "Ticks before start are ignored"

    flight.start(1000)
    assert flight.state is FlightState.RUNNING

    frame = flight.tick(1250)
    assert frame.progress == 0.5
    assert frame.scale == 1.0
    assert flight.state is FlightState.RUNNING

    frame = flight.tick(1500)
    assert frame.progress == 1.0
    assert frame.position == Point(100, 100)
    assert frame.scale == 0.0
    assert flight.state is FlightState.COMPLETED
    assert completions == [True]

    assert flight.tick(1600) is None
    assert completions == [True], "Completion must fire exactly once"

    print("✓ Flight completes once and stops ticking")


def test_start_is_only_honoured_once():
    """Restarting a running flight does not reset its clock."""
    print("\n=== Test: Single Start ===")

    flight = make_flight()
    flight.start(0)
    flight.start(400)
    assert flight.tick(250).progress == 0.5

    print("✓ Second start() is ignored")


def test_frames_depend_on_elapsed_time_only():
    """A late tick lands where an on-time tick would have."""
    print("\n=== Test: Dropped Frames ===")

    smooth = make_flight()
    jumpy = make_flight()
    smooth.start(0)
    jumpy.start(0)

    for now in range(16, 400, 16):
        smooth.tick(now)

    assert smooth.tick(400) == jumpy.tick(400)

    print("✓ Position is a pure function of elapsed time")


def test_on_frame_callback_receives_frames():
    """The render callback gets every frame."""
    print("\n=== Test: Frame Callback ===")

    frames = []
    flight = make_flight(on_frame=frames.append)
    flight.start(0)
    for now in [100, 200, 500]:
        flight.tick(now)

    assert [f.progress for f in frames] == [0.2, 0.4, 1.0]
    assert frames[-1] == flight.last_frame

    print("✓ on_frame invoked once per tick")


def test_cancel_stops_callbacks():
    """Cancelled flights never call back again."""
    print("\n=== Test: Cancel ===")

    frames, completions = [], []
    flight = make_flight(on_frame=frames.append)
    flight.on_complete(lambda: completions.append(True))
    flight.start(0)
    flight.tick(100)

    flight.cancel()
    assert flight.state is FlightState.CANCELLED
    assert flight.finished

    assert flight.tick(500) is None
    assert len(frames) == 1
    assert completions == []

    # Cancelling a finished flight keeps it in its terminal state
    done = make_flight()
    done.start(0)
    done.tick(500)
    done.cancel()
    assert done.state is FlightState.COMPLETED

    print("✓ Cancel is terminal and silent")


def test_keep_size_on_end():
    """With keep_size_on_end the last frame is full size."""
    print("\n=== Test: Keep Size ===")

    flight = make_flight(keep_size_on_end=True)
    flight.start(0)
    assert flight.tick(500).scale == 1.0

    print("✓ Size kept at the destination")


def test_zero_and_negative_duration_complete_immediately():
    """Degenerate durations finish on the first tick instead of failing."""
    print("\n=== Test: Degenerate Duration ===")

    for duration in [0, -250]:
        flight = make_flight(duration_ms=duration)
        flight.start(0)
        frame = flight.tick(0)
        assert frame.progress == 1.0
        assert frame.position == Point(100, 100)
        assert flight.state is FlightState.COMPLETED

    print("✓ Zero-length flights land on the destination")


def test_control_point_is_fixed_per_flight():
    """Control point is drawn once at creation and used for every frame."""
    print("\n=== Test: Fixed Control Point ===")

    flight = make_flight(control_range=50)
    control = flight.control
    assert -50 <= control.x <= 50 and -50 <= control.y <= 50

    flight.start(0)
    for now in range(0, 500, 50):
        flight.tick(now)
    assert flight.control is control

    print("✓ Control point never changes")


def test_phased_flight_holds_then_arrives():
    """Phased flight pauses on the control point, then lands on the destination."""
    print("\n=== Test: Phased Flight ===")

    flight = make_flight(duration_ms=1000, delay_before_move_ms=500)
    flight.start(0)

    # Spread takes 100ms, hold until 600ms
    assert flight.tick(300).position == flight.control
    assert flight.tick(1000).position == Point(100, 100)

    print("✓ Phased flight reaches the destination")


def test_unknown_easing_rejected():
    """Misspelled easing names fail when the flight is built."""
    print("\n=== Test: Unknown Easing ===")

    with pytest.raises(ValueError, match="Unknown easing function"):
        make_flight(easing='wobble')

    print("✓ Unknown easing raises ValueError")


if __name__ == '__main__':
    test_lifecycle_and_completion()
    test_start_is_only_honoured_once()
    test_frames_depend_on_elapsed_time_only()
    test_on_frame_callback_receives_frames()
    test_cancel_stops_callbacks()
    test_keep_size_on_end()
    test_zero_and_negative_duration_complete_immediately()
    test_control_point_is_fixed_per_flight()
    test_phased_flight_holds_then_arrives()
    test_unknown_easing_rejected()
    print("\nAll flight tests passed!")
