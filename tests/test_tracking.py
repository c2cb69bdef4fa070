"""tests for the rate-limited tracking step."""
import itertools
import math

import numpy as np
import pytest

from tracking import (
    FINGER_GAIN, FINGER_MAX_STEP, JOINT_GAIN, JOINT_MAX_STEP, advance, advance_channels,
)

CASES = list(itertools.product(
    [-720.0, -90.0, 0.0, 0.3, 55.5],   # current
    [-600.0, -1.0, 0.0, 12.25, 720.0],  # target
    [(JOINT_GAIN, JOINT_MAX_STEP), (FINGER_GAIN, FINGER_MAX_STEP), (0.05, 1.0), (10.0, 100.0)],
))


def tick_budget(distance, gain, max_step):
    # capped ticks + sqrt approach (sqrt(d / 2g) drops by at least 1/2 per tick) + final snap
    return math.ceil(distance / max_step) + math.ceil(2.0 * math.sqrt(distance / (2.0 * gain))) + 2


def test_channel_settings():
    assert (JOINT_GAIN, JOINT_MAX_STEP) == (0.5, 16.0)
    assert (FINGER_GAIN, FINGER_MAX_STEP) == (2.0, 5.0)


def test_step_follows_sqrt_of_distance():
    # sqrt(2 * 0.5 * 100) = 10 < 16
    assert advance(0.0, 100.0, 0.5, 16.0) == pytest.approx(10.0)
    # sqrt(2 * 0.5 * 1000) > 16, so the velocity cap wins
    assert advance(0.0, 1000.0, 0.5, 16.0) == 16.0
    assert advance(10.0, 0.0, 0.5, 16.0) == pytest.approx(10.0 - math.sqrt(10.0))


def test_snaps_to_target_within_one_step():
    assert advance(0.0, 1.0, 0.5, 16.0) == 1.0
    assert advance(0.0, 0.5, 0.5, 16.0) == 0.5
    assert advance(3.0, 2.9, 2.0, 5.0) == 2.9


@pytest.mark.parametrize("current, target, gain_step", CASES)
def test_never_overshoots(current, target, gain_step):
    gain, max_step = gain_step
    out = advance(current, target, gain, max_step)
    if target >= current:
        assert current <= out <= target
    else:
        assert target <= out <= current
    assert abs(out - current) <= max_step + 1e-9


@pytest.mark.parametrize("current, target, gain_step", CASES)
def test_converges_and_stays(current, target, gain_step):
    gain, max_step = gain_step
    budget = tick_budget(abs(target - current), gain, max_step)
    value = current
    for _ in range(budget):
        value = advance(value, target, gain, max_step)
        if value == target:
            break
    assert value == target
    for _ in range(3):
        assert advance(value, target, gain, max_step) == target


def test_advance_channels_is_independent_per_channel():
    current = np.array([90.0, -120.0, 90.0, -60.0, -90.0, 0.0])
    target = np.zeros(6)
    out = advance_channels(current, target, JOINT_GAIN, JOINT_MAX_STEP)
    expected = [advance(c, 0.0, JOINT_GAIN, JOINT_MAX_STEP) for c in current]
    np.testing.assert_array_equal(out, expected)
    # input untouched
    assert current[0] == 90.0
    assert out[5] == 0.0


def test_advance_channels_rejects_length_mismatch():
    with pytest.raises(ValueError):
        advance_channels([0.0, 1.0], [0.0], FINGER_GAIN, FINGER_MAX_STEP)
