"""
Rate-limited tracking of a commanded value.

Each tick the current value moves toward its target by
sqrt(2 * gain * distance), capped at max_step, and never past the target.
The step shrinks with the square root of the remaining distance, so motion
decelerates into the target like a critically damped system while max_step
bounds the speed far from it.
"""
import math

import numpy as np

# --- SETTINGS ---
# joints track in degrees, fingers in percent (0 - 100)
JOINT_GAIN = 0.5
JOINT_MAX_STEP = 16.0
FINGER_GAIN = 2.0
FINGER_MAX_STEP = 5.0


def advance(current, target, gain, max_step):
    step = min(max_step, math.sqrt(2.0 * gain * abs(target - current)))
    if target >= current:
        return min(current + step, target)
    return max(current - step, target)


def advance_channels(current, target, gain, max_step):
    """Advance every channel independently. Returns a new float array."""
    if len(current) != len(target):
        raise ValueError(f"Channel count mismatch: {len(current)} current vs {len(target)} target")
    return np.array([advance(float(c), float(t), gain, max_step) for c, t in zip(current, target)])
