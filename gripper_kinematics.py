"""
CTM2F110 two-finger gripper linkage.

One normalized opening value per finger drives a planar linkage: the driving
link and follower link swing by the same angle about fixed pivots, and the
finger plate rides on the end of the driving link while keeping a fixed
orientation. All transforms are in the gripper's local frame (the linkage
plane is X/Z). Finger TWO is solved directly; finger ONE is its mirror image.
"""
import math
from enum import Enum

import numpy as np

from transforms import mirror_x, rot_x, rot_z, translation

# --- SETTINGS ---
DRIVING_POS = (24.0 / 1000.0, 80.75 / 1000.0)  # [ x, z ] m
DRIVING_LENGTH = 55.0 / 1000.0  # m
DRIVING_ANGLE = (30.0 / 180.0 * math.pi, 103.5 / 180.0 * math.pi)  # [ closed, open ] rad
FOLLOWER_POS = (57.0 / 1000.0, 68.75 / 1000.0)  # [ x, z ] m
FINGERTIP_POS = (-11.0 / 1000.0, 50.5 / 1000.0)  # offset from finger plate, m

LINK_ORDER = ("driving", "follower", "finger", "fingertip")


class Finger(Enum):
    ONE = 1
    TWO = 2


def swing_fraction(pos):
    """Interpolation fraction for an opening value. Only the top end is clamped."""
    frac = abs(1.0 - pos)
    return 1.0 if frac > 1.0 else frac


def swing_angle(pos):
    lo, hi = DRIVING_ANGLE
    return lo + (hi - lo) * swing_fraction(pos)


def _planar_link(x, z, angle):
    return translation(x, 0.0, z) @ rot_x(math.pi / 2) @ rot_z(angle)


def compute_finger2(pos):
    """
    In: pos, nominally [0.0, 1.0] (1.0 = closed reference pose)
    Out: (4, 4, 4) array [driving, follower, finger, fingertip]
    """
    angle = swing_angle(pos)

    driving_x, driving_z = DRIVING_POS
    driving = _planar_link(driving_x, driving_z, angle)
    follower = _planar_link(FOLLOWER_POS[0], FOLLOWER_POS[1], angle)

    # plate stays perpendicular to the gripper base whatever the swing angle
    finger_x = driving_x + DRIVING_LENGTH * math.cos(angle)
    finger_z = driving_z + DRIVING_LENGTH * math.sin(angle)
    finger = _planar_link(finger_x, finger_z, math.pi / 2)

    fingertip = _planar_link(finger_x + FINGERTIP_POS[0], finger_z + FINGERTIP_POS[1], math.pi / 2)

    return np.stack([driving, follower, finger, fingertip])


def compute_finger1(pos):
    return np.stack([mirror_x(tf) for tf in compute_finger2(pos)])


def compute_finger_links(pos, finger=Finger.TWO):
    if finger is Finger.ONE:
        return compute_finger1(pos)
    return compute_finger2(pos)


class GripperCtm2f110:
    """Gripper instance; pos1/pos2 are the normalized openings of fingers ONE/TWO."""

    def __init__(self, id, pos1=1.0, pos2=1.0):
        self.id = id
        self.pos1 = pos1
        self.pos2 = pos2

    def link_transforms(self):
        """Local transforms of the eight moving parts, keyed e.g. 'driving1', 'fingertip2'."""
        tfs = {}
        for suffix, links in (("1", compute_finger1(self.pos1)), ("2", compute_finger2(self.pos2))):
            for name, tf in zip(LINK_ORDER, links):
                tfs[name + suffix] = tf
        return tfs

    def fingertip(self, finger):
        if finger is Finger.ONE:
            return compute_finger1(self.pos1)[3]
        return compute_finger2(self.pos2)[3]
