"""
UR5 forward kinematics.

Six joint angles (radians) go in, six 4x4 link transforms come out. Every
returned transform is already accumulated down the chain, i.e. it is expressed
in the robot root frame, not relative to the previous link. Attach each link
directly under the robot root, or use `parent_relative_transforms` when the
links are nested under each other.
"""
import math
from dataclasses import dataclass

import numpy as np

from transforms import d2r, parent_relative, r2d, wrap_angle

# --- SETTINGS ---
NUM_JOINTS = 6

# Default pose (deg)
JOINTS_POS = (90.0, -120.0, 90.0, -60.0, -90.0, 0.0)

LINK_NAMES = ("base", "arm1", "arm2", "arm3", "arm4", "arm5", "arm6")


@dataclass(frozen=True)
class DHParameter:
    a: float      # link length (m)
    alpha: float  # link twist (rad)
    d: float      # link offset (m)


DH_PARAMS = (
    DHParameter(a=0.0, alpha=0.0, d=89.2 / 1000.0),                  # 0 - 1
    DHParameter(a=0.0, alpha=-math.pi / 2, d=134.2 / 1000.0),        # 1 - 2
    DHParameter(a=425.0 / 1000.0, alpha=math.pi, d=118.95 / 1000.0),  # 2 - 3
    DHParameter(a=392.25 / 1000.0, alpha=math.pi, d=94.75 / 1000.0),  # 3 - 4
    DHParameter(a=0.0, alpha=-math.pi / 2, d=94.75 / 1000.0),        # 4 - 5
    DHParameter(a=0.0, alpha=-math.pi / 2, d=81.5 / 1000.0),         # 5 - 6
)

# Maps the DH zero pose onto the physical UR5 zero pose: q' = sign * q + offset
JOINT_SIGNS = (1.0, 1.0, -1.0, 1.0, 1.0, 1.0)
JOINT_OFFSETS = (math.pi, 0.0, 0.0, 0.0, math.pi, 0.0)


def _as_joint_vector(joints):
    q = np.asarray(joints, dtype=float)
    if q.shape != (NUM_JOINTS,):
        raise ValueError(f"Expected {NUM_JOINTS} joint angles, got shape {q.shape}")
    return q


def revise_joints(joints):
    """Apply the per-joint sign/offset convention. Returns a new array."""
    q = _as_joint_vector(joints)
    return np.array([s * v + o for s, v, o in zip(JOINT_SIGNS, q, JOINT_OFFSETS)])


def dh_transform(a, alpha, d, theta):
    """Single-joint DH transform (twist/length on the previous axis, then theta/offset)."""
    theta = wrap_angle(theta)
    ct, st = np.cos(theta), np.sin(theta)
    ca, sa = np.cos(alpha), np.sin(alpha)
    return np.array([
        [ct,      -st,      0.0,  a],
        [st * ca,  ct * ca, -sa, -sa * d],
        [st * sa,  ct * sa,  ca,  ca * d],
        [0.0,      0.0,     0.0,  1.0],
    ])


def compute_link_transforms(joints):
    """
    Forward kinematics for all six links.

    Args:
      joints: six joint angles in radians, base joint first.

    Returns:
      (6, 4, 4) array; entry i is link i+1 expressed in the robot root frame.
    """
    revised = revise_joints(joints)
    out = np.empty((NUM_JOINTS, 4, 4))
    buf = np.eye(4)
    for i, (par, theta) in enumerate(zip(DH_PARAMS, revised)):
        buf = buf @ dh_transform(par.a, par.alpha, par.d, theta)
        out[i] = buf
    return out


class RobotUr5:
    """One UR5 instance: an id plus its current joint angles (rad)."""

    def __init__(self, id, joints=None):
        self.id = id
        if joints is None:
            joints = self.default_joints()
        self.joints = _as_joint_vector(joints).copy()

    @staticmethod
    def default_joints():
        return np.array([d2r(j) for j in JOINTS_POS])

    def set_deg(self, joints_deg):
        self.joints = np.array([d2r(j) for j in _as_joint_vector(joints_deg)])

    def get_deg(self):
        return np.array([r2d(j) for j in self.joints])

    def local_transforms(self):
        """Base (identity) followed by the six root-relative link transforms."""
        tfs = np.empty((NUM_JOINTS + 1, 4, 4))
        tfs[0] = np.eye(4)
        tfs[1:] = compute_link_transforms(self.joints)
        return tfs

    def wrist_transform(self):
        return compute_link_transforms(self.joints)[-1]

    def parent_relative_transforms(self):
        """Per-link deltas for nesting each link under the previous one."""
        return parent_relative(compute_link_transforms(self.joints))

    def __repr__(self):
        deg = ", ".join(f"{j:+.1f}" for j in self.get_deg())
        return f"RobotUr5(id={self.id}, joints_deg=[{deg}])"
