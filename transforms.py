"""Homogeneous 4x4 transform helpers shared by the arm and gripper kinematics."""
import math

import numpy as np
from scipy.spatial.transform import Rotation

TAU = 2.0 * math.pi


def d2r(ang):
    return ang / 180.0 * math.pi


def r2d(ang):
    return ang / math.pi * 180.0


def wrap_angle(theta):
    """Fold a finite angle into [-pi, pi]. NaN and inf pass through untouched."""
    if math.isfinite(theta):
        return math.remainder(theta, TAU)
    return theta


def translation(x, y, z):
    T = np.eye(4)
    T[:3, 3] = (x, y, z)
    return T


def get_revolute_transform(axis, angle):
    """Returns 4x4 Transform for a rotation of `angle` about `axis`."""
    u = np.asarray(axis, dtype=float)
    u = u / np.linalg.norm(u)
    x, y, z = u
    c, s = np.cos(angle), np.sin(angle)
    C = 1 - c
    R = np.array([
        [x*x*C + c,   x*y*C - z*s, x*z*C + y*s],
        [y*x*C + z*s, y*y*C + c,   y*z*C - x*s],
        [z*x*C - y*s, z*y*C + x*s, z*z*C + c],
    ])
    T = np.eye(4)
    T[:3, :3] = R
    return T


def rot_x(angle):
    return get_revolute_transform((1.0, 0.0, 0.0), angle)


def rot_z(angle):
    return get_revolute_transform((0.0, 0.0, 1.0), angle)


def invert(T):
    """Inverse of a rigid transform (R^T, -R^T p), no general matrix inverse."""
    R = T[:3, :3]
    out = np.eye(4)
    out[:3, :3] = R.T
    out[:3, 3] = -R.T @ T[:3, 3]
    return out


def mirror_x(T):
    """
    Mirror a gripper-local transform onto the opposite jaw: translation x is
    negated, and a 180 deg turn about the local Z axis is applied on top of
    the existing rotation. Translation y/z are left alone.
    """
    out = T.copy()
    out[0, 3] = -T[0, 3]
    out[:3, :3] = rot_z(math.pi)[:3, :3] @ T[:3, :3]
    return out


def parent_relative(world_tfs):
    """
    Turn root-relative transforms into parent-relative deltas:
    out[0] = world[0], out[i] = inverse(world[i-1]) @ world[i].
    """
    world_tfs = np.asarray(world_tfs, dtype=float)
    out = np.empty_like(world_tfs)
    if len(world_tfs) == 0:
        return out
    out[0] = world_tfs[0]
    for i in range(1, len(world_tfs)):
        out[i] = invert(world_tfs[i - 1]) @ world_tfs[i]
    return out


def to_pose(T):
    """Split a 4x4 transform into (xyz, wxyz quaternion)."""
    T = np.asarray(T, dtype=float)
    x, y, z, w = Rotation.from_matrix(T[:3, :3]).as_quat()
    return T[:3, 3].copy(), np.array([w, x, y, z])
