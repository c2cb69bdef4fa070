"""
Headless two-arm workcell: two UR5 arms, each carrying a CTM2F110 gripper.

Commands (target joints in degrees, target fingers in percent) are queued by
any producer and applied at the start of the next tick. Each tick then moves
the current values toward the targets, re-solves both kinematic chains and
records where finger ONE's tip went.

Usage:
    sim = DualArmSim()
    sim.submit(Command(robot_id=0, joints=[0, 0, 0, 0, 0, 0]))
    for i in range(100):
        sim.tick(i * 0.016)
"""
import logging
import math
from collections import deque
from dataclasses import dataclass, replace
from typing import Optional, Sequence

import numpy as np

from gripper_kinematics import Finger, GripperCtm2f110
from tracking import FINGER_GAIN, FINGER_MAX_STEP, JOINT_GAIN, JOINT_MAX_STEP, advance_channels
from trails import TRAIL_COLOR, TRAIL_DURATION, Trails
from transforms import rot_x, translation
from ur5_kinematics import JOINTS_POS, NUM_JOINTS, RobotUr5

logger = logging.getLogger(__name__)

# --- SETTINGS ---
ROBOT_KEY_0 = 0
ROBOT_KEY_1 = 1
ROBOT_BASES = {
    ROBOT_KEY_0: translation(-0.5, 0.0, 0.0) @ rot_x(-math.pi / 2),
    ROBOT_KEY_1: translation(0.5, 0.0, 0.0) @ rot_x(-math.pi / 2),
}
NUM_FINGERS = 2
FINGERS_POS = (0.0, 0.0)  # percent
JOINT_LIMIT = 720.0  # deg, symmetric
FINGER_LIMITS = (0.0, 100.0)  # percent
COMMAND_QUEUE_SIZE = 64
TRAIL_FINGER = Finger.ONE


@dataclass
class Command:
    robot_id: int
    joints: Optional[Sequence[float]] = None   # deg
    fingers: Optional[Sequence[float]] = None  # percent
    reset: bool = False


def _check_values(name, values, expected):
    arr = np.array(values, dtype=float)
    if arr.shape != (expected,):
        raise ValueError(f"{name}: expected {expected} values, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name}: non-finite value in {arr.tolist()}")
    return arr


class DualArmSim:
    def __init__(self, smooth=True, trail_duration=TRAIL_DURATION, trail_color=TRAIL_COLOR):
        self.smooth = smooth
        self.trail_duration = trail_duration
        self.trail_color = trail_color

        self.robots = {}
        self.grippers = {}
        self.joints_target = {}
        self.joints_current = {}
        self.fingers_target = {}
        self.fingers_current = {}
        for key in ROBOT_BASES:
            self.robots[key] = RobotUr5(key)
            self.grippers[key] = GripperCtm2f110(key)
            self.joints_target[key] = np.array(JOINTS_POS)
            self.joints_current[key] = np.array(JOINTS_POS)
            self.fingers_target[key] = np.array(FINGERS_POS)
            self.fingers_current[key] = np.array(FINGERS_POS)
            self._push_state(key)

        self.trails = Trails()
        self._commands = deque(maxlen=COMMAND_QUEUE_SIZE)
        self._last_tip = {}

    # ── command path ────────────────────────────────────────────
    def submit(self, command):
        """
        Queue a command for the next tick. Validation errors raise ValueError here.
        The queued command holds its own validated copies; the caller's object is left as-is.
        """
        if command.robot_id not in self.robots:
            raise ValueError(f"Unknown robot id {command.robot_id}; known: {sorted(self.robots)}")
        joints = fingers = None
        if command.joints is not None:
            joints = _check_values("joints", command.joints, NUM_JOINTS)
        if command.fingers is not None:
            fingers = _check_values("fingers", command.fingers, NUM_FINGERS)
        if len(self._commands) == self._commands.maxlen:
            logger.warning("Command queue full (%d), dropping oldest command", self._commands.maxlen)
        self._commands.append(replace(command, joints=joints, fingers=fingers))

    def reset(self, robot_id):
        self.submit(Command(robot_id=robot_id, reset=True))

    def _apply(self, command):
        key = command.robot_id
        if command.reset:
            self.joints_target[key] = np.array(JOINTS_POS)
            self.fingers_target[key] = np.array(FINGERS_POS)
        if command.joints is not None:
            self.joints_target[key] = np.clip(command.joints, -JOINT_LIMIT, JOINT_LIMIT)
        if command.fingers is not None:
            self.fingers_target[key] = np.clip(command.fingers, *FINGER_LIMITS)
        logger.debug("robot %d targets: joints=%s fingers=%s",
                     key, self.joints_target[key].tolist(), self.fingers_target[key].tolist())

    # ── tick ────────────────────────────────────────────────────
    def tick(self, now):
        while self._commands:
            self._apply(self._commands.popleft())

        for key in self.robots:
            if self.smooth:
                self.joints_current[key] = advance_channels(
                    self.joints_current[key], self.joints_target[key], JOINT_GAIN, JOINT_MAX_STEP)
                self.fingers_current[key] = advance_channels(
                    self.fingers_current[key], self.fingers_target[key], FINGER_GAIN, FINGER_MAX_STEP)
            else:
                self.joints_current[key] = self.joints_target[key].copy()
                self.fingers_current[key] = self.fingers_target[key].copy()
            self._push_state(key)
            self._record_tip(key, now)

        self.trails.update(now)

    def _push_state(self, key):
        self.robots[key].set_deg(self.joints_current[key])
        gripper = self.grippers[key]
        gripper.pos1 = self.fingers_current[key][0] / 100.0
        gripper.pos2 = self.fingers_current[key][1] / 100.0

    def _record_tip(self, key, now):
        # only a moving tip leaves new samples, so a parked gripper's trail fades out
        tip = self.fingertip_world(key, TRAIL_FINGER)[:3, 3]
        last = self._last_tip.get(key)
        if last is not None and np.array_equal(last, tip):
            return
        self._last_tip[key] = tip
        self.trails.add_point(key, now, tip, self.trail_duration, self.trail_color)

    # ── readers ─────────────────────────────────────────────────
    def link_world_transforms(self, robot_id):
        """(7, 4, 4): base and arm1..arm6 in world space."""
        return ROBOT_BASES[robot_id] @ self.robots[robot_id].local_transforms()

    def gripper_world_transform(self, robot_id):
        return ROBOT_BASES[robot_id] @ self.robots[robot_id].wrist_transform()

    def fingertip_world(self, robot_id, finger):
        return self.gripper_world_transform(robot_id) @ self.grippers[robot_id].fingertip(finger)

    def current_joints_deg(self, robot_id):
        return self.joints_current[robot_id].copy()

    def current_fingers_pct(self, robot_id):
        return self.fingers_current[robot_id].copy()

    def is_settled(self, robot_id):
        return (np.array_equal(self.joints_current[robot_id], self.joints_target[robot_id])
                and np.array_equal(self.fingers_current[robot_id], self.fingers_target[robot_id]))
