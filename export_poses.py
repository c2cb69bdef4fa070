#!/usr/bin/env python3
"""
Run the two-arm workcell headless and dump every link pose to CSV.

Usage:
    python export_poses.py poses.csv
    python export_poses.py poses.csv --robot 1 --joints 0 -90 0 -90 0 0 --fingers 100 100
    python export_poses.py poses.csv --ticks 300 --dt 0.01 --no-smooth
"""
import argparse
import csv
import logging
from pathlib import Path

import numpy as np

from dual_arm_sim import Command, DualArmSim
from gripper_kinematics import Finger
from transforms import to_pose
from ur5_kinematics import LINK_NAMES

logger = logging.getLogger(__name__)

# --- SETTINGS ---
DEFAULT_TICKS = 120
DEFAULT_DT = 1.0 / 60.0  # s

HEADER = [
    "tick", "time", "robot", "link",
    "x", "y", "z",
    "qw", "qx", "qy", "qz",
]


def world_poses(sim, robot_id):
    """Yield (link_name, 4x4 world transform) for arm links and both fingertips."""
    for name, tf in zip(LINK_NAMES, sim.link_world_transforms(robot_id)):
        yield name, tf
    yield "fingertip1", sim.fingertip_world(robot_id, Finger.ONE)
    yield "fingertip2", sim.fingertip_world(robot_id, Finger.TWO)


def print_joint_table(sim):
    print("\n" + "=" * 72)
    print(f"  {'ROBOT':<6} {'J1':>9} {'J2':>9} {'J3':>9} {'J4':>9} {'J5':>9} {'J6':>9}   {'F1':>6} {'F2':>6}")
    print("-" * 72)
    for key in sorted(sim.robots):
        joints = " ".join(f"{j:>+8.2f}°" for j in sim.current_joints_deg(key))
        fingers = " ".join(f"{f:>5.1f}%" for f in sim.current_fingers_pct(key))
        state = "settled" if sim.is_settled(key) else "moving"
        print(f"  {key:<6} {joints}   {fingers}  ({state})")
    print("-" * 72)
    for key in sim.trails.ids():
        print(f"  trail {key}: {len(sim.trails.samples(key))} samples")
    print("=" * 72 + "\n")


def main(out_csv, ticks=DEFAULT_TICKS, dt=DEFAULT_DT, robot=0, joints=None, fingers=None,
         smooth=True):
    sim = DualArmSim(smooth=smooth)
    if joints is not None or fingers is not None:
        sim.submit(Command(robot_id=robot, joints=joints, fingers=fingers))

    out_csv = str(Path(out_csv).resolve())
    rows = 0
    with open(out_csv, "w", newline="") as f:
        w = csv.writer(f)
        w.writerow(HEADER)
        for tick in range(ticks):
            now = tick * dt
            sim.tick(now)
            for key in sorted(sim.robots):
                for name, tf in world_poses(sim, key):
                    pos, wxyz = to_pose(tf)
                    w.writerow([tick, f"{now:.6f}", key, name,
                                *np.round(pos, 9).tolist(), *np.round(wxyz, 9).tolist()])
                    rows += 1

    logger.info("Wrote %d rows to %s", rows, out_csv)
    print_joint_table(sim)
    return sim


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Export dual UR5 + gripper link poses to CSV")
    p.add_argument("out_csv", help="Output CSV path")
    p.add_argument("--ticks", type=int, default=DEFAULT_TICKS, help=f"Ticks to simulate (default: {DEFAULT_TICKS})")
    p.add_argument("--dt", type=float, default=DEFAULT_DT, help="Seconds per tick")
    p.add_argument("--robot", type=int, default=0, help="Robot the command is sent to (default: 0)")
    p.add_argument("--joints", type=float, nargs=6, metavar="DEG", help="Target joint angles (deg)")
    p.add_argument("--fingers", type=float, nargs=2, metavar="PCT", help="Target finger openings (%%)")
    p.add_argument("--no-smooth", action="store_true", help="Jump straight to targets")
    p.add_argument("--verbose", "-v", action="store_true")
    return p.parse_args(argv)


def cli(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    main(args.out_csv, ticks=args.ticks, dt=args.dt, robot=args.robot, joints=args.joints,
         fingers=args.fingers, smooth=not args.no_smooth)


if __name__ == "__main__":
    cli()
