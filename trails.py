"""
Time-windowed point history per tracked id, used to draw fingertip paths.

Samples arrive in time order, so eviction only ever looks at the front of
each trail and stops at the first sample still inside the window.
"""
from collections import deque
from dataclasses import dataclass, field

import numpy as np

# --- SETTINGS ---
TRAIL_DURATION = 2.0  # s
TRAIL_COLOR = "#00ff00"


@dataclass
class Trail:
    duration: float
    color: str
    data: deque = field(default_factory=deque)  # ( time, point )


class Trails:
    def __init__(self):
        self._map = {}

    def add_point(self, trail_id, time, point, duration=TRAIL_DURATION, color=TRAIL_COLOR):
        """Append a sample, creating the trail on first use. Duration/color: last call wins."""
        trail = self._map.get(trail_id)
        if trail is None:
            trail = self._map[trail_id] = Trail(duration=abs(duration), color=color)
        trail.duration = abs(duration)
        trail.color = color
        trail.data.append((abs(time), np.array(point, dtype=float)))

    def update(self, now):
        """Drop samples older than each trail's window. Empty trails stay registered."""
        for trail in self._map.values():
            while trail.data and (now - trail.data[0][0]) > trail.duration:
                trail.data.popleft()

    def get(self, trail_id):
        return self._map.get(trail_id)

    def samples(self, trail_id):
        """(time, point) pairs, oldest first. Points are copies."""
        trail = self._map.get(trail_id)
        if trail is None:
            return []
        return [(t, p.copy()) for t, p in trail.data]

    def points(self, trail_id):
        """(N, 3) array of retained points, oldest first."""
        samples = self.samples(trail_id)
        if not samples:
            return np.empty((0, 3))
        return np.stack([p for _, p in samples])

    def segments(self, trail_id):
        """(N-1, 2, 3) array of consecutive point pairs; empty below two samples."""
        pts = self.points(trail_id)
        if len(pts) < 2:
            return np.empty((0, 2, 3))
        return np.stack([pts[:-1], pts[1:]], axis=1)

    def ids(self):
        return sorted(self._map)

    def __contains__(self, trail_id):
        return trail_id in self._map

    def __len__(self):
        return len(self._map)
