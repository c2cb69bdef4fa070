"""tests for the fingertip trail buffer."""
import numpy as np

from trails import TRAIL_COLOR, TRAIL_DURATION, Trails


def feed(trails, trail_id, times, duration=2.0):
    for t in times:
        trails.add_point(trail_id, t, [t, 0.0, -t], duration, "#00ff00")


def test_eviction_window():
    # now - t > window drops the sample: 5.0 - 2.5 = 2.5 is outside a 2.0 s window
    trails = Trails()
    feed(trails, 7, [0.0, 1.0, 2.5, 5.0])
    trails.update(5.0)
    assert [t for t, _ in trails.samples(7)] == [5.0]

    feed(trails, 8, [0.0, 1.0, 3.5, 5.0])
    trails.update(5.0)
    assert [t for t, _ in trails.samples(8)] == [3.5, 5.0]


def test_sample_exactly_at_window_edge_is_kept():
    trails = Trails()
    feed(trails, 0, [2.9, 3.0, 4.0])
    trails.update(5.0)
    assert [t for t, _ in trails.samples(0)] == [3.0, 4.0]


def test_order_preserved_after_eviction():
    trails = Trails()
    times = [0.0, 0.4, 0.8, 1.2, 1.6, 2.0, 2.4, 2.8]
    feed(trails, 1, times)
    trails.update(3.0)
    kept = [t for t, _ in trails.samples(1)]
    assert kept == [t for t in times if 3.0 - t <= 2.0]
    assert kept == sorted(kept)
    np.testing.assert_array_equal(trails.points(1)[:, 0], kept)


def test_eviction_stops_at_first_retained_sample():
    # out-of-order input is not validated; anything behind a fresh sample survives
    trails = Trails()
    feed(trails, 0, [5.0, 0.0])
    trails.update(6.0)
    assert [t for t, _ in trails.samples(0)] == [5.0, 0.0]


def test_last_writer_wins_for_window_and_color():
    trails = Trails()
    trails.add_point(3, 0.0, [0, 0, 0], 2.0, "#ff0000")
    trails.add_point(3, 0.5, [1, 0, 0], 10.0, "#0000ff")
    trail = trails.get(3)
    assert trail.duration == 10.0
    assert trail.color == "#0000ff"
    trails.update(9.0)
    assert len(trails.samples(3)) == 2


def test_negative_time_and_duration_are_made_positive():
    trails = Trails()
    trails.add_point(0, -1.5, [0, 0, 0], -2.0)
    assert trails.get(0).duration == 2.0
    assert trails.samples(0)[0][0] == 1.5


def test_defaults():
    trails = Trails()
    trails.add_point(0, 0.0, [0, 0, 0])
    assert trails.get(0).duration == TRAIL_DURATION
    assert trails.get(0).color == TRAIL_COLOR


def test_empty_trail_stays_registered():
    trails = Trails()
    feed(trails, 4, [0.0, 0.1])
    trails.update(100.0)
    assert 4 in trails
    assert len(trails) == 1
    assert trails.samples(4) == []
    assert trails.points(4).shape == (0, 3)


def test_segments_join_consecutive_points():
    trails = Trails()
    feed(trails, 0, [0.0, 0.5, 1.0])
    segs = trails.segments(0)
    assert segs.shape == (2, 2, 3)
    np.testing.assert_array_equal(segs[0], [[0.0, 0.0, 0.0], [0.5, 0.0, -0.5]])
    np.testing.assert_array_equal(segs[1], [[0.5, 0.0, -0.5], [1.0, 0.0, -1.0]])


def test_single_sample_or_unknown_id_draws_nothing():
    trails = Trails()
    feed(trails, 0, [0.0])
    assert trails.segments(0).shape == (0, 2, 3)
    assert trails.segments(99).shape == (0, 2, 3)
    assert 99 not in trails
    assert trails.get(99) is None


def test_stored_point_is_a_copy():
    trails = Trails()
    p = np.array([1.0, 2.0, 3.0])
    trails.add_point(0, 0.0, p)
    p[0] = 100.0
    assert trails.points(0)[0, 0] == 1.0


def test_samples_read_does_not_alias_stored_points():
    trails = Trails()
    trails.add_point(0, 0.0, [1.0, 2.0, 3.0])
    trails.samples(0)[0][1][0] = 99.0
    np.testing.assert_array_equal(trails.points(0), [[1.0, 2.0, 3.0]])


def test_ids_sorted_and_independent():
    trails = Trails()
    feed(trails, 5, [0.0])
    feed(trails, 1, [0.0, 3.0], duration=10.0)
    trails.update(3.0)
    assert trails.ids() == [1, 5]
    assert len(trails.samples(5)) == 0
    assert len(trails.samples(1)) == 2
