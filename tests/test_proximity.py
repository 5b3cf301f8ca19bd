# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the proximity-interval solver."""
import math

import pytest

from kepler_intercept.domain.kepler_orbit import KeplerOrbit
from kepler_intercept.domain.proximity import FULL_ORBIT, ProximityIntervals, solve
from kepler_intercept.domain.true_anomaly import true_radius

R = 7_000_000.0


def _orbit(p, e, inclination_deg=0.0, raan_deg=0.0, argp_deg=0.0):
    return KeplerOrbit.from_classical(
        p, e,
        math.radians(inclination_deg),
        math.radians(raan_deg),
        math.radians(argp_deg),
    )


def _circular(radius, **kwargs):
    return _orbit(radius, 0.0, **kwargs)


def _total_length(intervals):
    total = 0.0
    for lo, hi in intervals.bounds:
        total += hi - lo if lo <= hi else hi - lo + 2 * math.pi
    return total


# ── ProximityIntervals ──────────────────────────────────────────────

class TestProximityIntervals:

    def test_empty(self):
        empty = ProximityIntervals()
        assert empty.count == 0
        assert empty.angles == ()
        assert not empty.contains(0.0)

    def test_angles_flatten_pairs(self):
        intervals = ProximityIntervals(((-2.0, -1.0), (1.0, 2.0)))
        assert intervals.count == 2
        assert intervals.angles == (-2.0, -1.0, 1.0, 2.0)

    def test_contains_plain_interval(self):
        intervals = ProximityIntervals(((-0.5, 0.5),))
        assert intervals.contains(0.0)
        assert intervals.contains(0.5)
        assert not intervals.contains(1.0)
        assert intervals.contains(2 * math.pi + 0.1)

    def test_contains_wrapped_interval(self):
        """lo > hi wraps through apoapsis."""
        intervals = ProximityIntervals(((3.0, -3.0),))
        assert intervals.contains(math.pi)
        assert intervals.contains(-math.pi)
        assert intervals.contains(3.1)
        assert not intervals.contains(0.0)

    def test_full_orbit(self):
        full = ProximityIntervals((FULL_ORBIT,))
        assert full.is_full_orbit
        assert all(full.contains(f) for f in (-3.0, 0.0, math.pi))


# ── Preconditions ───────────────────────────────────────────────────

class TestPreconditions:

    @pytest.mark.parametrize("threshold", [0.0, -1.0, math.nan, math.inf])
    def test_rejects_bad_threshold(self, threshold):
        orbit = _circular(R)
        with pytest.raises(ValueError, match="threshold"):
            solve(orbit, orbit, threshold)


# ── Apsis short-circuit ─────────────────────────────────────────────

class TestApsisShortCircuit:

    def test_nested_circles_are_disjoint(self):
        inner = _circular(100.0)
        outer = _circular(200.0)
        assert solve(inner, outer, 10.0).count == 0
        assert solve(outer, inner, 10.0).count == 0

    def test_threshold_bridges_gap(self):
        inner = _circular(100.0)
        outer = _circular(200.0)
        assert solve(inner, outer, 150.0).count == 1

    def test_inclined_nested_orbits_still_disjoint(self):
        inner = _circular(R)
        outer = _circular(2 * R, inclination_deg=50.0)
        assert solve(inner, outer, 1_000.0).count == 0
        assert solve(outer, inner, 1_000.0).count == 0


# ── Coplanar: altitude band only ────────────────────────────────────

class TestCoplanar:
    """Subject p = 1.5R, e = 0.5 spans radii [R, 3R]."""

    _SUBJECT = (1.5 * R, 0.5)

    def test_identical_circles_full_orbit(self):
        orbit = _circular(R)
        intervals = solve(orbit, orbit, 1_000.0)
        assert intervals.is_full_orbit
        assert intervals.bounds == ((-math.pi, math.pi),)

    def test_retrograde_coplanar_circles_full_orbit(self):
        prograde = _circular(R)
        retrograde = _circular(R, inclination_deg=180.0)
        assert solve(retrograde, prograde, 1_000.0).is_full_orbit

    def test_identical_ellipses_full_orbit(self):
        orbit = _orbit(*self._SUBJECT)
        intervals = solve(orbit, orbit, 0.01 * R)
        assert intervals.is_full_orbit

    def test_band_at_periapsis(self):
        """Reference circle at the subject's periapsis: one interval around f = 0."""
        subject = _orbit(*self._SUBJECT)
        reference = _circular(R)
        intervals = solve(subject, reference, 0.01 * R)

        f_apo = math.acos((1.5 / 1.01 - 1.0) / 0.5)
        assert intervals.count == 1
        lo, hi = intervals.bounds[0]
        assert lo == pytest.approx(-f_apo)
        assert hi == pytest.approx(f_apo)
        assert intervals.contains(0.0)

    def test_band_at_apoapsis_wraps(self):
        """Reference circle at the subject's apoapsis: one interval through f = pi."""
        subject = _orbit(*self._SUBJECT)
        reference = _circular(3 * R)
        intervals = solve(subject, reference, 0.01 * R)

        f_peri = math.acos((1.5 / 2.99 - 1.0) / 0.5)
        assert intervals.count == 1
        lo, hi = intervals.bounds[0]
        assert lo > hi
        assert lo == pytest.approx(f_peri)
        assert hi == pytest.approx(-f_peri)
        assert intervals.contains(math.pi)
        assert not intervals.contains(0.0)

    def test_band_crossing_gives_two_sided_intervals(self):
        subject = _orbit(*self._SUBJECT)
        reference = _circular(2 * R)
        intervals = solve(subject, reference, 0.01 * R)

        f_peri = math.acos((1.5 / 1.99 - 1.0) / 0.5)
        f_apo = math.acos((1.5 / 2.01 - 1.0) / 0.5)
        assert intervals.count == 2
        (lo1, hi1), (lo2, hi2) = intervals.bounds
        assert (lo1, hi1) == pytest.approx((-f_apo, -f_peri))
        assert (lo2, hi2) == pytest.approx((f_peri, f_apo))
        assert true_radius(1.5 * R, 0.5, lo2) == pytest.approx(1.99 * R)
        assert true_radius(1.5 * R, 0.5, hi2) == pytest.approx(2.01 * R)

    def test_wider_threshold_never_shrinks(self):
        subject = _orbit(*self._SUBJECT)
        reference = _circular(2 * R)
        narrow = solve(subject, reference, 0.01 * R)
        wide = solve(subject, reference, 0.05 * R)
        assert _total_length(wide) >= _total_length(narrow)
        for lo, hi in narrow.bounds:
            assert wide.contains(lo) and wide.contains(hi)


# ── Inclined: node windows ──────────────────────────────────────────

class TestInclined:

    def test_polar_over_equatorial_circle(self):
        """Both circular at R; windows around f = 0 and f = pi."""
        subject = _circular(R, inclination_deg=90.0)
        reference = _circular(R)
        intervals = solve(subject, reference, 0.001 * R)

        delta = math.asin(math.sin(0.0005) / math.sin(math.pi / 4))
        assert intervals.count == 2
        (lo1, hi1), (lo2, hi2) = intervals.bounds
        assert (lo1, hi1) == pytest.approx((-delta, delta), abs=1e-12)
        assert lo2 == pytest.approx(math.pi - delta)
        assert hi2 == pytest.approx(-math.pi + delta)

    def test_node_follows_reference_direction(self):
        """Rotating the subject reference direction moves the window with it."""
        subject = _circular(R, inclination_deg=45.0)
        reference = _circular(R)
        base = solve(subject, reference, 1_000.0)

        rotated_subject = _orbit(R, 0.0, inclination_deg=45.0, argp_deg=30.0)
        rotated = solve(rotated_subject, reference, 1_000.0)
        # reference direction 30 deg past the ascending node puts the node at f = -30 deg
        assert rotated.contains(math.radians(-30.0))
        assert base.contains(0.0)
        assert not rotated.contains(0.0)

    def test_windows_shrink_with_inclination(self):
        reference = _circular(R)
        low = solve(_circular(R, inclination_deg=10.0), reference, 5_000.0)
        high = solve(_circular(R, inclination_deg=80.0), reference, 5_000.0)
        assert _total_length(high) < _total_length(low)

    def test_large_threshold_covers_whole_orbit(self):
        subject = _circular(R, inclination_deg=5.0)
        reference = _circular(R)
        assert solve(subject, reference, 2 * R).is_full_orbit

    def test_node_windows_clipped_by_band(self):
        """Inclined eccentric subject: result lies inside the coplanar band."""
        subject = _orbit(1.5 * R, 0.5, inclination_deg=30.0, argp_deg=120.0)
        reference = _circular(2 * R)
        inclined = solve(subject, reference, 0.05 * R)
        band = solve(_orbit(1.5 * R, 0.5, argp_deg=120.0), reference, 0.05 * R)
        assert inclined.count == 1
        for lo, hi in inclined.bounds:
            assert band.contains(lo) and band.contains(hi)

    def test_per_node_radius_narrows_apoapsis_window(self):
        """Nodes at periapsis and apoapsis; the apoapsis window shrinks."""
        subject = _orbit(1.5 * R, 0.5, inclination_deg=30.0)
        reference = _orbit(1.6 * R, 0.8)
        default = solve(subject, reference, 0.01 * R)
        per_node = solve(subject, reference, 0.01 * R, per_node_radius=True)
        assert default.count == per_node.count == 2
        assert _total_length(per_node) < _total_length(default)
        assert default.bounds[0] == pytest.approx(per_node.bounds[0])


# ── Open orbits ─────────────────────────────────────────────────────

class TestOpenOrbits:

    def test_hyperbola_crossing_circle(self):
        p, e = 2.5 * 6_800_000.0, 1.5
        subject = _orbit(p, e)
        reference = _circular(R)
        intervals = solve(subject, reference, 7_000.0)

        f_peri = math.acos((p / (R - 7_000.0) - 1.0) / e)
        f_apo = math.acos((p / (R + 7_000.0) - 1.0) / e)
        assert intervals.angles == pytest.approx((-f_apo, -f_peri, f_peri, f_apo))

    def test_hyperbola_intervals_inside_asymptotes(self):
        subject = _orbit(2.5 * R, 1.5, inclination_deg=20.0)
        reference = _orbit(3.0 * R, 2.0)
        intervals = solve(subject, reference, 0.1 * R)
        f_inf = math.acos(-1.0 / 1.5)
        assert intervals.count >= 1
        for lo, hi in intervals.bounds:
            assert lo <= hi
            assert -f_inf <= lo and hi <= f_inf

    def test_coplanar_hyperbolas_bounded_by_asymptote(self):
        subject = _orbit(2.5 * R, 1.5)
        reference = _orbit(2.5 * R, 1.5)
        intervals = solve(subject, reference, 0.1 * R)
        f_inf = math.acos(-1.0 / 1.5)
        assert intervals.angles == pytest.approx((-f_inf, f_inf))

    def test_parabola_crossing_circle(self):
        """Parabola with periapsis R/2 meets radius R at f = +/- 90 deg."""
        subject = _orbit(R, 1.0)
        reference = _circular(R)
        intervals = solve(subject, reference, 7_000.0)
        assert intervals.count == 2
        (lo1, hi1), (lo2, hi2) = intervals.bounds
        assert lo1 < -math.pi / 2 < hi1
        assert lo2 < math.pi / 2 < hi2
        assert hi2 < math.pi

    def test_circle_against_hyperbola_full_orbit(self):
        """A circle inside the hyperbola's reach is in band everywhere."""
        subject = _circular(R)
        reference = _orbit(2.5 * 6_800_000.0, 1.5)
        assert solve(subject, reference, 7_000.0).is_full_orbit


# ── Determinism ─────────────────────────────────────────────────────

class TestDeterminism:

    def test_repeated_calls_identical(self):
        subject = _orbit(1.3 * R, 0.4, inclination_deg=63.4, raan_deg=120.0, argp_deg=270.0)
        reference = _orbit(1.1 * R, 0.05, inclination_deg=98.0, raan_deg=10.0, argp_deg=45.0)
        first = solve(subject, reference, 10_000.0)
        second = solve(subject, reference, 10_000.0)
        assert first == second
