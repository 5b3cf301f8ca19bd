# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Proximity intervals: true-anomaly ranges where a subject orbit can come
within a threshold distance of a reference orbit.

Purely geometric, no timing. The altitude band [r_p(ref) - eps,
r_a(ref) + eps] bounds the subject's radius, and for inclined orbits a
spherical-trigonometry window around each node of the line of nodes
bounds its out-of-plane distance. The result is a conservative superset
of the anomalies where an approach closer than eps is possible.

Interval convention: each (lo, hi) pair runs forward in true anomaly from
lo to hi. lo > hi means the interval wraps through apoapsis (f = pi).
Lower bounds lie in [-pi, pi) and upper bounds in (-pi, pi], so the
whole orbit is (-pi, pi).
"""
import math
from dataclasses import dataclass

import numpy as np

from kepler_intercept.domain.orbital_mechanics import (
    TWO_PI,
    clamp_unit,
    is_zero,
    normalize_angle,
    normalize_lower_angle,
)
from kepler_intercept.domain.true_anomaly import true_anomaly_from_radius
from kepler_intercept.ports.orbit_elements import OrbitElements

_MERGE_TOLERANCE = 1e-12  # rad — arcs closer than this are adjoining

FULL_ORBIT = (-math.pi, math.pi)


@dataclass(frozen=True)
class ProximityIntervals:
    """Zero, one or two disjoint true-anomaly intervals on the subject orbit."""
    bounds: tuple[tuple[float, float], ...] = ()

    @property
    def count(self) -> int:
        return len(self.bounds)

    @property
    def angles(self) -> tuple[float, ...]:
        """Flat (lo1, hi1, lo2, hi2) sequence of 0, 2 or 4 angles."""
        return tuple(angle for pair in self.bounds for angle in pair)

    @property
    def is_full_orbit(self) -> bool:
        return self.bounds == (FULL_ORBIT,)

    def contains(self, true_anomaly: float) -> bool:
        f = normalize_angle(true_anomaly)
        for lo, hi in self.bounds:
            if lo <= hi:
                if lo <= f <= hi:
                    return True
            elif f >= lo or f <= hi:
                return True
        return False


def _apsides_disjoint(subject: OrbitElements, reference: OrbitElements, threshold: float) -> bool:
    """True when one closed orbit lies entirely inside the other's periapsis."""
    return (
        (subject.is_closed and subject.apoapsis < reference.periapsis - threshold)
        or (reference.is_closed and reference.apoapsis < subject.periapsis - threshold)
    )


def _altitude_bounds(
    subject: OrbitElements,
    reference: OrbitElements,
    threshold: float,
) -> tuple[float, float]:
    """(f_peri, f_apo): subject anomalies at the inner and outer radius bounds.

    The subject is inside the band for f_peri <= |f| <= f_apo.
    """
    f_peri, f_apo = 0.0, math.pi
    p, e = subject.semi_latus_rectum, subject.eccentricity

    if not subject.is_circular:
        inner = reference.periapsis - threshold
        if inner > 0.0:
            f_peri = true_anomaly_from_radius(p, e, inner)
        if reference.is_closed:
            f_apo = true_anomaly_from_radius(p, e, reference.apoapsis + threshold)

    if not subject.is_closed:
        # radius is unbounded at the asymptote
        f_apo = min(f_apo, math.acos(clamp_unit(-1.0 / e)))

    return f_peri, f_apo


def _altitude_region(
    subject: OrbitElements,
    f_peri: float,
    f_apo: float,
) -> list[tuple[float, float]]:
    """Arcs (start, end), end >= start, where the subject is inside the band."""
    reaches_apoapsis = subject.is_closed and f_apo >= math.pi

    if is_zero(f_peri) and reaches_apoapsis:
        return [FULL_ORBIT]
    if is_zero(f_peri):
        return [(-f_apo, f_apo)]
    if reaches_apoapsis:
        return [(f_peri, TWO_PI - f_peri)]
    if f_peri < f_apo:
        return [(-f_apo, -f_peri), (f_peri, f_apo)]
    return []


def _node_windows(
    subject: OrbitElements,
    nodes: np.ndarray,
    sin_incl: float,
    cos_incl: float,
    threshold: float,
    per_node_radius: bool,
) -> list[tuple[float, float]]:
    """Symmetric anomaly windows around the ascending and descending nodes."""
    tangent = np.asarray(subject.tangent, dtype=float)
    bitangent = np.asarray(subject.bitangent, dtype=float)

    side = -1.0 if float(np.dot(bitangent, nodes)) < 0.0 else 1.0
    f_an = side * math.acos(clamp_unit(float(np.dot(nodes, tangent)) / sin_incl))
    f_dn = f_an - (-1.0 if f_an < 0.0 else 1.0) * math.pi

    rel_incl = math.atan2(sin_incl, cos_incl)
    sin_half_incl = math.sin(0.5 * rel_incl)

    p, e = subject.semi_latus_rectum, subject.eccentricity
    windows = []
    for f_node in sorted((f_an, f_dn)):
        r = subject.periapsis
        if per_node_radius:
            denom = 1.0 + e * math.cos(f_node)
            # node unreachable on an open orbit keeps the periapsis radius
            if denom > 0.0:
                r = p / denom
        half_angle = min(threshold / (2.0 * r), 0.5 * math.pi)
        delta = math.asin(clamp_unit(math.sin(half_angle) / sin_half_incl))
        windows.append((f_node - delta, f_node + delta))
    return windows


def _intersect_arcs(
    arc: tuple[float, float],
    region: tuple[float, float],
) -> list[tuple[float, float]]:
    """Pieces of arc lying on region, both taken modulo 2pi."""
    pieces = []
    for k in (-2, -1, 0, 1, 2):
        lo = max(arc[0], region[0] + k * TWO_PI)
        hi = min(arc[1], region[1] + k * TWO_PI)
        if lo < hi:
            pieces.append((lo, hi))
    return pieces


def _gaps(arcs: list[tuple[float, float]], circular: bool) -> list[tuple[float, int]]:
    """(gap, i) from arc i to the next; arcs sorted by start."""
    gaps = [(arcs[i + 1][0] - arcs[i][1], i) for i in range(len(arcs) - 1)]
    if circular and len(arcs) > 1:
        gaps.append((arcs[0][0] + TWO_PI - arcs[-1][1], len(arcs) - 1))
    return gaps


def _join(arcs: list[tuple[float, float]], i: int) -> None:
    """Replace arc i and its successor by their hull, in place."""
    j = (i + 1) % len(arcs)
    start, end = arcs[i]
    next_end = arcs[j][1] + (TWO_PI if j == 0 else 0.0)
    arcs[i] = (start, min(max(end, next_end), start + TWO_PI))
    del arcs[j]


def _to_intervals(pieces: list[tuple[float, float]], circular: bool) -> ProximityIntervals:
    """Normalize, merge and order arc pieces into at most two intervals.

    Open orbits never pass through f = pi, so their arcs are split there
    instead of joined across it.
    """
    arcs = []
    for start, end in pieces:
        if end <= start:
            continue
        base = normalize_lower_angle(start)
        top = base + min(end - start, TWO_PI)
        if not circular and top > math.pi:
            arcs.append((base, math.pi))
            arcs.append((-math.pi, top - TWO_PI))
        else:
            arcs.append((base, top))
    arcs.sort()

    # Join adjoining arcs, then keep a superset by closing the smallest gaps
    while len(arcs) > 1:
        gap, i = min(_gaps(arcs, circular))
        if gap > _MERGE_TOLERANCE and len(arcs) <= 2:
            break
        _join(arcs, i)

    if circular and any(end - start >= TWO_PI - _MERGE_TOLERANCE for start, end in arcs):
        return ProximityIntervals((FULL_ORBIT,))

    bounds = sorted((start, normalize_angle(end)) for start, end in arcs)
    return ProximityIntervals(tuple(bounds))


def solve(
    subject: OrbitElements,
    reference: OrbitElements,
    threshold: float,
    per_node_radius: bool = False,
) -> ProximityIntervals:
    """
    True-anomaly intervals of subject where it may pass within threshold
    of reference.

    Args:
        subject: Orbit whose anomalies are returned.
        reference: Orbit approached.
        threshold: Proximity distance (m), > 0.
        per_node_radius: Size the node windows with the subject's radius
            at each node instead of its periapsis radius. Tighter, but no
            longer a guaranteed superset on eccentric orbits.

    Returns:
        ProximityIntervals with 0, 1 or 2 intervals. Upper bounds lie in
        (-pi, pi] like every other angle here, but a lower bound may be
        exactly -pi: the whole orbit is (-pi, pi) and an interval starting
        at apoapsis begins at -pi rather than pi.

    Raises:
        ValueError: If threshold is not a positive finite number.
    """
    if not (math.isfinite(threshold) and threshold > 0.0):
        raise ValueError(f"threshold must be positive, got {threshold}")

    if _apsides_disjoint(subject, reference, threshold):
        return ProximityIntervals()

    f_peri, f_apo = _altitude_bounds(subject, reference, threshold)
    region = _altitude_region(subject, f_peri, f_apo)
    circular = subject.is_closed

    n_sub = np.asarray(subject.normal, dtype=float)
    n_ref = np.asarray(reference.normal, dtype=float)
    nodes = np.cross(n_ref, n_sub)  # toward subject's ascending node
    sin_incl = float(np.linalg.norm(nodes))

    if is_zero(sin_incl):
        return _to_intervals(region, circular)

    windows = _node_windows(
        subject, nodes, sin_incl, float(np.dot(n_ref, n_sub)), threshold, per_node_radius,
    )
    pieces = [piece for window in windows for arc in region for piece in _intersect_arcs(window, arc)]
    return _to_intervals(pieces, circular)
