# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Intercept search between two Keplerian orbits over a time span.

Three stages:
1. proximity.solve gives each orbit's true-anomaly intervals near the other.
2. scan_windows converts them to absolute time windows (tiled by period
   for closed orbits) and merges the two window streams into candidate
   windows where both orbits are simultaneously in range.
3. refine minimizes the true separation inside each candidate and keeps
   it only if the minimum is within the threshold.

Candidates are a superset; rejection by refine is routine.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterator

import numpy as np

from kepler_intercept.domain.propagation import separation_at
from kepler_intercept.domain.proximity import ProximityIntervals, solve
from kepler_intercept.domain.true_anomaly import true_velocity
from kepler_intercept.ports.orbit_elements import OrbitElements

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterceptConfig:
    """Tunables for the intercept pipeline.

    Attributes:
        threshold_ratio: Default threshold as a fraction of the smaller
            semi-latus rectum of the pair.
        threshold_m: Absolute threshold (m); overrides threshold_ratio.
        per_node_radius: Size inclined node windows with the radius at each
            node rather than the periapsis radius.
        refine_samples: Minimum number of uniform samples per window; the
            closing speed bound may call for more.
        time_tolerance_fraction: Bracket width to stop at, as a fraction of
            the shorter orbital time scale (2pi / mean motion).
        max_iterations: Golden-section iteration cap.
    """
    threshold_ratio: float = 1.0 / 1000.0
    threshold_m: float | None = None
    per_node_radius: bool = False
    refine_samples: int = 16
    time_tolerance_fraction: float = 1e-9
    max_iterations: int = 200


DEFAULT_INTERCEPT_CONFIG = InterceptConfig()


@dataclass(frozen=True)
class InterceptCandidate:
    """Time window where both orbits are within their proximity intervals."""
    t_begin: float
    t_end: float


@dataclass(frozen=True)
class Intercept:
    """Confirmed closest approach within the threshold."""
    time_s: float
    position_a: tuple[float, float, float]
    position_b: tuple[float, float, float]
    separation_m: float
    relative_velocity_ms: float


@dataclass(frozen=True)
class ScanResult:
    """Outcome of scanning one orbit pair over [t0, t1)."""
    found: bool
    threshold_m: float
    candidates: tuple[InterceptCandidate, ...]
    intercepts: tuple[Intercept, ...]


def default_threshold(
    orbit_a: OrbitElements,
    orbit_b: OrbitElements,
    ratio: float = DEFAULT_INTERCEPT_CONFIG.threshold_ratio,
) -> float:
    """ratio x the smaller semi-latus rectum of the pair (m)."""
    return ratio * min(orbit_a.semi_latus_rectum, orbit_b.semi_latus_rectum)


def resolve_threshold(
    orbit_a: OrbitElements,
    orbit_b: OrbitElements,
    config: InterceptConfig = DEFAULT_INTERCEPT_CONFIG,
) -> float:
    if config.threshold_m is not None:
        return config.threshold_m
    return default_threshold(orbit_a, orbit_b, config.threshold_ratio)


def _check_span(t0: float, t1: float) -> None:
    if not (math.isfinite(t0) and math.isfinite(t1)):
        raise ValueError(f"time span must be finite, got [{t0}, {t1})")
    if t0 >= t1:
        raise ValueError(f"t0 must precede t1, got [{t0}, {t1})")


def _base_windows(orbit: OrbitElements, intervals: ProximityIntervals) -> list[tuple[float, float]]:
    """Time windows of each interval on the pass nearest periapsis_time."""
    n = orbit.mean_motion
    windows = []
    for lo, hi in intervals.bounds:
        start = orbit.periapsis_time + orbit.mean_anomaly(lo) / n
        end = orbit.periapsis_time + orbit.mean_anomaly(hi) / n
        if start > end:
            # interval wraps through apoapsis: begins on the previous revolution
            start -= orbit.period
        windows.append((start, end))
    windows.sort()
    return windows


def _window_stream(
    orbit: OrbitElements,
    windows: list[tuple[float, float]],
    t0: float,
) -> Iterator[tuple[float, float]]:
    """Time-ordered absolute windows, starting no later than t0.

    Closed orbits repeat every period indefinitely; open orbits have one pass.
    """
    if not orbit.is_closed:
        yield from windows
        return

    period = orbit.period
    revolution = math.floor((t0 - orbit.periapsis_time) / period) - 1
    while True:
        offset = revolution * period
        for start, end in windows:
            yield start + offset, end + offset
        revolution += 1


def scan_windows(
    orbit_a: OrbitElements,
    orbit_b: OrbitElements,
    t0: float,
    t1: float,
    threshold: float,
    per_node_radius: bool = False,
) -> list[InterceptCandidate]:
    """
    Candidate windows in [t0, t1) where both orbits may be within threshold.

    Args:
        orbit_a: First orbit.
        orbit_b: Second orbit.
        t0: Start of the span (s).
        t1: End of the span (s), exclusive.
        threshold: Proximity distance (m).
        per_node_radius: See proximity.solve.

    Returns:
        Time-ordered, non-overlapping candidates. Empty if either orbit
        never comes within threshold of the other's path.

    Raises:
        ValueError: If threshold <= 0 or the span is empty or not finite.
    """
    _check_span(t0, t1)

    intervals_a = solve(orbit_a, orbit_b, threshold, per_node_radius)
    intervals_b = solve(orbit_b, orbit_a, threshold, per_node_radius)
    if intervals_a.count == 0 or intervals_b.count == 0:
        logger.debug(
            "Orbits disjoint at threshold %.6g m (%d / %d intervals)",
            threshold, intervals_a.count, intervals_b.count,
        )
        return []

    stream_a = _window_stream(orbit_a, _base_windows(orbit_a, intervals_a), t0)
    stream_b = _window_stream(orbit_b, _base_windows(orbit_b, intervals_b), t0)

    candidates: list[InterceptCandidate] = []
    window_a = next(stream_a, None)
    window_b = next(stream_b, None)
    while window_a is not None and window_b is not None:
        if window_a[0] >= t1 or window_b[0] >= t1:
            break

        t_begin = max(t0, window_a[0], window_b[0])
        t_end = min(t1, window_a[1], window_b[1])
        if t_begin < t_end:
            logger.debug("Candidate window [%.6f, %.6f]", t_begin, t_end)
            candidates.append(InterceptCandidate(t_begin, t_end))

        # advance whichever window ends first
        if window_a[1] < window_b[1]:
            window_a = next(stream_a, None)
        else:
            window_b = next(stream_b, None)

    return candidates


def _time_tolerance(
    orbit_a: OrbitElements,
    orbit_b: OrbitElements,
    config: InterceptConfig,
) -> float:
    time_scale = 2.0 * math.pi / max(orbit_a.mean_motion, orbit_b.mean_motion)
    return config.time_tolerance_fraction * time_scale


def _peak_speed(orbit: OrbitElements) -> float:
    """Periapsis speed, the fastest point of any conic (m/s)."""
    return true_velocity(orbit.mu, orbit.semi_latus_rectum, orbit.eccentricity, 0.0)


def _golden_section(
    distance: Callable[[float], float],
    a_s: float,
    b_s: float,
    tolerance: float,
    max_iterations: int,
) -> tuple[float, float]:
    """Golden-section minimum of distance on [a_s, b_s] as (t, d)."""
    golden_ratio = (math.sqrt(5) - 1) / 2

    c_s = b_s - golden_ratio * (b_s - a_s)
    d_s = a_s + golden_ratio * (b_s - a_s)
    fc = distance(c_s)
    fd = distance(d_s)

    iterations = 0
    while (b_s - a_s) > tolerance:
        if iterations >= max_iterations:
            logger.warning(
                "Refinement stopped after %d iterations with bracket %.3g s (tolerance %.3g s)",
                iterations, b_s - a_s, tolerance,
            )
            break
        if fc < fd:
            b_s, d_s, fd = d_s, c_s, fc
            c_s = b_s - golden_ratio * (b_s - a_s)
            fc = distance(c_s)
        else:
            a_s, c_s, fc = c_s, d_s, fd
            d_s = a_s + golden_ratio * (b_s - a_s)
            fd = distance(d_s)
        iterations += 1

    t_min = (a_s + b_s) / 2.0
    return t_min, distance(t_min)


def refine(
    orbit_a: OrbitElements,
    orbit_b: OrbitElements,
    threshold: float,
    t_begin: float,
    t_end: float,
    config: InterceptConfig = DEFAULT_INTERCEPT_CONFIG,
) -> Intercept | None:
    """
    Minimize the separation of two orbits within [t_begin, t_end].

    The separation changes no faster than the closing speed bound
    v_max = peak speed of A + peak speed of B. Sampling with a step of at
    most threshold / v_max therefore leaves no sub-threshold dip unseen:
    every sample interval whose Lipschitz lower bound
    (d_j + d_j+1 - v_max * step) / 2 is within the threshold gets its own
    golden-section search, lowest bound first, and the best result wins.

    Args:
        orbit_a: First orbit.
        orbit_b: Second orbit.
        threshold: Maximum separation to accept (m).
        t_begin: Window start (s).
        t_end: Window end (s).
        config: Sampling, tolerance and iteration settings.

    Returns:
        Intercept at the minimizing time, or None if the minimum
        separation exceeds threshold.

    Raises:
        ValueError: If threshold <= 0 or the window is empty or not finite.
    """
    if not (math.isfinite(threshold) and threshold > 0.0):
        raise ValueError(f"threshold must be positive, got {threshold}")
    _check_span(t_begin, t_end)

    def distance(t: float) -> float:
        return separation_at(orbit_a, orbit_b, t)[0]

    closing_speed = _peak_speed(orbit_a) + _peak_speed(orbit_b)
    span = t_end - t_begin
    n_samples = max(config.refine_samples, 3, math.ceil(span * closing_speed / threshold) + 1)
    samples = np.linspace(t_begin, t_end, n_samples)
    sample_dists = np.array([distance(float(t)) for t in samples])
    step = span / (n_samples - 1)

    best = int(np.argmin(sample_dists))
    t_min = float(samples[best])
    d_min = float(sample_dists[best])
    tolerance = _time_tolerance(orbit_a, orbit_b, config)

    # below this the time tolerance cannot resolve a closer approach
    resolution = closing_speed * tolerance
    lower_bounds = 0.5 * (sample_dists[:-1] + sample_dists[1:] - closing_speed * step)
    for j in np.argsort(lower_bounds, kind="stable"):
        # sorted, so no later interval can do better
        if lower_bounds[j] > threshold or lower_bounds[j] >= d_min or d_min <= resolution:
            break
        t, d = _golden_section(
            distance, float(samples[j]), float(samples[j + 1]),
            tolerance, config.max_iterations,
        )
        if d < d_min:
            t_min, d_min = t, d

    logger.debug(
        "Window [%.6f, %.6f]: %d samples, closing speed bound %.6g m/s",
        t_begin, t_end, n_samples, closing_speed,
    )
    dist, pos_a, vel_a, pos_b, vel_b = separation_at(orbit_a, orbit_b, t_min)
    if dist > threshold:
        logger.debug(
            "Window [%.6f, %.6f] rejected: minimum separation %.6g m > %.6g m",
            t_begin, t_end, dist, threshold,
        )
        return None

    rel_vel = float(np.linalg.norm(np.array(vel_a) - np.array(vel_b)))
    logger.debug("Intercept at t=%.6f, separation %.6g m", t_min, dist)
    return Intercept(
        time_s=t_min,
        position_a=tuple(pos_a),
        position_b=tuple(pos_b),
        separation_m=dist,
        relative_velocity_ms=rel_vel,
    )


def scan(
    orbit_a: OrbitElements,
    orbit_b: OrbitElements,
    t0: float,
    t1: float,
    config: InterceptConfig = DEFAULT_INTERCEPT_CONFIG,
) -> ScanResult:
    """
    Find confirmed intercepts between two orbits in [t0, t1).

    Every candidate window from scan_windows is refined; found is True
    when at least one refinement falls within the threshold.

    Args:
        orbit_a: First orbit.
        orbit_b: Second orbit.
        t0: Start of the span (s).
        t1: End of the span (s), exclusive.
        config: Threshold policy and refinement settings.

    Returns:
        ScanResult with the threshold used, all candidates and the
        confirmed intercepts in time order.
    """
    threshold = resolve_threshold(orbit_a, orbit_b, config)
    candidates = scan_windows(orbit_a, orbit_b, t0, t1, threshold, config.per_node_radius)

    # adjoining candidates can converge on their shared boundary
    duplicate_gap = 10.0 * _time_tolerance(orbit_a, orbit_b, config)
    intercepts: list[Intercept] = []
    for candidate in candidates:
        hit = refine(orbit_a, orbit_b, threshold, candidate.t_begin, candidate.t_end, config)
        if hit is None:
            continue
        if intercepts and hit.time_s - intercepts[-1].time_s <= duplicate_gap:
            if hit.separation_m < intercepts[-1].separation_m:
                intercepts[-1] = hit
            continue
        intercepts.append(hit)

    logger.info(
        "Scanned [%.3f, %.3f): %d candidate window(s), %d intercept(s) within %.6g m",
        t0, t1, len(candidates), len(intercepts), threshold,
    )
    return ScanResult(
        found=bool(intercepts),
        threshold_m=threshold,
        candidates=tuple(candidates),
        intercepts=tuple(intercepts),
    )


def find_intercepts(
    orbit_a: OrbitElements,
    orbit_b: OrbitElements,
    t0: float,
    t1: float,
    config: InterceptConfig = DEFAULT_INTERCEPT_CONFIG,
) -> list[Intercept]:
    """Confirmed intercepts between two orbits in [t0, t1)."""
    return list(scan(orbit_a, orbit_b, t0, t1, config).intercepts)
