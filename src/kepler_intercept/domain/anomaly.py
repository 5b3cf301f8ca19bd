# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Kepler's equation: true anomaly <-> mean anomaly.

Elliptic orbits go through the eccentric anomaly E (M = E - e sin E),
hyperbolic orbits through the hyperbolic anomaly H (M = e sinh H - H) and
parabolic orbits through Barker's equation (M = D + D³/3, D = tan(f/2)).
The mean anomaly of open orbits is unbounded; multiplying it by
1/mean_motion gives time since periapsis for every conic.
"""
import logging
import math

from kepler_intercept.domain.orbital_mechanics import Tolerances, normalize_angle

logger = logging.getLogger(__name__)


def _is_parabolic(e: float) -> bool:
    return abs(e - 1.0) <= Tolerances.PARABOLIC_BAND


def true_to_mean(e: float, f: float) -> float:
    """
    Mean anomaly for a true anomaly f in [-pi, pi].

    Elliptic results lie in [-pi, pi] with the sign of f. On a hyperbola,
    anomalies at or beyond the asymptote map to +/- inf.

    Args:
        e: Eccentricity (>= 0).
        f: True anomaly (radians).

    Returns:
        Mean anomaly (radians).
    """
    if _is_parabolic(e):
        d = math.tan(0.5 * f)
        return d + d**3 / 3.0

    if e < 1.0:
        ecc_anomaly = 2.0 * math.atan2(
            math.sqrt(1.0 - e) * math.sin(0.5 * f),
            math.sqrt(1.0 + e) * math.cos(0.5 * f),
        )
        return ecc_anomaly - e * math.sin(ecc_anomaly)

    x = math.sqrt((e - 1.0) / (e + 1.0)) * math.tan(0.5 * f)
    if abs(x) >= 1.0:
        return math.copysign(math.inf, f)
    hyp_anomaly = 2.0 * math.atanh(x)
    return e * math.sinh(hyp_anomaly) - hyp_anomaly


def _solve_elliptic(e: float, mean_anomaly: float, tolerance: float, max_iterations: int) -> float:
    """Newton iteration on E - e sin E = M, M in (-pi, pi]."""
    ecc_anomaly = mean_anomaly if e < 0.8 else math.copysign(math.pi, mean_anomaly)
    for _ in range(max_iterations):
        step = (ecc_anomaly - e * math.sin(ecc_anomaly) - mean_anomaly) / (1.0 - e * math.cos(ecc_anomaly))
        ecc_anomaly -= step
        if abs(step) < tolerance:
            return ecc_anomaly
    logger.warning(
        "Elliptic Kepler iteration did not converge (e=%.6g, M=%.6g, last step %.3g)",
        e, mean_anomaly, step,
    )
    return ecc_anomaly


def _solve_hyperbolic(e: float, mean_anomaly: float, tolerance: float, max_iterations: int) -> float:
    """Newton iteration on e sinh H - H = M."""
    hyp_anomaly = math.copysign(math.log(2.0 * abs(mean_anomaly) / e + 1.8), mean_anomaly)
    for _ in range(max_iterations):
        step = (e * math.sinh(hyp_anomaly) - hyp_anomaly - mean_anomaly) / (e * math.cosh(hyp_anomaly) - 1.0)
        hyp_anomaly -= step
        if abs(step) < tolerance * max(1.0, abs(hyp_anomaly)):
            return hyp_anomaly
    logger.warning(
        "Hyperbolic Kepler iteration did not converge (e=%.6g, M=%.6g, last step %.3g)",
        e, mean_anomaly, step,
    )
    return hyp_anomaly


def mean_to_true(
    e: float,
    mean_anomaly: float,
    tolerance: float = Tolerances.KEPLER_TOLERANCE,
    max_iterations: int = Tolerances.KEPLER_MAX_ITERATIONS,
) -> float:
    """
    True anomaly for a mean anomaly.

    Elliptic mean anomalies are wrapped into (-pi, pi] first, so the
    result is always in (-pi, pi]. Open orbits accept any real M and
    return an anomaly strictly inside the asymptotes.

    Args:
        e: Eccentricity (>= 0).
        mean_anomaly: Mean anomaly (radians).
        tolerance: Newton convergence tolerance (radians).
        max_iterations: Newton iteration cap.

    Returns:
        True anomaly (radians).
    """
    if _is_parabolic(e):
        # Barker: D + D³/3 = M has the single real root D = y - 1/y
        m = abs(mean_anomaly)
        y = (1.5 * m + math.sqrt(2.25 * m * m + 1.0)) ** (1.0 / 3.0)
        return math.copysign(2.0 * math.atan(y - 1.0 / y), mean_anomaly)

    if e < 1.0:
        m = normalize_angle(mean_anomaly)
        ecc_anomaly = _solve_elliptic(e, m, tolerance, max_iterations)
        f = 2.0 * math.atan2(
            math.sqrt(1.0 + e) * math.sin(0.5 * ecc_anomaly),
            math.sqrt(1.0 - e) * math.cos(0.5 * ecc_anomaly),
        )
        return normalize_angle(f)

    if math.isinf(mean_anomaly):
        return math.copysign(math.acos(-1.0 / e), mean_anomaly)
    hyp_anomaly = _solve_hyperbolic(e, mean_anomaly, tolerance, max_iterations)
    return 2.0 * math.atan(math.sqrt((e + 1.0) / (e - 1.0)) * math.tanh(0.5 * hyp_anomaly))
