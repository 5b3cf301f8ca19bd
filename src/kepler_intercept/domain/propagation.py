# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Keplerian propagation of an orbit to an absolute time.

Time -> mean anomaly -> true anomaly (Kepler's equation), then the
perifocal position/velocity rotated by the orbit's frame vectors.
"""
import numpy as np

from kepler_intercept.domain.true_anomaly import true_x, true_xdot, true_y, true_ydot
from kepler_intercept.ports.orbit_elements import OrbitElements


def propagate_to(
    orbit: OrbitElements,
    t: float,
) -> tuple[list[float], list[float]]:
    """
    Propagate an orbit to time t.

    Args:
        orbit: Orbit implementing OrbitElements.
        t: Absolute time (s), same scale as orbit.periapsis_time.

    Returns:
        (position [x,y,z] in m, velocity [vx,vy,vz] in m/s)
    """
    p = orbit.semi_latus_rectum
    e = orbit.eccentricity
    mu = orbit.mu
    f = orbit.true_anomaly(orbit.mean_motion * (t - orbit.periapsis_time))

    p_hat = np.asarray(orbit.tangent, dtype=float)
    q_hat = np.asarray(orbit.bitangent, dtype=float)

    pos = true_x(p, e, f) * p_hat + true_y(p, e, f) * q_hat
    vel = true_xdot(mu, p, e, f) * p_hat + true_ydot(mu, p, e, f) * q_hat
    return pos.tolist(), vel.tolist()


def separation_at(
    orbit_a: OrbitElements,
    orbit_b: OrbitElements,
    t: float,
) -> tuple[float, list[float], list[float], list[float], list[float]]:
    """Distance between two orbits at time t.

    Returns (distance, pos_a, vel_a, pos_b, vel_b).
    """
    pos_a, vel_a = propagate_to(orbit_a, t)
    pos_b, vel_b = propagate_to(orbit_b, t)
    dist = float(np.linalg.norm(np.array(pos_a) - np.array(pos_b)))
    return dist, pos_a, vel_a, pos_b, vel_b
