# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Conic kinematics as functions of true anomaly.

Stateless formulas over (mu, p, e, f). Positions and velocities are in
the perifocal plane: x toward periapsis, y along the direction of motion
at periapsis.
"""
import math

from kepler_intercept.domain.orbital_mechanics import clamp_unit


def true_radius(p: float, e: float, f: float) -> float:
    """Orbital radius r = p / (1 + e cos f)."""
    return p / (1.0 + e * math.cos(f))


def true_anomaly_from_radius(p: float, e: float, r: float) -> float:
    """
    Non-negative true anomaly at which the orbit reaches radius r.

    Radii outside the orbit's range clamp to periapsis (0) or
    apoapsis (pi).

    Raises:
        ValueError: If e is zero (every anomaly has the same radius) or r <= 0.
    """
    if e == 0.0:
        raise ValueError("true anomaly is undefined by radius on a circular orbit")
    if r <= 0.0:
        raise ValueError(f"radius must be positive, got {r}")
    return math.acos(clamp_unit((p / r - 1.0) / e))


def true_dfdt(mu: float, p: float, e: float, f: float) -> float:
    """Angular rate df/dt (rad/s)."""
    return math.sqrt(mu / p**3) * (1.0 + e * math.cos(f)) ** 2


def true_velocity_radial(mu: float, p: float, e: float, f: float) -> float:
    """Radial velocity component (m/s)."""
    return math.sqrt(mu / p) * e * math.sin(f)


def true_velocity_horizontal(mu: float, p: float, e: float, f: float) -> float:
    """Transverse velocity component (m/s)."""
    return math.sqrt(mu / p) * (1.0 + e * math.cos(f))


def true_velocity(mu: float, p: float, e: float, f: float) -> float:
    """Speed (m/s)."""
    return math.sqrt(mu / p) * math.sqrt(1.0 + 2.0 * e * math.cos(f) + e * e)


def true_tan_phi(e: float, f: float) -> float:
    """Tangent of the flight-path angle."""
    return e * math.sin(f) / (1.0 + e * math.cos(f))


def true_flight_path_angle(e: float, f: float) -> float:
    """Flight-path angle above the local horizontal (radians)."""
    return math.atan2(e * math.sin(f), 1.0 + e * math.cos(f))


def true_x(p: float, e: float, f: float) -> float:
    return true_radius(p, e, f) * math.cos(f)


def true_y(p: float, e: float, f: float) -> float:
    return true_radius(p, e, f) * math.sin(f)


def true_xdot(mu: float, p: float, e: float, f: float) -> float:
    return -math.sqrt(mu / p) * math.sin(f)


def true_ydot(mu: float, p: float, e: float, f: float) -> float:
    return math.sqrt(mu / p) * (e + math.cos(f))
