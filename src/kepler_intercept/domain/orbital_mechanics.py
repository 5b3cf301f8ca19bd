# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbital mechanics primitives.

Physical constants, numerical tolerances, angle wraparound and the
perifocal frame rotation shared by every other domain module.
"""
import math
import sys
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class _OrbitalConstants:
    """Standard orbital constants (IAU/WGS84 values)."""
    MU_EARTH: float = 3.986004418e14   # m³/s² — gravitational parameter
    R_EARTH: float = 6_371_000          # m — mean radius


OrbitalConstants: _OrbitalConstants = _OrbitalConstants()


@dataclass(frozen=True)
class _Tolerances:
    """Numerical tolerances for orbit classification and Kepler solvers."""
    EPSILON: float = sys.float_info.epsilon      # squared-magnitude zero test
    PARABOLIC_BAND: float = 1e-9                 # |e - 1| below this is parabolic
    KEPLER_TOLERANCE: float = 1e-14              # rad — Newton step size
    KEPLER_MAX_ITERATIONS: int = 50
    ORTHONORMAL_TOLERANCE: float = 1e-9


Tolerances: _Tolerances = _Tolerances()

TWO_PI = 2.0 * math.pi


def is_zero(x: float) -> bool:
    """True when x*x is below machine epsilon."""
    return x * x < Tolerances.EPSILON


def clamp_unit(x: float) -> float:
    """Clamp x to [-1, 1] ahead of an inverse trig call."""
    return -1.0 if x < -1.0 else (1.0 if x > 1.0 else x)


def normalize_angle(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    wrapped = math.remainder(angle, TWO_PI)
    if wrapped <= -math.pi:
        wrapped += TWO_PI
    return wrapped


def normalize_lower_angle(angle: float) -> float:
    """Wrap an angle into [-pi, pi), the range used for interval starts."""
    return -normalize_angle(-angle)


def perifocal_basis(
    i_rad: float,
    omega_big_rad: float,
    omega_small_rad: float,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Perifocal unit vectors (P, Q, W) in the inertial frame.

    P points at periapsis, W along the angular momentum and Q = W x P.

    Args:
        i_rad: Inclination (radians)
        omega_big_rad: RAAN / longitude of ascending node (radians)
        omega_small_rad: Argument of periapsis (radians)

    Returns:
        (P, Q, W) as numpy 3-vectors.
    """
    cO = math.cos(omega_big_rad)
    sO = math.sin(omega_big_rad)
    co = math.cos(omega_small_rad)
    so = math.sin(omega_small_rad)
    ci = math.cos(i_rad)
    si = math.sin(i_rad)

    p_hat = np.array([cO * co - sO * so * ci, sO * co + cO * so * ci, so * si])
    q_hat = np.array([-cO * so - sO * co * ci, -sO * so + cO * co * ci, co * si])
    w_hat = np.array([sO * si, -cO * si, ci])
    return p_hat, q_hat, w_hat
