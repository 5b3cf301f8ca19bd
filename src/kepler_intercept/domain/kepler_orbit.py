# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Two-body conic orbit described by its shape, frame and periapsis epoch.

KeplerOrbit implements the OrbitElements port. Times are seconds on an
arbitrary caller-chosen scale; only differences matter.
"""
import math
from dataclasses import dataclass

import numpy as np

from kepler_intercept.domain.anomaly import mean_to_true, true_to_mean
from kepler_intercept.domain.orbital_mechanics import (
    OrbitalConstants,
    Tolerances,
    is_zero,
    perifocal_basis,
)


@dataclass(frozen=True)
class KeplerOrbit:
    """Immutable Keplerian orbit.

    Attributes:
        semi_latus_rectum: Conic parameter p (m).
        eccentricity: e >= 0.
        normal: Unit angular momentum direction.
        tangent: Unit vector from the focus toward periapsis.
        periapsis_time: Time of a periapsis passage (s).
        mu: Gravitational parameter of the central body (m³/s²).
    """
    semi_latus_rectum: float
    eccentricity: float
    normal: tuple[float, float, float]
    tangent: tuple[float, float, float]
    periapsis_time: float = 0.0
    mu: float = OrbitalConstants.MU_EARTH

    def __post_init__(self) -> None:
        p, e = self.semi_latus_rectum, self.eccentricity
        if not (math.isfinite(p) and p > 0.0):
            raise ValueError(f"semi_latus_rectum must be positive and finite, got {p}")
        if not (math.isfinite(e) and e >= 0.0):
            raise ValueError(f"eccentricity must be non-negative and finite, got {e}")
        if not (math.isfinite(self.mu) and self.mu > 0.0):
            raise ValueError(f"mu must be positive, got {self.mu}")
        if not math.isfinite(self.periapsis_time):
            raise ValueError(f"periapsis_time must be finite, got {self.periapsis_time}")

        n_vec = np.asarray(self.normal, dtype=float)
        t_vec = np.asarray(self.tangent, dtype=float)
        if n_vec.shape != (3,) or t_vec.shape != (3,):
            raise ValueError("normal and tangent must be 3-vectors")
        tol = Tolerances.ORTHONORMAL_TOLERANCE
        if (abs(float(np.linalg.norm(n_vec)) - 1.0) > tol
                or abs(float(np.linalg.norm(t_vec)) - 1.0) > tol
                or abs(float(np.dot(n_vec, t_vec))) > tol):
            raise ValueError(
                f"orbital frame is not orthonormal: normal={self.normal}, tangent={self.tangent}"
            )
        object.__setattr__(self, "normal", tuple(float(x) for x in n_vec))
        object.__setattr__(self, "tangent", tuple(float(x) for x in t_vec))

    # ── Classification ──────────────────────────────────────────────

    @property
    def is_circular(self) -> bool:
        return is_zero(self.eccentricity)

    @property
    def is_parabolic(self) -> bool:
        return abs(self.eccentricity - 1.0) <= Tolerances.PARABOLIC_BAND

    @property
    def is_closed(self) -> bool:
        return self.eccentricity < 1.0 - Tolerances.PARABOLIC_BAND

    @property
    def is_hyperbolic(self) -> bool:
        return self.eccentricity > 1.0 + Tolerances.PARABOLIC_BAND

    # ── Geometry ────────────────────────────────────────────────────

    @property
    def bitangent(self) -> tuple[float, float, float]:
        return tuple(float(x) for x in np.cross(self.normal, self.tangent))

    @property
    def periapsis(self) -> float:
        return self.semi_latus_rectum / (1.0 + self.eccentricity)

    @property
    def apoapsis(self) -> float:
        if not self.is_closed:
            return math.inf
        return self.semi_latus_rectum / (1.0 - self.eccentricity)

    @property
    def semi_major_axis(self) -> float:
        """Semi-major axis (m); negative for hyperbolas, inf for parabolas."""
        if self.is_parabolic:
            return math.inf
        return self.semi_latus_rectum / (1.0 - self.eccentricity**2)

    @property
    def asymptote_true_anomaly(self) -> float:
        """Limiting |f| of an open orbit; pi for closed orbits."""
        if self.is_closed:
            return math.pi
        return math.acos(max(-1.0, -1.0 / self.eccentricity))

    # ── Time ────────────────────────────────────────────────────────

    @property
    def mean_motion(self) -> float:
        p = self.semi_latus_rectum
        if self.is_parabolic:
            return 2.0 * math.sqrt(self.mu / p**3)
        a = abs(self.semi_major_axis)
        return math.sqrt(self.mu / a**3)

    @property
    def period(self) -> float:
        if not self.is_closed:
            raise ValueError(f"open orbit (e={self.eccentricity}) has no period")
        return 2.0 * math.pi / self.mean_motion

    def mean_anomaly(self, true_anomaly: float) -> float:
        return true_to_mean(self.eccentricity, true_anomaly)

    def true_anomaly(self, mean_anomaly: float) -> float:
        return mean_to_true(self.eccentricity, mean_anomaly)

    def time_at(self, true_anomaly: float) -> float:
        """Time of the passage through true_anomaly nearest periapsis_time."""
        return self.periapsis_time + self.mean_anomaly(true_anomaly) / self.mean_motion

    def true_anomaly_at(self, t: float) -> float:
        return self.true_anomaly(self.mean_motion * (t - self.periapsis_time))

    # ── Construction ────────────────────────────────────────────────

    @classmethod
    def from_classical(
        cls,
        semi_latus_rectum_m: float,
        eccentricity: float,
        inclination_rad: float,
        raan_rad: float,
        arg_perigee_rad: float,
        periapsis_time_s: float = 0.0,
        mu: float = OrbitalConstants.MU_EARTH,
    ) -> "KeplerOrbit":
        """Build an orbit from classical angular elements."""
        p_hat, _, w_hat = perifocal_basis(inclination_rad, raan_rad, arg_perigee_rad)
        return cls(
            semi_latus_rectum=semi_latus_rectum_m,
            eccentricity=eccentricity,
            normal=tuple(w_hat.tolist()),
            tangent=tuple(p_hat.tolist()),
            periapsis_time=periapsis_time_s,
            mu=mu,
        )

    @classmethod
    def from_state(
        cls,
        position: list[float],
        velocity: list[float],
        time_s: float = 0.0,
        mu: float = OrbitalConstants.MU_EARTH,
    ) -> "KeplerOrbit":
        """
        Build an orbit from an inertial state vector.

        A circular orbit has no periapsis; the position at time_s is used
        as its reference direction, so periapsis_time equals time_s.

        Raises:
            ValueError: If the state is rectilinear (zero angular momentum).
        """
        r_vec = np.asarray(position, dtype=float)
        v_vec = np.asarray(velocity, dtype=float)
        r_mag = float(np.linalg.norm(r_vec))
        h_vec = np.cross(r_vec, v_vec)
        h_mag = float(np.linalg.norm(h_vec))
        if r_mag == 0.0 or h_mag == 0.0:
            raise ValueError("state vector has zero angular momentum")

        normal = h_vec / h_mag
        p = h_mag**2 / mu
        e_vec = np.cross(v_vec, h_vec) / mu - r_vec / r_mag
        e = float(np.linalg.norm(e_vec))

        if is_zero(e):
            return cls(p, 0.0, tuple(normal.tolist()), tuple((r_vec / r_mag).tolist()), time_s, mu)

        tangent = e_vec / e
        # Remove drift so the frame passes the orthonormality check
        tangent = tangent - float(np.dot(tangent, normal)) * normal
        tangent /= float(np.linalg.norm(tangent))
        orbit = cls(p, e, tuple(normal.tolist()), tuple(tangent.tolist()), 0.0, mu)

        bitangent = np.cross(normal, tangent)
        f = math.atan2(float(np.dot(r_vec, bitangent)), float(np.dot(r_vec, tangent)))
        t_p = time_s - orbit.mean_anomaly(f) / orbit.mean_motion
        return cls(p, e, orbit.normal, orbit.tangent, t_p, mu)
