# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Kepler Intercept

Predict when two bodies on independent Kepler orbits can come within a
proximity threshold of each other. Geometric true-anomaly intervals
near the other orbit, time-window scanning over a span, and numerical
refinement of each window to a closest approach.
"""

from kepler_intercept.domain.orbital_mechanics import (
    OrbitalConstants,
    Tolerances,
    normalize_angle,
    clamp_unit,
    perifocal_basis,
)
from kepler_intercept.domain.anomaly import (
    true_to_mean,
    mean_to_true,
)
from kepler_intercept.domain.true_anomaly import (
    true_radius,
    true_anomaly_from_radius,
    true_dfdt,
    true_velocity,
    true_velocity_radial,
    true_velocity_horizontal,
    true_tan_phi,
    true_flight_path_angle,
    true_x,
    true_y,
    true_xdot,
    true_ydot,
)
from kepler_intercept.domain.kepler_orbit import KeplerOrbit
from kepler_intercept.domain.propagation import (
    propagate_to,
    separation_at,
)
from kepler_intercept.domain.proximity import (
    FULL_ORBIT,
    ProximityIntervals,
    solve,
)
from kepler_intercept.domain.intercept import (
    DEFAULT_INTERCEPT_CONFIG,
    InterceptConfig,
    InterceptCandidate,
    Intercept,
    ScanResult,
    default_threshold,
    resolve_threshold,
    scan_windows,
    refine,
    scan,
    find_intercepts,
)
from kepler_intercept.ports import OrbitElements

__all__ = [
    "OrbitalConstants",
    "Tolerances",
    "normalize_angle",
    "clamp_unit",
    "perifocal_basis",
    "true_to_mean",
    "mean_to_true",
    "true_radius",
    "true_anomaly_from_radius",
    "true_dfdt",
    "true_velocity",
    "true_velocity_radial",
    "true_velocity_horizontal",
    "true_tan_phi",
    "true_flight_path_angle",
    "true_x",
    "true_y",
    "true_xdot",
    "true_ydot",
    "KeplerOrbit",
    "propagate_to",
    "separation_at",
    "FULL_ORBIT",
    "ProximityIntervals",
    "solve",
    "DEFAULT_INTERCEPT_CONFIG",
    "InterceptConfig",
    "InterceptCandidate",
    "Intercept",
    "ScanResult",
    "default_threshold",
    "resolve_threshold",
    "scan_windows",
    "refine",
    "scan",
    "find_intercepts",
    "OrbitElements",
]
