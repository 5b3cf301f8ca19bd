# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for orbital element providers.

The proximity solver, scanner and refiner only read these accessors.
KeplerOrbit is the in-tree implementation.
"""
from typing import Protocol, runtime_checkable


@runtime_checkable
class OrbitElements(Protocol):
    """Read-only conic orbit with an orthonormal orbital frame."""

    @property
    def semi_latus_rectum(self) -> float:
        """Conic parameter p (m)."""
        ...

    @property
    def eccentricity(self) -> float:
        ...

    @property
    def periapsis(self) -> float:
        """Periapsis radius (m)."""
        ...

    @property
    def apoapsis(self) -> float:
        """Apoapsis radius (m), math.inf for open orbits."""
        ...

    @property
    def is_circular(self) -> bool:
        ...

    @property
    def is_closed(self) -> bool:
        ...

    @property
    def is_hyperbolic(self) -> bool:
        ...

    @property
    def is_parabolic(self) -> bool:
        ...

    @property
    def normal(self) -> tuple[float, float, float]:
        """Unit angular momentum direction."""
        ...

    @property
    def tangent(self) -> tuple[float, float, float]:
        """Unit vector toward periapsis."""
        ...

    @property
    def bitangent(self) -> tuple[float, float, float]:
        """normal x tangent."""
        ...

    @property
    def mu(self) -> float:
        """Gravitational parameter (m³/s²)."""
        ...

    @property
    def mean_motion(self) -> float:
        """Mean motion (rad/s)."""
        ...

    @property
    def period(self) -> float:
        """Orbital period (s); closed orbits only."""
        ...

    @property
    def periapsis_time(self) -> float:
        """Epoch of a periapsis passage (s)."""
        ...

    def mean_anomaly(self, true_anomaly: float) -> float:
        """Mean anomaly for a true anomaly."""
        ...

    def true_anomaly(self, mean_anomaly: float) -> float:
        """True anomaly for a mean anomaly."""
        ...
