# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for external collaborators.

The intercept pipeline depends on these protocols, not on KeplerOrbit.
"""
from kepler_intercept.ports.orbit_elements import OrbitElements

__all__ = ["OrbitElements"]
