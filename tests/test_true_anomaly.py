# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for closed-form quantities of the orbit as a function of true anomaly."""
import math

import pytest

from kepler_intercept.domain.orbital_mechanics import OrbitalConstants
from kepler_intercept.domain.true_anomaly import (
    true_anomaly_from_radius,
    true_dfdt,
    true_flight_path_angle,
    true_radius,
    true_tan_phi,
    true_velocity,
    true_velocity_horizontal,
    true_velocity_radial,
    true_x,
    true_xdot,
    true_y,
    true_ydot,
)

MU = OrbitalConstants.MU_EARTH
P = 10_000_000.0


class TestRadius:

    def test_periapsis_and_apoapsis(self):
        e = 0.4
        assert true_radius(P, e, 0.0) == pytest.approx(P / 1.4)
        assert true_radius(P, e, math.pi) == pytest.approx(P / 0.6)

    def test_circle_is_constant(self):
        for f in (-2.0, 0.0, 1.0, 3.0):
            assert true_radius(P, 0.0, f) == P

    @pytest.mark.parametrize("e,f", [(0.1, 0.3), (0.5, 2.0), (0.9, 1.0), (1.0, 1.5), (2.0, 0.7)])
    def test_inverse_of_radius(self, e, f):
        r = true_radius(P, e, f)
        assert true_anomaly_from_radius(P, e, r) == pytest.approx(f, abs=1e-9)

    def test_inverse_clamps_out_of_range(self):
        """Radii beyond the apsides clamp to 0 or pi instead of NaN."""
        assert true_anomaly_from_radius(P, 0.5, P / 2.0) == 0.0
        assert true_anomaly_from_radius(P, 0.5, 10 * P) == pytest.approx(math.pi)

    def test_inverse_rejects_circle(self):
        with pytest.raises(ValueError, match="circular"):
            true_anomaly_from_radius(P, 0.0, P)

    def test_inverse_rejects_non_positive_radius(self):
        with pytest.raises(ValueError):
            true_anomaly_from_radius(P, 0.3, 0.0)


class TestVelocity:

    @pytest.mark.parametrize("e,f", [(0.0, 0.5), (0.3, 1.2), (0.7, -2.5), (1.5, 0.4)])
    def test_vis_viva(self, e, f):
        """v² = mu (2/r - 1/a), with 1/a = (1 - e²)/p."""
        r = true_radius(P, e, f)
        expected = MU * (2.0 / r - (1.0 - e**2) / P)
        assert true_velocity(MU, P, e, f) ** 2 == pytest.approx(expected, rel=1e-12)

    @pytest.mark.parametrize("e,f", [(0.2, 0.9), (0.6, -1.4)])
    def test_components_combine(self, e, f):
        vr = true_velocity_radial(MU, P, e, f)
        vh = true_velocity_horizontal(MU, P, e, f)
        assert math.hypot(vr, vh) == pytest.approx(true_velocity(MU, P, e, f))
        assert true_xdot(MU, P, e, f) ** 2 + true_ydot(MU, P, e, f) ** 2 == pytest.approx(
            true_velocity(MU, P, e, f) ** 2, rel=1e-12,
        )

    def test_angular_momentum_conserved(self):
        """r * v_h = sqrt(mu p) at every anomaly."""
        e = 0.45
        h = math.sqrt(MU * P)
        for f in (-3.0, -1.0, 0.0, 0.5, 2.9):
            assert true_radius(P, e, f) * true_velocity_horizontal(MU, P, e, f) == pytest.approx(h)

    def test_angular_rate(self):
        e, f = 0.3, 1.0
        r = true_radius(P, e, f)
        vh = true_velocity_horizontal(MU, P, e, f)
        assert true_dfdt(MU, P, e, f) == pytest.approx(vh / r)

    def test_radial_velocity_zero_at_apsides(self):
        assert true_velocity_radial(MU, P, 0.5, 0.0) == 0.0
        assert true_velocity_radial(MU, P, 0.5, math.pi) == pytest.approx(0.0, abs=1e-9)


class TestFlightPathAngle:

    def test_zero_on_circle(self):
        assert true_tan_phi(0.0, 1.3) == 0.0
        assert true_flight_path_angle(0.0, 1.3) == 0.0

    def test_positive_when_climbing(self):
        """Between periapsis and apoapsis the orbit climbs."""
        assert true_flight_path_angle(0.4, 1.0) > 0.0
        assert true_flight_path_angle(0.4, -1.0) < 0.0

    def test_matches_velocity_ratio(self):
        e, f = 0.6, 2.2
        ratio = true_velocity_radial(MU, P, e, f) / true_velocity_horizontal(MU, P, e, f)
        assert true_tan_phi(e, f) == pytest.approx(ratio)


class TestPerifocalCoordinates:

    def test_position_on_conic(self):
        e, f = 0.35, 2.1
        assert math.hypot(true_x(P, e, f), true_y(P, e, f)) == pytest.approx(true_radius(P, e, f))
        assert math.atan2(true_y(P, e, f), true_x(P, e, f)) == pytest.approx(f)

    def test_velocity_perpendicular_at_periapsis(self):
        e = 0.35
        assert true_xdot(MU, P, e, 0.0) == pytest.approx(0.0, abs=1e-9)
        assert true_ydot(MU, P, e, 0.0) > 0.0
