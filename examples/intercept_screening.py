#!/usr/bin/env python3
"""Intercept screening example: proximity intervals + concurrent scan.

Builds a few orbit pairs, prints the true-anomaly intervals where each
orbit can approach the other, and screens every pair for confirmed
intercepts over one day.

Usage:
    python examples/intercept_screening.py
"""
import logging
import math

from kepler_intercept import KeplerOrbit, OrbitalConstants, solve
from kepler_intercept.adapters.concurrent_screening import ConcurrentInterceptScreener


def _orbit(altitude_km, e=0.0, inclination_deg=0.0, raan_deg=0.0, argp_deg=0.0, periapsis_time_s=0.0):
    periapsis = OrbitalConstants.R_EARTH + altitude_km * 1000.0
    return KeplerOrbit.from_classical(
        periapsis * (1.0 + e), e,
        math.radians(inclination_deg),
        math.radians(raan_deg),
        math.radians(argp_deg),
        periapsis_time_s,
    )


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    station = _orbit(420.0, inclination_deg=51.6)
    period = station.period

    pairs = [
        ("retrograde-crossing", station, _orbit(420.0, inclination_deg=180.0 - 51.6, periapsis_time_s=period / 4)),
        ("polar-same-altitude", station, _orbit(420.0, inclination_deg=90.0, raan_deg=40.0)),
        ("transfer-ellipse", station, _orbit(300.0, e=0.2, inclination_deg=51.6, argp_deg=120.0)),
        ("geo-vs-leo", station, _orbit(35_786.0)),
    ]

    # --- Step 1: Geometric intervals ---
    print("Proximity intervals (degrees of true anomaly):")
    for label, a, b in pairs:
        intervals = solve(a, b, 0.001 * min(a.semi_latus_rectum, b.semi_latus_rectum))
        spans = ", ".join(
            f"[{math.degrees(lo):7.2f}, {math.degrees(hi):7.2f}]" for lo, hi in intervals.bounds
        ) or "none"
        print(f"  {label:22s} {spans}")

    # --- Step 2: Screen one day for confirmed intercepts ---
    print("Screening 24 h...")
    results = ConcurrentInterceptScreener(max_workers=4).screen(pairs, 0.0, 86_400.0)
    for label in sorted(results):
        result = results[label]
        print(f"  {label:22s} {len(result.candidates):3d} windows, {len(result.intercepts):3d} intercepts")
        for hit in result.intercepts[:3]:
            print(
                f"      t={hit.time_s:10.1f} s  miss={hit.separation_m:8.1f} m"
                f"  v_rel={hit.relative_velocity_ms:7.1f} m/s"
            )


if __name__ == "__main__":
    main()
