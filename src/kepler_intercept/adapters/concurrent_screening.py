# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Concurrent intercept screening: one scan per orbit pair.

Uses ThreadPoolExecutor from stdlib. Pairs share no state, so each
pair's full pipeline (solve, scan, refine) runs as an independent task.
The scan within a pair stays sequential.
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable

from kepler_intercept.domain.intercept import (
    DEFAULT_INTERCEPT_CONFIG,
    InterceptConfig,
    ScanResult,
    scan,
)
from kepler_intercept.ports.orbit_elements import OrbitElements


_log = logging.getLogger(__name__)

OrbitPair = tuple[str, OrbitElements, OrbitElements]


class ConcurrentInterceptScreener:
    """
    Screens many orbit pairs for intercepts in parallel.

    Args:
        max_workers: Thread pool size.
            Default: min(32, os.cpu_count() + 4) — same as Python default.
        config: Intercept pipeline settings shared by every pair.
    """

    def __init__(
        self,
        max_workers: int | None = None,
        config: InterceptConfig = DEFAULT_INTERCEPT_CONFIG,
    ):
        self._max_workers = max_workers or min(32, (os.cpu_count() or 1) + 4)
        self._config = config

    def screen(
        self,
        pairs: Iterable[OrbitPair],
        t0: float,
        t1: float,
    ) -> dict[str, ScanResult]:
        """
        Scan every (label, orbit_a, orbit_b) pair over [t0, t1).

        Pairs whose inputs fail validation are logged and skipped.

        Returns:
            Mapping of pair label to ScanResult.

        Raises:
            ValueError: If two pairs share a label.
        """
        pairs = list(pairs)
        labels = [label for label, _, _ in pairs]
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            raise ValueError(f"duplicate pair labels: {duplicates}")

        results: dict[str, ScanResult] = {}

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = {
                executor.submit(scan, orbit_a, orbit_b, t0, t1, self._config): label
                for label, orbit_a, orbit_b in pairs
            }

            for future in as_completed(futures):
                label = futures[future]
                try:
                    results[label] = future.result()
                except ValueError as e:
                    _log.warning("Skipping %s: %s", label, e)
                    continue

        return results

    def screen_found(
        self,
        pairs: Iterable[OrbitPair],
        t0: float,
        t1: float,
    ) -> list[str]:
        """Labels of pairs with at least one confirmed intercept, sorted."""
        return sorted(label for label, result in self.screen(pairs, t0, t1).items() if result.found)
