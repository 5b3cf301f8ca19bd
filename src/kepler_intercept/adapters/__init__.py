# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters for running the intercept pipeline at scale.

Thread pools (concurrent.futures) are confined to this layer.
"""
from kepler_intercept.adapters.concurrent_screening import ConcurrentInterceptScreener

__all__ = ["ConcurrentInterceptScreener"]
