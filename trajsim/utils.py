#!/usr/bin/env python3
"""
General utilities for the trajectory simulator.
"""
import math
from typing import Optional, Tuple


def try_float(val) -> Optional[float]:
    """Return val as a finite float, or None when it cannot be one."""
    try:
        f = float(val)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(f):
        return None
    return f


def coerce_color(c, default: Tuple[int, int, int]) -> Tuple[int, int, int]:
    try:
        r, g, b = int(c[0]), int(c[1]), int(c[2])
    except (TypeError, ValueError, IndexError):
        return default
    return (max(0, min(255, r)), max(0, min(255, g)), max(0, min(255, b)))
