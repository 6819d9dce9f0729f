#!/usr/bin/env python3
"""
Threshold resolution - per-account override, else global default, else 0.6.

Invalid values never fail a batch; they fall back silently.
"""

import math
from decimal import Decimal
from typing import Any, Dict, Optional

SAFE_DEFAULT_THRESHOLD = 0.6


def clamp_threshold(value: float) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
        return SAFE_DEFAULT_THRESHOLD
    return max(0.0, min(1.0, float(value)))


def parse_threshold(value: Any, fallback: float = SAFE_DEFAULT_THRESHOLD) -> float:
    """Accept numbers, Decimals and numeric strings; anything else yields the clamped fallback."""
    if isinstance(value, bool):
        return clamp_threshold(fallback)
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
        return clamp_threshold(number if math.isfinite(number) else fallback)
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return clamp_threshold(fallback)
        if math.isfinite(parsed):
            return clamp_threshold(parsed)
    return clamp_threshold(fallback)


class ThresholdResolver:
    """Effective notification threshold for each account in a batch."""

    def __init__(self, global_default: float, overrides: Optional[Dict[Any, float]] = None):
        self.global_default = clamp_threshold(global_default)
        self.overrides = dict(overrides or {})

    @classmethod
    def from_raw(
        cls,
        raw_default: Any,
        raw_overrides: Dict[Any, Any],
        fallback: float = SAFE_DEFAULT_THRESHOLD
    ) -> "ThresholdResolver":
        global_default = parse_threshold(raw_default, fallback)
        overrides = {
            user_id: parse_threshold(value, global_default)
            for user_id, value in raw_overrides.items()
            if value is not None
        }
        return cls(global_default, overrides)

    def resolve(self, user_id: Any) -> float:
        return self.overrides.get(user_id, self.global_default)
