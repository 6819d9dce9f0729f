import hashlib
import logging
import math
import os
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_TRUE_VALUES = {'true', '1', 'yes', 'y', 'on'}
_FALSE_VALUES = {'false', '0', 'no', 'n', 'off'}


def get_env_number(name: str, fallback: float) -> float:
    """Read an env var as a finite number, returning ``fallback`` when unset or invalid."""
    raw = os.environ.get(name)
    if not raw:
        return fallback
    try:
        parsed = float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric value for {name}: {raw!r}")
        return fallback
    return parsed if math.isfinite(parsed) else fallback


def get_env_bool(name: str, fallback: bool) -> bool:
    raw = os.environ.get(name)
    if not raw:
        return fallback
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return fallback


def clamp_int(value: float, low: int, high: int) -> int:
    return max(low, min(high, int(math.floor(value))))


def clamp01(value: Any) -> float:
    """Coerce to float in [0, 1]; non-numeric and non-finite values become 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return max(0.0, min(1.0, number))


def round_half_away_from_zero(value) -> int:
    """Accepts floats or Decimals; floats go through their shortest repr."""
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def normalize_text(value: str) -> str:
    """Collapse runs of whitespace to one space and trim."""
    return _WHITESPACE.sub(' ', value or '').strip()


class PostingFingerprinter:
    """
    Pure logic for content hashing of staged postings.
    """

    @staticmethod
    def normalize_description(description: str) -> str:
        return normalize_text(description).lower()

    @staticmethod
    def calculate(description: str) -> str:
        """SHA256 hex digest of the normalized (lowercased, whitespace-collapsed) description."""
        normalized = PostingFingerprinter.normalize_description(description)
        return hashlib.sha256(normalized.encode('utf-8')).hexdigest()
