"""Numeric coercion helpers for loosely typed backend and form values."""

import math


def parse_number(value: object) -> float:
    """Parse a number from a backend or form value, returning NaN on failure."""
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "").lstrip("$")
        if not cleaned:
            return math.nan
        try:
            return float(cleaned)
        except ValueError:
            return math.nan
    return math.nan


def to_float(value: object, default: float = 0.0) -> float:
    """Coerce a value to a finite float, falling back to the default."""
    parsed = parse_number(value)
    return parsed if math.isfinite(parsed) else default


def to_optional_float(value: object) -> float | None:
    """Coerce a value to a finite float or None."""
    parsed = parse_number(value)
    return parsed if math.isfinite(parsed) else None


def to_optional_int(value: object) -> int | None:
    """Coerce a value to an int or None."""
    parsed = parse_number(value)
    if not math.isfinite(parsed):
        return None
    return int(parsed)


def usable_sqft(value: object) -> float | None:
    """Return a square footage usable for range lookups, or None."""
    parsed = parse_number(value)
    if not math.isfinite(parsed) or parsed <= 0:
        return None
    return parsed
