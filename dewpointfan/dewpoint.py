"""Dew point calculation and numeric rounding helpers."""

from __future__ import annotations

import math

_MAGNUS_BASE = 6.1078


def _divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics instead of raising on a zero denominator."""
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _pow10(exponent: float) -> float:
    try:
        return math.pow(10, exponent)
    except OverflowError:
        return math.inf


def round_double(val: float, precision: int) -> float:
    """Round ``val`` to ``precision`` decimal places, halves away from zero."""
    ratio = math.pow(10, precision)
    scaled = val * ratio
    if not math.isfinite(scaled):
        return scaled / ratio
    truncated = float(math.trunc(scaled))
    if abs(scaled - truncated) >= 0.5:
        truncated += math.copysign(1.0, scaled)
    return truncated / ratio


def calc_dew_point(temperature: float, humidity: float) -> float:
    """Return the dew point in °C for a temperature in °C and relative humidity in %.

    Uses the Magnus formula with separate coefficients above and below 0 °C.
    The result is rounded to one decimal place.
    """
    if temperature >= 0:
        a, b = 7.5, 237.3
    elif temperature < 0:
        a, b = 7.6, 240.7
    else:
        a, b = 0.0, 0.0

    saturation_pressure = _MAGNUS_BASE * _pow10(_divide(a * temperature, b + temperature))
    vapour_pressure = saturation_pressure * (humidity / 100)

    ratio = vapour_pressure / _MAGNUS_BASE
    if math.isnan(ratio) or ratio < 0:
        return math.nan
    if ratio == 0:
        return -math.inf
    v = math.log10(ratio) if math.isfinite(ratio) else math.inf

    return round_double(_divide(b * v, a - v), 1)