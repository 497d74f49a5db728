# hmpi_engine.py
"""
Heavy Metal Pollution Index (HMPI) computation and risk classification.

All functions here are pure: no I/O, no caching, no shared state. They can be
called once per sample in a loop, from several threads, or from a bulk-save
flow without any ordering between samples.
"""
import logging
import math
from collections import namedtuple
from decimal import Context, Decimal, ROUND_HALF_UP

from standards_config import (
    DEFAULT_IDEAL_VALUE, DEFAULT_WEIGHT, METAL_CONSTANTS,
    RISK_COLORS, RISK_THRESHOLDS, SAFE_TIER, UNKNOWN_RISK_COLOR,
)

logger = logging.getLogger(__name__)

RiskTier = namedtuple('RiskTier', ['level', 'color'])

_TWO_PLACES = Decimal('0.01')
# Wide enough for every finite float (up to 309 integer digits) plus two decimals
_QUANTIZE_CONTEXT = Context(prec=400)


def _round_half_up(value):
    if not math.isfinite(value):
        return value
    # repr() keeps the shortest float text, so 629.9999999999999 quantizes to 630.00
    return float(Decimal(repr(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP, context=_QUANTIZE_CONTEXT))


def reference_constants(metal):
    """
    Returns (ideal_value, weight) for a metal name.
    Unknown names fall back to the default constants instead of failing, so a
    bulk upload with one odd metal spelling still goes through.
    """
    constants = METAL_CONSTANTS.get(metal)
    if constants is None:
        logger.debug("Unknown metal %r, using default HMPI constants.", metal)
        return DEFAULT_IDEAL_VALUE, DEFAULT_WEIGHT
    return constants['ideal'], constants['weight']


def compute_index(concentration, ideal_value, weight):
    """
    HMPI = (concentration / Ii) * Mi * 100, rounded half-up to 2 decimals.

    Rounding is applied once, on the final value. A non-positive ideal value
    is replaced by DEFAULT_IDEAL_VALUE rather than dividing by zero.
    """
    if ideal_value is None or ideal_value <= 0:
        ideal_value = DEFAULT_IDEAL_VALUE
    if concentration == 0:
        return 0.0
    return _round_half_up((concentration / ideal_value) * weight * 100)


def classify(index):
    """Maps an HMPI value to its RiskTier. Lower bounds are inclusive."""
    for lower_bound, level in RISK_THRESHOLDS:
        if index >= lower_bound:
            return RiskTier(level, RISK_COLORS[level])
    return RiskTier(SAFE_TIER, RISK_COLORS[SAFE_TIER])


def risk_color(level):
    return RISK_COLORS.get(level, UNKNOWN_RISK_COLOR)


def assess_sample(metal, concentration, ideal_value=None, weight=None):
    """
    Computes the derived fields for a new sample.
    Explicit Ii/Mi overrides win over the metal lookup table.
    Returns (hmpi_value, RiskTier).
    """
    default_ideal, default_weight = reference_constants(metal)
    if ideal_value is None:
        ideal_value = default_ideal
    if weight is None:
        weight = default_weight
    hmpi_value = compute_index(concentration, ideal_value, weight)
    return hmpi_value, classify(hmpi_value)
