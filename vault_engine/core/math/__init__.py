"""
Core math modules для vault-engine

Детерминированные арифметические примитивы, совпадающие с целочисленной
арифметикой on-chain валидатора.
"""

from vault_engine.core.math.rational import (
    ONE,
    RATIONAL_CONTEXT,
    RATIONAL_PRECISION,
    ZERO,
    Number,
    RoundingScale,
    ceil_to_int,
    decimal_places_to_lift,
    floor_div,
    floor_to_int,
    is_integral,
    round_to_int,
    safe_ratio,
    scaled_round,
    to_decimal,
    to_fraction,
    validate_fraction,
    validate_non_negative,
    with_rational_context,
)

__all__ = [
    # Context
    "RATIONAL_CONTEXT",
    "RATIONAL_PRECISION",
    "ZERO",
    "ONE",
    "Number",
    "RoundingScale",
    "with_rational_context",
    # Conversion
    "to_decimal",
    "to_fraction",
    # Rounding
    "scaled_round",
    "round_to_int",
    "floor_to_int",
    "ceil_to_int",
    # Division
    "floor_div",
    "safe_ratio",
    "decimal_places_to_lift",
    "is_integral",
    # Validation
    "validate_non_negative",
    "validate_fraction",
]
