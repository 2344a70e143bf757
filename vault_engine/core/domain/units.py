"""
Units — Централизованный модуль конверсии единиц

Единственный допустимый способ преобразований между:
- ADA (дробная, для отображения и формул FDV)
- lovelace (целые base units, 1 ADA = 1_000_000 lovelace)
- VT целые токены ↔ VT base units (10^decimals)
- (policy_id, asset_name) ↔ asset unit (конкатенация hex)

ЗАПРЕЩЕНО умножать на 1_000_000 или 10^decimals в обход этого модуля.
"""

from decimal import Decimal
from typing import Final

from vault_engine.core.math.rational import Number, floor_to_int, to_decimal, with_rational_context


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

LOVELACE_PER_ADA: Final[int] = 1_000_000

# Unit нативной валюты в ответах индексатора
LOVELACE_UNIT: Final[str] = "lovelace"

# Policy ID — blake2b-224 хеш скрипта (28 байт → 56 hex)
POLICY_ID_HEX_LENGTH: Final[int] = 56

# Asset name — до 32 байт (64 hex)
ASSET_NAME_MAX_HEX_LENGTH: Final[int] = 64

POLICY_ID_PATTERN: Final[str] = r"^[0-9a-f]{56}$"
ASSET_NAME_PATTERN: Final[str] = r"^([0-9a-f]{2}){0,32}$"
TX_HASH_PATTERN: Final[str] = r"^[0-9a-f]{64}$"

# Минимум decimals платформы и абсолютный максимум
PLATFORM_MIN_DECIMALS: Final[int] = 6
MAX_VT_DECIMALS: Final[int] = 8


# =============================================================================
# ADA ↔ LOVELACE
# =============================================================================


@with_rational_context
def ada_to_lovelace(ada: Number) -> int:
    """
    Конверсия: ADA → lovelace (floor).

    Дробные lovelace отбрасываются: валидатор оперирует только целыми.

    Args:
        ada: Сумма в ADA

    Returns:
        Целое количество lovelace
    """
    return floor_to_int(to_decimal(ada) * LOVELACE_PER_ADA)


@with_rational_context
def lovelace_to_ada(lovelace: int) -> Decimal:
    """Конверсия: lovelace → ADA (точная)."""
    return Decimal(lovelace) / LOVELACE_PER_ADA


# =============================================================================
# VT DECIMALS
# =============================================================================


def decimal_multiplier(decimals: int) -> int:
    """
    Множитель base units для токена с decimals знаками: 10^decimals.

    Raises:
        ValueError: если decimals вне [0, 18]
    """
    if decimals < 0 or decimals > 18:
        raise ValueError(f"decimals must be within [0, 18], got {decimals}")
    return 10**decimals


@with_rational_context
def to_base_units(amount: Number, decimals: int) -> int:
    """Конверсия: целые VT → base units (floor)."""
    return floor_to_int(to_decimal(amount) * decimal_multiplier(decimals))


# =============================================================================
# ASSET UNITS
# =============================================================================


def asset_unit(policy_id: str, asset_name: str | None) -> str:
    """
    Asset unit в формате индексатора: policy_id + asset_name (hex).

    asset_name=None означает «любой asset под policy» и даёт голый policy_id.
    """
    return policy_id + (asset_name or "")


def split_asset_unit(unit: str) -> tuple[str, str | None]:
    """
    Разбор asset unit на (policy_id, asset_name).

    Raises:
        ValueError: если unit короче policy id или это lovelace
    """
    if unit == LOVELACE_UNIT:
        raise ValueError("lovelace is not a native asset unit")
    if len(unit) < POLICY_ID_HEX_LENGTH:
        raise ValueError(f"Asset unit too short: {unit!r}")

    asset_name = unit[POLICY_ID_HEX_LENGTH:]
    return unit[:POLICY_ID_HEX_LENGTH], asset_name or None
