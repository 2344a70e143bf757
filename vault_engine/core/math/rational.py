"""
Rational Core — детерминированная fixed-point арифметика

Модуль обеспечивает воспроизводимость всех финансовых вычислений движка:
- Decimal с явным контекстом вместо binary float
- Округление half-away-from-zero на явно заданной шкале (RoundingScale)
- Точное floor-деление через Fraction (валидатор контракта усекает)
- Защита от деления на ноль с детерминированным fallback

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Float никогда не участвует в арифметике (конвертируется через repr)
2. Любая величина, сравниваемая с on-chain целым, округляется ВНИЗ (floor)
3. Деление на ноль никогда не происходит (fallback или явный ZeroDivisionError)
4. Результат не зависит от платформы и глобального decimal-контекста
"""

import functools
import math
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Context, Decimal, localcontext
from enum import IntEnum
from fractions import Fraction
from typing import Callable, Final, TypeVar, Union

# =============================================================================
# КОНТЕКСТ
# =============================================================================

# 80 значащих цифр: supply до 1e18 base units × доли с 25 знаками
# помещаются без округления промежуточных результатов
RATIONAL_PRECISION: Final[int] = 80

RATIONAL_CONTEXT: Final[Context] = Context(prec=RATIONAL_PRECISION, rounding=ROUND_HALF_UP)

Number = Union[int, float, str, Decimal]

ZERO: Final[Decimal] = Decimal(0)
ONE: Final[Decimal] = Decimal(1)

_F = TypeVar("_F", bound=Callable)


class RoundingScale(IntEnum):
    """Шкала округления (количество знаков после запятой)"""

    CURRENCY = 2  # промежуточные ADA-суммы (FDV)
    LP_ADA = 6  # ADA-сторона пула ликвидности (1 lovelace)
    RATIO = 25  # доли и VT-суммы


def with_rational_context(func: _F) -> _F:
    """
    Декоратор: выполняет функцию под RATIONAL_CONTEXT.

    Все Decimal-операции внутри (умножение, деление, сравнение) идут
    с 80 значащими цифрами и ROUND_HALF_UP независимо от вызывающего кода.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with localcontext(RATIONAL_CONTEXT):
            return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# =============================================================================
# КОНВЕРСИЯ
# =============================================================================


def to_decimal(value: Number) -> Decimal:
    """
    Конверсия числа в конечный Decimal.

    Float конвертируется через кратчайший repr (0.1 → Decimal("0.1")),
    а не через двоичное представление.

    Args:
        value: int, float, str или Decimal

    Returns:
        Конечный Decimal

    Raises:
        TypeError: bool или неподдерживаемый тип
        ValueError: NaN/Inf или нечисловая строка

    Examples:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal("2.50")
        Decimal('2.50')
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a number")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except ArithmeticError as e:
            raise ValueError(f"Not a decimal number: {value!r}") from e
    else:
        raise TypeError(f"Unsupported numeric type: {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"Value must be finite, got {value!r}")

    return result


def to_fraction(value: Number) -> Fraction:
    """Точное рациональное представление числа."""
    return Fraction(to_decimal(value))


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def scaled_round(value: Number, digits: int) -> Decimal:
    """
    Округление half-away-from-zero до digits знаков после запятой.

    Используется для промежуточных долей (RoundingScale.RATIO), чтобы
    ошибка не накапливалась в цепочках умножений.

    Args:
        value: Исходное значение
        digits: Количество знаков (обычно член RoundingScale)

    Returns:
        Decimal с экспонентой -digits

    Examples:
        >>> scaled_round("2.345", 2)
        Decimal('2.35')
        >>> scaled_round("-2.345", 2)
        Decimal('-2.35')
    """
    if digits < 0:
        raise ValueError(f"digits must be non-negative, got {digits}")

    quantum = ONE.scaleb(-int(digits))
    return to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=RATIONAL_CONTEXT)


def round_to_int(value: Number) -> int:
    """Округление до целого half-away-from-zero."""
    return int(scaled_round(value, 0))


def floor_to_int(value: Number) -> int:
    """
    Округление вниз до целого (в сторону -inf).

    Examples:
        >>> floor_to_int("2.9")
        2
        >>> floor_to_int("-2.1")
        -3
    """
    return int(to_decimal(value).to_integral_value(rounding=ROUND_FLOOR, context=RATIONAL_CONTEXT))


def ceil_to_int(value: Number) -> int:
    """Округление вверх до целого (в сторону +inf)."""
    return int(to_decimal(value).to_integral_value(rounding=ROUND_CEILING, context=RATIONAL_CONTEXT))


# =============================================================================
# ДЕЛЕНИЕ
# =============================================================================


def floor_div(numerator: Number, denominator: Number) -> int:
    """
    Точное floor-деление: floor(numerator / denominator).

    Вычисляется на Fraction, поэтому 300 * (1/3) даёт ровно 100,
    а не 99 из-за конечной точности Decimal.

    Args:
        numerator: Числитель
        denominator: Знаменатель (не ноль)

    Returns:
        Наибольшее целое <= numerator / denominator

    Raises:
        ZeroDivisionError: если denominator == 0

    Examples:
        >>> floor_div(7, 2)
        3
        >>> floor_div(-7, 2)
        -4
        >>> floor_div("0.75", "0.25")
        3
    """
    den = to_fraction(denominator)
    if den == 0:
        raise ZeroDivisionError("floor_div denominator is zero")

    return math.floor(to_fraction(numerator) / den)


def safe_ratio(numerator: Number, denominator: Number, fallback: Number = 0) -> Decimal:
    """
    Деление с защитой от нулевого знаменателя.

    Нулевой знаменатель — ожидаемое бизнес-состояние (пустой TVL, нет
    acquirers), а не ошибка: возвращается fallback.

    Returns:
        numerator / denominator под RATIONAL_CONTEXT, либо fallback
    """
    den = to_decimal(denominator)
    if den == 0:
        return to_decimal(fallback)

    with localcontext(RATIONAL_CONTEXT):
        return to_decimal(numerator) / den


def decimal_places_to_lift(value: Number) -> int:
    """
    Сколько десятичных знаков нужно добавить, чтобы value >= 1.

    ceil(-log10(value)) для 0 < value < 1, иначе 0.

    Examples:
        >>> decimal_places_to_lift("0.74")
        1
        >>> decimal_places_to_lift("0.01")
        2
        >>> decimal_places_to_lift(5)
        0
    """
    d = to_decimal(value)
    if d <= 0 or d >= 1:
        return 0

    with localcontext(RATIONAL_CONTEXT):
        return ceil_to_int(-d.log10())


def is_integral(value: Number) -> bool:
    """Является ли значение целым числом."""
    d = to_decimal(value)
    return d == d.to_integral_value()


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_non_negative(value: Number, name: str) -> Decimal:
    """
    Проверка value >= 0.

    Returns:
        value как Decimal

    Raises:
        ValueError: если value < 0 или не конечно
    """
    d = to_decimal(value)
    if d < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return d


def validate_fraction(value: Number, name: str) -> Decimal:
    """
    Проверка 0 <= value <= 1 (проценты хранятся долями).

    Raises:
        ValueError: если value вне [0, 1]
    """
    d = to_decimal(value)
    if d < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    if d > 1:
        raise ValueError(f"{name} must be <= 1, got {value}")
    return d
