from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from villa.utils.constants import CURRENCY_SYMBOL
from villa.utils.custom_exceptions import InvalidAmount, InvalidPercent


def round_half_up(value: Union[Decimal, int]) -> int:
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percent_of(amount: int, percent: int) -> int:
    return round_half_up(Decimal(amount) * Decimal(percent) / Decimal(100))


def require_amount(value, name: str = "amount") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidAmount(f"{name} cannot be negative: {value}")
    return value


def require_percent(value, name: str = "percent") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPercent(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= 100:
        raise InvalidPercent(f"{name} must be between 0 and 100, got {value}")
    return value


def format_money(amount: int) -> str:
    return f"{CURRENCY_SYMBOL}{amount:,}"
