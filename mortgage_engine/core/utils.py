from __future__ import annotations

import calendar
import math
from dataclasses import fields, is_dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import pandas as pd

from .errors import InvalidParameter

CENT = Decimal("0.01")
MONTHS_IN_YEAR = 12


def usd(value: float) -> str:
    return f"${value:,.0f}"


def pct_to_rate(pct: float) -> float:
    # 6.5 -> 0.065
    return float(pct) / 100.0


def grow(value: float, annual_rate: float, years: int) -> float:
    if years <= 0:
        return value
    return value * (1 + annual_rate) ** years


def add_months(dt: date, months: int) -> date:
    """Return the date ``months`` after ``dt``, clamping the day to the month end."""
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def months_label(months: float) -> str:
    if math.isinf(months):
        return "Never"
    months = int(months)
    return f"{months // 12} years, {months % 12} months"


# ------------------------- Validation ------------------------- #
def require_positive(field: str, value: float) -> float:
    _require_number(field, value)
    if value <= 0:
        raise InvalidParameter(field, value, "must be > 0")
    return float(value)


def require_non_negative(field: str, value: float) -> float:
    _require_number(field, value)
    if value < 0:
        raise InvalidParameter(field, value, "must be >= 0")
    return float(value)


def require_between(field: str, value: float, low: float, high: float) -> float:
    _require_number(field, value)
    if not (low <= value <= high):
        raise InvalidParameter(field, value, f"must be between {low:g} and {high:g}")
    return float(value)


def _require_number(field: str, value: Any) -> None:
    # finite int or float only; bool and Decimal are rejected
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidParameter(field, value, "must be a finite int or float")


# ------------------------- Records ------------------------- #
def money(value: float) -> Decimal:
    """Quantize a float amount to cents, half-up."""
    return Decimal(repr(float(value))).quantize(CENT, rounding=ROUND_HALF_UP)


def to_record(obj: Any) -> Any:
    """Convert a result dataclass into plain, currency-safe structures.

    Floats become cent-quantized ``Decimal`` values, ``math.inf`` becomes
    ``None``, dataclasses become dicts and sequences become lists. Ints,
    strings and bools pass through unchanged. DataFrames become lists of
    row dicts.
    """
    if isinstance(obj, pd.DataFrame):
        return [to_record(row) for row in obj.to_dict("records")]
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_record(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, dict):
        return {k: to_record(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_record(v) for v in obj]
    if isinstance(obj, float):
        if math.isinf(obj) or math.isnan(obj):
            return None
        return money(obj)
    return obj
