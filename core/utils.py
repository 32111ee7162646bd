from __future__ import annotations

import math
import numbers
import re
import warnings
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd

# Leading numeric prefix, so "12.5%" reads as 12.5 and "720 (est)" as 720.
_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d+")


def is_blank(value: Any) -> bool:
    """True for None, NaN/NaT and strings that are empty after trimming."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_text(value: Any) -> str:
    """Render a spreadsheet cell as text ('' for missing, 1001.0 -> '1001')."""
    if isinstance(value, str):
        return value
    if is_blank(value):
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def parse_float(value: Any) -> Optional[float]:
    """Lenient float parse of a cell; None when no leading number exists."""
    if isinstance(value, bool) or is_blank(value):
        return None
    if isinstance(value, numbers.Real):
        return float(value)
    m = _FLOAT_PREFIX.match(cell_text(value).strip())
    if m is None:
        return None
    return float(m.group(0))


def parse_int(value: Any) -> Optional[int]:
    """Base-10 integer parse of a cell, truncating any fractional part."""
    if isinstance(value, bool) or is_blank(value):
        return None
    if isinstance(value, numbers.Real):
        if not math.isfinite(float(value)):
            return None
        return int(value)
    m = _INT_PREFIX.match(cell_text(value).strip())
    if m is None:
        return None
    return int(m.group(0))


def parse_date(value: Any) -> Optional[date]:
    """
    Generic date parse of a cell. Returns None when the value is not a date.
    Plain numbers are never read as dates (an Excel serial is ambiguous).
    """
    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (bool, numbers.Number)):
        return None
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        try:
            ts = pd.to_datetime(cell_text(value).strip(), errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if pd.isna(ts):
        return None
    return ts.date()


def round_half_up(x: float, decimals: int = 0) -> float:
    """Spreadsheet-style rounding: half away from zero."""
    m = 10 ** decimals
    return float(np.sign(x) * (np.floor(np.abs(x) * m + 0.5) / m))


def missing_fields(mapping: Mapping[str, str], fields: Iterable[str]) -> List[str]:
    return [f for f in fields if f not in mapping]
