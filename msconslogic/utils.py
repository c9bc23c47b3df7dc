# msconslogic/utils.py
from __future__ import annotations
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Tuple

import numpy as np
import pandas as pd

from . import canon


def pad(n: int, width: int = 2) -> str:
    return str(n).zfill(width)


def make_day_key(year: int, month: int, day: int) -> str:
    return f"{pad(year, 4)}-{pad(month)}-{pad(day)}"


def is_calendar_date(year: int, month: int, day: int) -> bool:
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def to_utc(ts: pd.Timestamp) -> pd.Timestamp:
    """Naive timestamps are taken as UTC labels; aware ones are converted."""
    ts = pd.Timestamp(ts)
    if ts.tz is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def day_bounds(day_key: str) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """Midnight-to-midnight UTC bounds for a 'YYYY-MM-DD' key.

    The key is read as a label, so no calendar or DST shift is applied.
    """
    start = pd.Timestamp(f"{day_key}T00:00:00", tz="UTC")
    return start, start + pd.Timedelta(days=1)


def slot_edges(
    start: pd.Timestamp, slots: int = canon.SLOTS_PER_DAY
) -> pd.DatetimeIndex:
    """Return slots + 1 boundaries spaced SLOT_MINUTES apart from start."""
    return pd.date_range(
        start=to_utc(start), periods=slots + 1, freq=f"{canon.SLOT_MINUTES}min"
    )


def slot_bounds(day_key: str, slot: int) -> Tuple[pd.Timestamp, pd.Timestamp]:
    if not 0 <= slot < canon.SLOTS_PER_DAY:
        raise ValueError(f"Slot {slot} outside 0..{canon.SLOTS_PER_DAY - 1}")
    start = day_bounds(day_key)[0] + pd.Timedelta(minutes=slot * canon.SLOT_MINUTES)
    return start, start + pd.Timedelta(minutes=canon.SLOT_MINUTES)


def slot_index(hour: int, minute: int) -> int | None:
    """Quarter-hour slot for a wall-clock time, None when off-grid or out of day."""
    minutes = hour * 60 + minute
    slot, rem = divmod(minutes, canon.SLOT_MINUTES)
    if rem or not 0 <= slot < canon.SLOTS_PER_DAY:
        return None
    return slot


def format_edifact_datetime(ts: pd.Timestamp) -> str:
    """UTC 'YYYYMMDDHHmm' followed by the '+00' offset marker (unescaped)."""
    t = to_utc(ts)
    return t.strftime("%Y%m%d%H%M") + canon.UTC_OFFSET_MARKER


def format_interchange_datetime(ts: pd.Timestamp) -> Tuple[str, str]:
    t = to_utc(ts)
    return t.strftime("%y%m%d"), t.strftime("%H%M")


def format_quantity(value: float, factor: float = 1.0) -> str:
    """
    Render value * factor with QUANTITY_DECIMALS digits, rounding half away
    from zero. The shortest float repr is quantized, so 1.0005 gives 1.001.
    """
    scaled = float(value) * factor
    if not np.isfinite(scaled):
        raise ValueError(f"Cannot render non-finite quantity {value!r}")
    exp = Decimal(1).scaleb(-canon.QUANTITY_DECIMALS)
    d = Decimal(repr(scaled))
    with localcontext() as ctx:
        # enough digits for the integer part plus the fixed decimals
        ctx.prec = max(ctx.prec, d.adjusted() + canon.QUANTITY_DECIMALS + 2)
        q = d.quantize(exp, rounding=ROUND_HALF_UP)
    if q.is_zero():
        q = abs(q)
    return f"{q:f}"


def finite_or_zero(value: float) -> float:
    v = float(value)
    return v if np.isfinite(v) else 0.0


def parse_decimal(text: str) -> float:
    """Parse '15,024' or '15.024'; non-finite results collapse to 0.0."""
    return finite_or_zero(float(text.strip().replace(",", ".")))
