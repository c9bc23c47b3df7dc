from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from . import canon, exceptions, utils, validate
from .types import DaySeries


def to_frame(days: Iterable[DaySeries]) -> pd.DataFrame:
    """
    Flatten day series into a long frame.

    - index: UTC-labelled 't_start' (slot start, wall clock as parsed)
    - columns: day ('YYYY-MM-DD'), slot (0..95), kwh
    """
    frames: list[pd.DataFrame] = []
    for day in days:
        validate.assert_day(day)
        idx = utils.slot_edges(day.start)[:-1]
        frames.append(
            pd.DataFrame(
                {
                    canon.INDEX_NAME: idx,
                    "day": day.day_key,
                    "slot": np.arange(canon.SLOTS_PER_DAY),
                    "kwh": np.asarray(day.values, dtype=float),
                }
            ).set_index(canon.INDEX_NAME)
        )
    if not frames:
        idx = pd.DatetimeIndex([], tz="UTC", name=canon.INDEX_NAME)
        return pd.DataFrame(columns=["day", "slot", "kwh"], index=idx)
    return pd.concat(frames, axis=0).sort_index()


def from_frame(df: pd.DataFrame) -> list[DaySeries]:
    """Rebuild day series from a to_frame()-shaped frame."""
    for col in ("day", "slot", "kwh"):
        if col not in df.columns:
            raise exceptions.ParseError(f"Missing required column: {col}")
    if df.empty:
        return []

    out: list[DaySeries] = []
    for day_key, g in df.groupby("day", sort=True):
        values = [0.0] * canon.SLOTS_PER_DAY
        for slot, kwh in zip(g["slot"].astype(int), g["kwh"].astype(float)):
            values[slot] = float(kwh)
        out.append(DaySeries(day_key=str(day_key), values=tuple(values)))
    return out


def to_wide(days: Iterable[DaySeries]) -> pd.DataFrame:
    """Day x slot matrix (rows 'YYYY-MM-DD', columns 0..95)."""
    days = list(days)
    return pd.DataFrame(
        [d.values for d in days],
        index=pd.Index([d.day_key for d in days], name="day"),
        columns=pd.RangeIndex(canon.SLOTS_PER_DAY, name="slot"),
        dtype=float,
    )
