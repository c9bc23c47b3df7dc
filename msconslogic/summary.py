from __future__ import annotations
from typing import Iterable, cast

import pandas as pd

from . import canon, formats
from .types import DaySeries, SummaryPayload, UnitMode


def summarise(days: Iterable[DaySeries], *, unit: UnitMode = "kwh") -> SummaryPayload:
    """Totals and per-month breakdown of the energy that will be encoded."""
    df = formats.to_frame(days)
    kwh = df["kwh"].astype(float) * canon.UNIT_FACTORS[unit]
    n_days = int(df["day"].nunique()) if len(df) else 0

    total = float(kwh.sum())
    if len(df):
        pos = int(kwh.to_numpy().argmax())
        max_slot_kwh = float(kwh.iloc[pos])
        max_slot_time = df.index[pos].isoformat()
    else:
        max_slot_kwh = 0.0
        max_slot_time = None

    months: list[dict[str, object]] = []
    if len(df):
        month = df["day"].str.replace("-", "", regex=False).str[:6]
        grouped = (
            pd.DataFrame({"month": month, "day": df["day"], "kwh": kwh})
            .groupby("month", sort=True)
            .agg(days=("day", "nunique"), kwh=("kwh", "sum"))
            .reset_index()
        )
        months = [
            {"month": str(r.month), "days": int(r.days), "kwh": float(r.kwh)}
            for r in grouped.itertuples(index=False)
        ]

    payload = {
        "meta": {
            "days": n_days,
            "start": str(df["day"].min()) if n_days else "",
            "end": str(df["day"].max()) if n_days else "",
            "slots": int(len(df)),
            "unit": unit,
        },
        "stats": {
            "total_kwh": total,
            "per_day_avg_kwh": (total / n_days) if n_days else 0.0,
            "max_slot_kwh": max_slot_kwh,
            "max_slot_time": max_slot_time,
            "zero_slots": int((kwh == 0).sum()),
        },
        "months": months,
    }
    return cast(SummaryPayload, payload)
