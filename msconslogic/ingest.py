from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional

import pandas as pd

from . import canon, exceptions, utils
from .types import DaySeries, RawRecord

logger = logging.getLogger(__name__)

# One pattern for "<datetime><sep><value>". The lazy left side stops at the
# first ; / tab / comma, so a decimal comma in the value is never taken as the
# delimiter.
LINE_PATTERN = re.compile(r"^(.+?)[;\t,]\s*([-+]?\d+(?:[.,]\d+)?)\s*$")
LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class TimestampRule:
    """A literal timestamp grammar; named groups year/month/day/hour/minute."""

    name: str
    pattern: re.Pattern[str]

    def extract(self, text: str) -> Optional[tuple[str, int]]:
        """Return (day_key, slot) or None if text is not in this grammar or off-grid."""
        m = self.pattern.match(text)
        if m is None:
            return None
        year, month, day = int(m["year"]), int(m["month"]), int(m["day"])
        if not utils.is_calendar_date(year, month, day):
            return None
        slot = utils.slot_index(int(m["hour"]), int(m["minute"]))
        if slot is None:
            return None
        return utils.make_day_key(year, month, day), slot


TIMESTAMP_RULES: tuple[TimestampRule, ...] = (
    TimestampRule(
        "dmy",
        re.compile(
            r"^(?P<day>\d{2})\.(?P<month>\d{2})\.(?P<year>\d{4})"
            r"\s+(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?$"
        ),
    ),
    TimestampRule(
        "iso",
        re.compile(
            r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
            r"\s+(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?$"
        ),
    ),
)


def is_header(line: str) -> bool:
    low = line.lower()
    return low.startswith(canon.COMMENT_PREFIX) or any(
        marker in low for marker in canon.HEADER_MARKERS
    )


def split_record(line: str) -> Optional[RawRecord]:
    m = LINE_PATTERN.match(line)
    if m is None:
        return None
    return RawRecord(timestamp=m.group(1).strip(), value=utils.parse_decimal(m.group(2)))


def resolve_slot(
    timestamp: str, rules: Iterable[TimestampRule] = TIMESTAMP_RULES
) -> Optional[tuple[str, int]]:
    for rule in rules:
        if rule.pattern.match(timestamp):
            # first grammar that matches decides; later rules are not tried
            return rule.extract(timestamp)
    return None


class _GridBuilder:
    """Collects slot writes per day; missing slots stay 0.0."""

    def __init__(self) -> None:
        self._grids: dict[str, list[float]] = {}

    def write(self, day_key: str, slot: int, value: float) -> None:
        grid = self._grids.get(day_key)
        if grid is None:
            grid = self._grids[day_key] = [0.0] * canon.SLOTS_PER_DAY
        grid[slot] = value  # last write wins

    def __len__(self) -> int:
        return len(self._grids)

    def build(self) -> list[DaySeries]:
        return [
            DaySeries(day_key=k, values=tuple(self._grids[k]))
            for k in sorted(self._grids)
        ]


def _lines(text: str) -> Iterator[str]:
    for raw in LINE_BREAK.split(text):
        line = raw.strip()
        if line:
            yield line


def from_text(
    text: str, *, rules: Iterable[TimestampRule] = TIMESTAMP_RULES
) -> list[DaySeries]:
    """
    Parse quarter-hour CSV text into day series sorted by day key.

    Accepted lines: 'DD.MM.YYYY HH:MM[:SS]<sep>value' or
    'YYYY-MM-DD H:MM[:SS]<sep>value' with sep one of ';', tab, ','.
    Header and malformed lines are skipped; raises EmptyInputError if nothing
    usable remains.
    """
    rules = tuple(rules)
    grid = _GridBuilder()
    records = headers = skipped = 0

    for line in _lines(text):
        if is_header(line):
            headers += 1
            continue
        rec = split_record(line)
        resolved = resolve_slot(rec.timestamp, rules) if rec else None
        if rec is None or resolved is None:
            skipped += 1
            logger.debug("Skipping unparseable line: %r", line)
            continue
        day_key, slot = resolved
        grid.write(day_key, slot, rec.value)
        records += 1

    exceptions.require(
        records > 0,
        "No readable lines found. Expected e.g. 'DD.MM.YYYY HH:MM;15,024'.",
        exceptions.EmptyInputError,
    )
    if skipped:
        logger.info("Skipped %d malformed or off-grid line(s).", skipped)
    logger.info(
        "Parsed %d record(s) into %d day(s) (%d header line(s)).",
        records,
        len(grid),
        headers,
    )
    return grid.build()


def from_csv(
    file_like: IO[str] | IO[bytes] | str | Path,
    *,
    encoding: str = "utf-8-sig",
) -> list[DaySeries]:
    """
    Read a CSV file (path or file object) and parse it with from_text.

    Undecodable bytes become U+FFFD; such lines then fail the line pattern
    or the header check like any other text.
    """
    if isinstance(file_like, (str, Path)):
        text = Path(file_like).read_text(encoding=encoding, errors="replace")
    else:
        data = file_like.read()
        text = (
            data.decode(encoding, errors="replace") if isinstance(data, bytes) else data
        )
        if text.startswith("\ufeff"):
            text = text[1:]
    return from_text(text)


def _timestamp_series(df: pd.DataFrame) -> pd.Series:
    if isinstance(df.index, pd.DatetimeIndex):
        return pd.Series(df.index, index=df.index)
    cols = {c.lower(): c for c in df.columns}
    tcol = next((cols[k] for k in canon.COMMON_TIMESTAMP_NAMES if k in cols), None)
    if tcol is None:
        raise exceptions.ParseError(
            "No timestamp column found and index is not datetime. "
            f"Expected one of: {', '.join(canon.COMMON_TIMESTAMP_NAMES)}."
        )
    return pd.Series(pd.to_datetime(df[tcol], errors="coerce").to_numpy(), index=df.index)


def _value_column(df: pd.DataFrame, value_col: Optional[str]) -> str:
    if value_col is not None:
        if value_col not in df.columns:
            raise exceptions.ParseError(f"Missing value column: {value_col}")
        return value_col
    cols = {c.lower(): c for c in df.columns}
    for candidate in canon.COMMON_VALUE_NAMES:
        if candidate in cols:
            return cols[candidate]
    numeric = [
        c
        for c in df.select_dtypes("number").columns
        if c.lower() not in canon.COMMON_TIMESTAMP_NAMES
    ]
    if len(numeric) == 1:
        return numeric[0]
    raise exceptions.ParseError(
        f"Cannot pick a value column from {list(df.columns)}; pass value_col."
    )


def from_dataframe(
    df: pd.DataFrame, *, value_col: Optional[str] = None
) -> list[DaySeries]:
    """
    Build day series from a frame with a datetime index or timestamp column.

    The wall-clock fields of each timestamp are used as they are; tz-aware
    values are not converted. Off-grid and unparseable rows are skipped.
    """
    ts = _timestamp_series(df)
    vcol = _value_column(df, value_col)
    values = pd.to_numeric(
        df[vcol].astype(str).str.replace(",", ".", regex=False), errors="coerce"
    )

    grid = _GridBuilder()
    skipped = 0
    for t, v in zip(ts, values):
        if pd.isna(t):
            skipped += 1
            continue
        slot = utils.slot_index(t.hour, t.minute)
        if slot is None:
            skipped += 1
            continue
        value = float(v) if pd.notna(v) else 0.0
        grid.write(
            utils.make_day_key(t.year, t.month, t.day), slot, utils.finite_or_zero(value)
        )

    exceptions.require(
        len(grid) > 0, "DataFrame holds no quarter-hour rows.", exceptions.EmptyInputError
    )
    if skipped:
        logger.info("Skipped %d row(s) without a quarter-hour timestamp.", skipped)
    return grid.build()

