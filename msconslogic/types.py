from __future__ import annotations
from typing import TypedDict, Literal, List, Dict, Optional, Tuple
from dataclasses import dataclass, field

import pandas as pd
from pydantic import BaseModel, ConfigDict, field_validator

from . import canon, utils, validate

Direction = Literal["consumption", "generation"]
UnitMode = Literal["kwh", "kw"]


@dataclass(frozen=True)
class RawRecord:
    """One CSV line split into its timestamp text and numeric value."""

    timestamp: str
    value: float


class DaySeries(BaseModel):
    """One calendar day of quarter-hour values.

    Attributes:
        day_key: Calendar date as 'YYYY-MM-DD', taken from the literal input digits
        values: 96 kWh values, index 0 = 00:00-00:15, index 95 = 23:45-24:00
    """

    model_config = ConfigDict(frozen=True)

    day_key: str
    values: Tuple[float, ...]

    @property
    def start(self) -> pd.Timestamp:
        return utils.day_bounds(self.day_key)[0]

    @property
    def end(self) -> pd.Timestamp:
        return utils.day_bounds(self.day_key)[1]

    @property
    def compact(self) -> str:
        """Day key without dashes (YYYYMMDD)."""
        return self.day_key.replace("-", "")

    @property
    def month(self) -> str:
        return self.compact[:6]


class MessageParameters(BaseModel):
    """Per-batch inputs shared by every encoded day."""

    model_config = ConfigDict(frozen=True)

    location_id: str
    direction: Direction = "consumption"
    unit: UnitMode = "kwh"

    @field_validator("location_id")
    @classmethod
    def _check_location_id(cls, v: str) -> str:
        return validate.validate_location_id(v)

    @property
    def obis(self) -> str:
        return canon.OBIS_CODES[self.direction]

    @property
    def label(self) -> str:
        return canon.DIRECTION_LABELS[self.direction]

    @property
    def factor(self) -> float:
        return canon.UNIT_FACTORS[self.unit]


@dataclass(frozen=True)
class EncodedMessage:
    segments: Tuple[str, ...]
    interchange_ref: str
    message_ref: str
    created: pd.Timestamp

    def to_text(self, separator: str = "") -> str:
        return separator.join(self.segments)

    @property
    def tags(self) -> List[str]:
        return [s[:3] for s in self.segments]

    def __len__(self) -> int:
        return len(self.segments)


@dataclass(frozen=True)
class OutputFile:
    name: str
    content: str
    day_key: str

    @property
    def month(self) -> str:
        return self.day_key.replace("-", "")[:6]


@dataclass
class BatchResult:
    files: List[OutputFile]
    params: MessageParameters
    master_name: str
    month_names: Dict[str, str] = field(default_factory=dict)

    @property
    def months(self) -> List[str]:
        return sorted({f.month for f in self.files})

    def files_for_month(self, month: str) -> List[OutputFile]:
        return [f for f in self.files if f.month == month]

    @property
    def approx_bytes(self) -> int:
        return sum(len(f.content) for f in self.files)


# Summary payload
class SummaryMeta(TypedDict):
    days: int
    start: str
    end: str
    slots: int
    unit: str


class SummaryStats(TypedDict):
    total_kwh: float
    per_day_avg_kwh: float
    max_slot_kwh: float
    max_slot_time: Optional[str]
    zero_slots: int


class SummaryMonth(TypedDict):
    month: str
    days: int
    kwh: float


class SummaryPayload(TypedDict):
    meta: SummaryMeta
    stats: SummaryStats
    months: List[SummaryMonth]
