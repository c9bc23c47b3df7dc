from __future__ import annotations
import io
import logging
import zipfile
from pathlib import Path
from typing import Iterable, Optional, Sequence

import numpy as np

from . import exceptions, validate
from .config import PartnerProfile, TranslatorConfig, default_config
from .encode import Clock, encode_day
from .types import BatchResult, DaySeries, MessageParameters, OutputFile

logger = logging.getLogger(__name__)


def _name_prefix(profile: PartnerProfile) -> str:
    return f"MSCONS_{profile.app_code}_{profile.sender_id}_{profile.recipient_id}"


def day_file_name(
    profile: PartnerProfile, params: MessageParameters, day: DaySeries
) -> str:
    return (
        f"{_name_prefix(profile)}_{day.compact}_{params.location_id}_{params.label}.txt"
    )


def month_archive_name(
    profile: PartnerProfile, params: MessageParameters, month: str
) -> str:
    return f"{_name_prefix(profile)}_{month}_{params.location_id}_{params.label}_CSV.zip"


def master_archive_name(
    profile: PartnerProfile, params: MessageParameters, first: str, last: str
) -> str:
    return (
        f"{_name_prefix(profile)}_{first}-{last}_{params.location_id}_"
        f"{params.label}_CSV_master.zip"
    )


def build_batch(
    days: Sequence[DaySeries],
    params: MessageParameters,
    *,
    config: Optional[TranslatorConfig] = None,
    seed: Optional[int] = None,
    clock: Optional[Clock] = None,
) -> BatchResult:
    """
    Encode every day once, in day order, and name the outputs.

    Each day gets its own generator spawned from one SeedSequence, so days
    never share random state.
    """
    cfg = config or default_config()
    exceptions.require(bool(days), "No days to encode.", exceptions.BatchError)
    validate.assert_days(days)

    ordered = sorted(days, key=lambda d: d.day_key)
    children = np.random.SeedSequence(seed).spawn(len(ordered))

    files: list[OutputFile] = []
    for day, child in zip(ordered, children):
        msg = encode_day(
            day,
            params,
            profile=cfg.profile,
            rng=np.random.default_rng(child),
            clock=clock,
        )
        files.append(
            OutputFile(
                name=day_file_name(cfg.profile, params, day),
                content=msg.to_text(cfg.segment_separator),
                day_key=day.day_key,
            )
        )

    months = sorted({f.month for f in files})
    result = BatchResult(
        files=files,
        params=params,
        master_name=master_archive_name(cfg.profile, params, months[0], months[-1]),
        month_names={m: month_archive_name(cfg.profile, params, m) for m in months},
    )
    logger.info(
        "Encoded %d day(s) across %d month(s) for %s (%s).",
        len(files),
        len(months),
        params.location_id,
        params.label,
    )
    return result


def zip_bytes(files: Iterable[OutputFile]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for f in files:
            zf.writestr(f.name, f.content)
    return buf.getvalue()


def write_archives(
    result: BatchResult,
    out_dir: str | Path,
    *,
    monthly: bool = True,
    write_days: bool = False,
) -> list[Path]:
    """Write the master zip (always), per-month zips and optionally the day files."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    master = out / result.master_name
    master.write_bytes(zip_bytes(result.files))
    written.append(master)

    if monthly:
        for month in result.months:
            path = out / result.month_names[month]
            path.write_bytes(zip_bytes(result.files_for_month(month)))
            written.append(path)

    if write_days:
        for f in result.files:
            path = out / f.name
            path.write_text(f.content, encoding="utf-8")
            written.append(path)

    for p in written:
        logger.debug("Wrote %s", p)
    return written
