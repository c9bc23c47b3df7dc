"""
Command line entry point: quarter-hour CSV -> MSCONS day files in zip bundles.

    msconslogic meter.csv --location-id DE913... --direction generation --unit kw
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import batch, canon, exceptions, ingest, summary
from .config import PartnerProfile, TranslatorConfig
from .types import MessageParameters

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    defaults = PartnerProfile()
    p = argparse.ArgumentParser(
        prog="msconslogic",
        description="Convert a quarter-hour meter CSV into MSCONS (D.04B) messages, one per day.",
    )
    p.add_argument("input_file", type=Path, help="CSV with 'timestamp;value' lines.")
    p.add_argument("-l", "--location-id", required=True, help="Metering point id for LOC+172.")
    p.add_argument(
        "-d",
        "--direction",
        choices=sorted(canon.OBIS_CODES),
        default="consumption",
        help="consumption (1.8.0) or generation (2.8.0).",
    )
    p.add_argument(
        "-u",
        "--unit",
        choices=sorted(canon.UNIT_FACTORS),
        default="kwh",
        help="kwh: energy per 15 min; kw: average power over 15 min.",
    )
    p.add_argument("-o", "--out-dir", type=Path, default=Path("."), help="Output directory.")

    g = p.add_argument_group("Output options")
    g.add_argument("--no-monthly", action="store_true", help="Only write the master zip.")
    g.add_argument("--write-days", action="store_true", help="Also write the day .txt files.")
    g.add_argument("--line-breaks", action="store_true", help="One segment per line.")
    g.add_argument("--force", action="store_true", help="Write even above the size limit.")
    g.add_argument("--seed", type=int, default=None, help="Seed for reference numbers.")

    pp = p.add_argument_group("Partner profile")
    pp.add_argument("--sender-id", default=defaults.sender_id)
    pp.add_argument("--recipient-id", default=defaults.recipient_id)
    pp.add_argument("--app-code", default=defaults.app_code)

    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> TranslatorConfig:
    profile = PartnerProfile(
        sender_id=args.sender_id,
        recipient_id=args.recipient_id,
        app_code=args.app_code,
    )
    return TranslatorConfig(
        profile=profile,
        segment_separator="\n" if args.line_breaks else "",
        monthly_archives=not args.no_monthly,
    )


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    cfg = build_config(args)

    try:
        params = MessageParameters(
            location_id=args.location_id, direction=args.direction, unit=args.unit
        )
        days = ingest.from_csv(args.input_file)
        info = summary.summarise(days, unit=args.unit)
        logger.info(
            "%d day(s) %s..%s, %.3f kWh total.",
            info["meta"]["days"],
            info["meta"]["start"],
            info["meta"]["end"],
            info["stats"]["total_kwh"],
        )
        result = batch.build_batch(days, params, config=cfg, seed=args.seed)
    except exceptions.MSCError as e:
        logger.error("%s", e)
        return 2
    except OSError as e:
        logger.error("Cannot read %s: %s", args.input_file, e)
        return 2

    size = result.approx_bytes
    if size > cfg.size_limit_bytes and not args.force:
        logger.error(
            "Output is about %.1f MB (> %.0f MB). Re-run with --force to write it.",
            size / (1024 * 1024),
            cfg.size_limit_mb,
        )
        return 3

    written = batch.write_archives(
        result,
        args.out_dir,
        monthly=cfg.monthly_archives,
        write_days=args.write_days,
    )
    for path in written:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
