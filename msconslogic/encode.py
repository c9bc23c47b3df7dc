from __future__ import annotations
import logging
from typing import Callable, Optional

import numpy as np
import pandas as pd

from . import canon, utils
from .config import PartnerProfile
from .segments import Segment, dtm, service_string_advice
from .types import DaySeries, EncodedMessage, MessageParameters

logger = logging.getLogger(__name__)

Clock = Callable[[], pd.Timestamp]


def utc_now() -> pd.Timestamp:
    return pd.Timestamp.now(tz="UTC")


def slot_segments(
    values: tuple[float, ...] | list[float],
    start: pd.Timestamp,
    *,
    factor: float = 1.0,
) -> list[Segment]:
    """QTY + DTM(163) + DTM(164) per slot; each slot starts where the previous ended."""
    edges = utils.slot_edges(start, len(values))
    out: list[Segment] = []
    for i, v in enumerate(values):
        out.append(
            Segment.of(
                "QTY", (canon.QUANTITY_QUALIFIER, utils.format_quantity(v, factor))
            )
        )
        out.append(dtm(canon.DTM_PERIOD_START, edges[i]))
        out.append(dtm(canon.DTM_PERIOD_END, edges[i + 1]))
    return out


def build_payload(series: DaySeries, params: MessageParameters) -> list[Segment]:
    """
    Business part of the message, UNS through the last slot DTM.

    Depends only on (series, params), so it is reproducible across runs.
    """
    start, end = series.start, series.end
    segs = [
        Segment.of("UNS", canon.SECTION_DETAIL),
        Segment.of("NAD", canon.DELIVERY_POINT_ROLE),
        Segment.of("LOC", canon.LOCATION_QUALIFIER, params.location_id),
        dtm(canon.DTM_PERIOD_START, start),
        dtm(canon.DTM_PERIOD_END, end),
        Segment.of("LIN", canon.LINE_ITEM_NUMBER),
        Segment.of(
            "PIA",
            canon.PRODUCT_ID_QUALIFIER,
            (canon.REGISTER_PREFIX + params.obis, canon.REGISTER_AGENCY),
        ),
    ]
    segs.extend(slot_segments(series.values, start, factor=params.factor))
    return segs


def build_message_header(
    profile: PartnerProfile, message_ref: str, created: pd.Timestamp
) -> list[Segment]:
    """UNH through NAD+MR."""
    return [
        Segment.of("UNH", message_ref, canon.MESSAGE_TYPE),
        Segment.of(
            "BGM",
            canon.DOCUMENT_NAME_CODE,
            message_ref,
            canon.MESSAGE_FUNCTION_ORIGINAL,
        ),
        dtm(canon.DTM_CREATION, created),
        Segment.of("RFF", (canon.REFERENCE_QUALIFIER, canon.REFERENCE_VALUE)),
        Segment.of(
            "NAD", canon.SENDER_ROLE, (profile.sender_id, "", profile.code_list_agency)
        ),
        Segment.of(
            "NAD",
            canon.RECIPIENT_ROLE,
            (profile.recipient_id, "", profile.code_list_agency),
        ),
    ]


def build_interchange_header(
    profile: PartnerProfile, interchange_ref: str, created: pd.Timestamp
) -> Segment:
    return Segment.of(
        "UNB",
        canon.SYNTAX_ID,
        (profile.sender_id, profile.partner_qualifier),
        (profile.recipient_id, profile.partner_qualifier),
        utils.format_interchange_datetime(created),
        interchange_ref,
        "",
        profile.app_code,
    )


def new_references(
    rng: np.random.Generator, created: pd.Timestamp
) -> tuple[str, str]:
    """(interchange_ref, message_ref) from one random draw plus creation seconds."""
    n = int(rng.integers(canon.REFERENCE_MIN, canon.REFERENCE_MAX))
    return f"D{n}", f"MS{n}{utils.pad(created.second)}"


def encode_day(
    series: DaySeries,
    params: MessageParameters,
    *,
    profile: Optional[PartnerProfile] = None,
    rng: Optional[np.random.Generator] = None,
    clock: Optional[Clock] = None,
) -> EncodedMessage:
    """
    Encode one day into a complete MSCONS interchange.

    Only UNB/UNH/BGM/DTM+137/UNT/UNZ depend on rng and clock; everything
    from UNS onward comes from build_payload().
    """
    profile = profile or PartnerProfile()
    rng = rng if rng is not None else np.random.default_rng()
    created = utils.to_utc((clock or utc_now)())
    interchange_ref, message_ref = new_references(rng, created)

    message = build_message_header(profile, message_ref, created)
    message.extend(build_payload(series, params))
    # UNT counts UNH..UNT inclusive
    message.append(Segment.of("UNT", str(len(message) + 1), message_ref))

    rendered = [
        service_string_advice(),
        build_interchange_header(profile, interchange_ref, created).render(),
        *(s.render() for s in message),
        Segment.of("UNZ", canon.INTERCHANGE_MESSAGE_COUNT, interchange_ref).render(),
    ]
    logger.debug(
        "Encoded %s as %s (%d segments)", series.day_key, message_ref, len(rendered)
    )
    return EncodedMessage(
        segments=tuple(rendered),
        interchange_ref=interchange_ref,
        message_ref=message_ref,
        created=created,
    )
