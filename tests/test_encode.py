"""Message encoder: fixed MSCONS grammar for one day."""

import re

import numpy as np
import pandas as pd
import pytest

import msconslogic as ml
from msconslogic.config import PartnerProfile
from msconslogic.encode import build_payload, encode_day
from msconslogic.types import DaySeries, MessageParameters

LOC = "DE913000000000000000000000000000X"


def _qty_values(msg):
    return [s[len("QTY+220:") : -1] for s in msg.segments if s.startswith("QTY+")]


@pytest.fixture
def one_day(day_csv):
    (day,) = ml.ingest.from_text(day_csv)
    return day


def test_end_to_end_consumption_kwh(one_day, params, rng, fixed_clock):
    msg = encode_day(one_day, params, rng=rng, clock=fixed_clock)
    qty = [s for s in msg.segments if s.startswith("QTY+")]
    assert len(qty) == 96
    assert all(s == "QTY+220:1.000'" for s in qty)
    assert f"LOC+172+{LOC}'" in msg.segments
    assert "PIA+5+1-0?:1.8.0:SRW'" in msg.segments


def test_segment_order(one_day, params, rng, fixed_clock):
    msg = encode_day(one_day, params, rng=rng, clock=fixed_clock)
    head = msg.tags[:15]
    assert head == [
        "UNA", "UNB", "UNH", "BGM", "DTM", "RFF", "NAD", "NAD",
        "UNS", "NAD", "LOC", "DTM", "DTM", "LIN", "PIA",
    ]
    body = msg.tags[15:-2]
    assert body == ["QTY", "DTM", "DTM"] * 96
    assert msg.tags[-2:] == ["UNT", "UNZ"]
    assert len(msg) == 15 + 288 + 2


def test_header_fields(one_day, params, fixed_clock):
    msg = encode_day(one_day, params, rng=np.random.default_rng(0), clock=fixed_clock)
    n = msg.interchange_ref[1:]
    assert re.fullmatch(r"D\d{7}", msg.interchange_ref)
    assert msg.message_ref == f"MS{n}07"
    s = msg.segments
    assert s[0] == "UNA:+.? '"
    assert s[1] == (
        f"UNB+UNOC:3+9979383000006:500+9906629000002:500+240201:1030+D{n}++TL'"
    )
    assert s[2] == f"UNH+MS{n}07+MSCONS:D:04B:UN:2.4c'"
    assert s[3] == f"BGM+Z48+MS{n}07+9'"
    assert s[4] == "DTM+137:202402011030?+00:303'"
    assert s[5] == "RFF+Z13:13025'"
    assert s[6] == "NAD+MS+9979383000006::293'"
    assert s[7] == "NAD+MR+9906629000002::293'"
    assert s[-1] == f"UNZ+1+D{n}'"


def test_unt_counts_unh_through_unt(one_day, params, rng, fixed_clock):
    msg = encode_day(one_day, params, rng=rng, clock=fixed_clock)
    unh = msg.tags.index("UNH")
    unt = msg.tags.index("UNT")
    assert msg.segments[unt] == f"UNT+{unt - unh + 1}+{msg.message_ref}'"
    assert unt - unh + 1 == 302


def test_period_and_slot_timestamps(one_day, params, rng, fixed_clock):
    msg = encode_day(one_day, params, rng=rng, clock=fixed_clock)
    s = msg.segments
    assert s[11] == "DTM+163:202401110000?+00:303'"
    assert s[12] == "DTM+164:202401120000?+00:303'"
    # first and last slot
    assert s[15:18] == (
        "QTY+220:1.000'",
        "DTM+163:202401110000?+00:303'",
        "DTM+164:202401110015?+00:303'",
    )
    assert s[-5:-2] == (
        "QTY+220:1.000'",
        "DTM+163:202401112345?+00:303'",
        "DTM+164:202401120000?+00:303'",
    )


def test_slot_chain_has_no_gaps(one_day, params, rng, fixed_clock):
    msg = encode_day(one_day, params, rng=rng, clock=fixed_clock)
    stamps = [
        pd.to_datetime(m.group(2), format="%Y%m%d%H%M", utc=True)
        for m in (re.match(r"DTM\+(163|164):(\d{12})", s) for s in msg.segments[15:-2])
        if m
    ]
    starts, ends = stamps[0::2], stamps[1::2]
    assert starts[0] == pd.Timestamp("2024-01-11", tz="UTC")
    for i, (a, b) in enumerate(zip(starts, ends)):
        assert a == starts[0] + pd.Timedelta(minutes=15 * i)
        assert b - a == pd.Timedelta(minutes=15)
    assert starts[1:] == ends[:-1]


def test_average_power_is_scaled_to_energy():
    day = DaySeries(day_key="2024-01-11", values=(4.0,) * 96)
    params = MessageParameters(location_id=LOC, unit="kw")
    payload = [s.render() for s in build_payload(day, params)]
    assert payload.count("QTY+220:1.000'") == 96
    # the grid itself is untouched
    assert day.values[0] == 4.0


def test_generation_uses_2_8_0(one_day):
    params = MessageParameters(location_id=LOC, direction="generation")
    payload = [s.render() for s in build_payload(one_day, params)]
    assert "PIA+5+1-0?:2.8.0:SRW'" in payload


def test_all_zero_day_keeps_96_quantities(params, rng, fixed_clock):
    day = DaySeries(day_key="2024-01-11", values=(0.0,) * 96)
    msg = encode_day(day, params, rng=rng, clock=fixed_clock)
    assert _qty_values(msg) == ["0.000"] * 96


def test_quantities_follow_slot_order(ramp_csv, params):
    (day,) = ml.ingest.from_text(ramp_csv)
    payload = [s.render() for s in build_payload(day, params)]
    qty = [p[len("QTY+220:") : -1] for p in payload if p.startswith("QTY+")]
    assert qty == [f"{i / 10:.3f}" for i in range(96)]


def test_payload_is_reproducible(day_csv, params):
    a = build_payload(ml.ingest.from_text(day_csv)[0], params)
    b = build_payload(ml.ingest.from_text(day_csv)[0], params)
    assert a == b


def test_only_header_fields_vary_between_runs(one_day, params):
    m1 = encode_day(
        one_day,
        params,
        rng=np.random.default_rng(1),
        clock=lambda: pd.Timestamp("2024-02-01 10:30:07", tz="UTC"),
    )
    m2 = encode_day(
        one_day,
        params,
        rng=np.random.default_rng(2),
        clock=lambda: pd.Timestamp("2025-06-30 23:59:59", tz="UTC"),
    )
    start = m1.tags.index("UNS")
    assert m1.segments[start:-2] == m2.segments[start:-2]
    assert m1.segments[1] != m2.segments[1]


def test_same_seed_and_clock_is_deterministic(one_day, params, fixed_clock):
    a = encode_day(one_day, params, rng=np.random.default_rng(5), clock=fixed_clock)
    b = encode_day(one_day, params, rng=np.random.default_rng(5), clock=fixed_clock)
    assert a.to_text() == b.to_text()


def test_to_text_joins_segments(one_day, params, rng, fixed_clock):
    msg = encode_day(one_day, params, rng=rng, clock=fixed_clock)
    assert msg.to_text().startswith("UNA:+.? 'UNB+UNOC:3+")
    assert msg.to_text("\n").count("\n") == len(msg) - 1


def test_custom_partner_profile(one_day, params, rng, fixed_clock):
    profile = PartnerProfile(sender_id="111", recipient_id="222", app_code="XY")
    msg = encode_day(one_day, params, profile=profile, rng=rng, clock=fixed_clock)
    assert msg.segments[1].startswith("UNB+UNOC:3+111:500+222:500+")
    assert msg.segments[1].endswith("++XY'")
    assert "NAD+MS+111::293'" in msg.segments
    assert "NAD+MR+222::293'" in msg.segments


def test_location_with_service_characters_is_escaped(one_day, rng, fixed_clock):
    params = MessageParameters(location_id="DE+1:2")
    msg = encode_day(one_day, params, rng=rng, clock=fixed_clock)
    assert "LOC+172+DE?+1?:2'" in msg.segments


def test_thirty_digit_value_is_encoded(params, rng, fixed_clock):
    (day,) = ml.ingest.from_text("11.01.2024 00:00;" + "9" * 30)
    msg = encode_day(day, params, rng=rng, clock=fixed_clock)
    assert day.values[0] == 1e30
    assert msg.segments[15] == "QTY+220:1" + "0" * 30 + ".000'"
