"""Frame conversions of parsed day series."""

import pandas as pd
import pandas.testing as pdt

import msconslogic as ml
from msconslogic import canon, formats


def test_to_frame_shape_and_index(day_csv):
    days = ml.ingest.from_text(day_csv)
    df = formats.to_frame(days)
    assert len(df) == 96
    assert df.index.name == canon.INDEX_NAME
    assert str(df.index.tz) == "UTC"
    assert df.index[0] == pd.Timestamp("2024-01-11 00:00", tz="UTC")
    assert df.index[-1] == pd.Timestamp("2024-01-11 23:45", tz="UTC")
    assert list(df["slot"]) == list(range(96))
    assert (df["kwh"] == 1.0).all()


def test_to_frame_empty():
    df = formats.to_frame([])
    assert df.empty
    assert list(df.columns) == ["day", "slot", "kwh"]


def test_frame_roundtrip(day_csv, ramp_csv):
    days = ml.ingest.from_text(day_csv + "\n" + ramp_csv)
    assert formats.from_frame(formats.to_frame(days)) == days


def test_to_wide(ramp_csv):
    days = ml.ingest.from_text(ramp_csv)
    wide = formats.to_wide(days)
    assert wide.shape == (1, 96)
    pdt.assert_index_equal(wide.index, pd.Index(["2024-03-05"], name="day"))
    assert wide.loc["2024-03-05", 95] == 9.5
