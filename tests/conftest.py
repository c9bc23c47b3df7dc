import numpy as np
import pandas as pd
import pytest

from msconslogic.types import MessageParameters

LOC = "DE913000000000000000000000000000X"


def quarter_hours():
    for slot in range(96):
        h, m = divmod(slot * 15, 60)
        yield slot, h, m


@pytest.fixture
def day_csv():
    # 11.01.2024, every quarter hour, value 1,000
    return "\n".join(f"11.01.2024 {h:02d}:{m:02d};1,000" for _, h, m in quarter_hours())


@pytest.fixture
def ramp_csv():
    # ISO timestamps, tab separated, slot i carries i/10 with a decimal comma
    return "\n".join(
        f"2024-03-05 {h}:{m:02d}\t" + f"{slot / 10:.1f}".replace(".", ",")
        for slot, h, m in quarter_hours()
    )


@pytest.fixture
def params():
    return MessageParameters(location_id=LOC, direction="consumption", unit="kwh")


@pytest.fixture
def fixed_clock():
    ts = pd.Timestamp("2024-02-01 10:30:07", tz="UTC")
    return lambda: ts


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
