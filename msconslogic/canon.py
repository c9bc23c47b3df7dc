from __future__ import annotations
from typing import Final, Dict, Tuple

SLOT_MINUTES: Final[int] = 15
SLOTS_PER_DAY: Final[int] = 96
INDEX_NAME: Final[str] = "t_start"
COMMON_TIMESTAMP_NAMES = ("t_start", "timestamp", "time", "ts", "datetime", "date")
COMMON_VALUE_NAMES = ("kwh", "kw", "value", "energy", "consumption")

# Lines containing any of these (lower-cased) are treated as header/meta rows
HEADER_MARKERS: Tuple[str, ...] = ("datum", "date", "timestamp", "zeit")
COMMENT_PREFIX: Final[str] = "#"

# Direction -> OBIS register code / file name label
OBIS_CODES: Dict[str, str] = {
    "consumption": "1.8.0",
    "generation": "2.8.0",
}
DIRECTION_LABELS: Dict[str, str] = {
    "consumption": "VERBRAUCH",
    "generation": "ERZEUGUNG",
}

# Unit mode -> factor to kWh per quarter hour
UNIT_FACTORS: Dict[str, float] = {
    "kwh": 1.0,
    "kw": 0.25,
}

# EDIFACT service characters (declared by UNA)
COMPONENT_SEP: Final[str] = ":"
ELEMENT_SEP: Final[str] = "+"
DECIMAL_MARK: Final[str] = "."
RELEASE_CHAR: Final[str] = "?"
SEGMENT_TERMINATOR: Final[str] = "'"
SERVICE_STRING_ADVICE: Final[str] = "UNA:+.? '"

# MSCONS D.04B profile literals
SYNTAX_ID: Final[Tuple[str, ...]] = ("UNOC", "3")
MESSAGE_TYPE: Final[Tuple[str, ...]] = ("MSCONS", "D", "04B", "UN", "2.4c")
DOCUMENT_NAME_CODE: Final[str] = "Z48"
MESSAGE_FUNCTION_ORIGINAL: Final[str] = "9"
REFERENCE_QUALIFIER: Final[str] = "Z13"
REFERENCE_VALUE: Final[str] = "13025"
SECTION_DETAIL: Final[str] = "D"
DELIVERY_POINT_ROLE: Final[str] = "DP"
SENDER_ROLE: Final[str] = "MS"
RECIPIENT_ROLE: Final[str] = "MR"
LOCATION_QUALIFIER: Final[str] = "172"
PRODUCT_ID_QUALIFIER: Final[str] = "5"
REGISTER_PREFIX: Final[str] = "1-0:"  # escaped to 1-0?: on output
REGISTER_AGENCY: Final[str] = "SRW"
QUANTITY_QUALIFIER: Final[str] = "220"
UTC_OFFSET_MARKER: Final[str] = "+00"
DTM_FORMAT_QUALIFIER: Final[str] = "303"
DTM_CREATION: Final[str] = "137"
DTM_PERIOD_START: Final[str] = "163"
DTM_PERIOD_END: Final[str] = "164"
QUANTITY_DECIMALS: Final[int] = 3
LINE_ITEM_NUMBER: Final[str] = "1"
INTERCHANGE_MESSAGE_COUNT: Final[str] = "1"
REFERENCE_MIN: Final[int] = 1_000_000
REFERENCE_MAX: Final[int] = 10_000_000  # exclusive
