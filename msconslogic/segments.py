"""EDIFACT segment model and rendering for the UNA:+.? ' service string."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Union

import pandas as pd

from . import canon, utils

Element = Union[str, Tuple[str, ...]]

_SPECIAL = (
    canon.RELEASE_CHAR,
    canon.COMPONENT_SEP,
    canon.ELEMENT_SEP,
    canon.SEGMENT_TERMINATOR,
)


def escape(value: str) -> str:
    """Prefix every service character with the release character."""
    # release char first so inserted '?' are not escaped twice
    out = value.replace(canon.RELEASE_CHAR, canon.RELEASE_CHAR * 2)
    for ch in _SPECIAL[1:]:
        out = out.replace(ch, canon.RELEASE_CHAR + ch)
    return out


@dataclass(frozen=True)
class Segment:
    """
    A tagged segment: tag + ordered data elements.

    Each element is either a simple value or a tuple of components
    (a composite). Values are raw text; escaping happens only in render().
    """

    tag: str
    elements: Tuple[Element, ...] = ()

    @classmethod
    def of(cls, tag: str, *elements: Element) -> "Segment":
        return cls(tag, tuple(elements))

    def render(self) -> str:
        parts = [self.tag]
        for el in self.elements:
            if isinstance(el, tuple):
                parts.append(canon.COMPONENT_SEP.join(escape(c) for c in el))
            else:
                parts.append(escape(el))
        return canon.ELEMENT_SEP.join(parts) + canon.SEGMENT_TERMINATOR

    def __str__(self) -> str:
        return self.render()


def dtm(qualifier: str, ts: pd.Timestamp) -> Segment:
    """DTM with '<qualifier>:<YYYYMMDDHHmm>?+00:303'. All message timestamps go through here."""
    return Segment.of(
        "DTM",
        (qualifier, utils.format_edifact_datetime(ts), canon.DTM_FORMAT_QUALIFIER),
    )


def service_string_advice() -> str:
    return canon.SERVICE_STRING_ADVICE
