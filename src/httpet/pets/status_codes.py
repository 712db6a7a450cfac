"""Status code parsing and bundled status metadata.

``parse_status_code`` turns a path segment into a ``StatusCode`` or an
``Invalid`` value. It never raises: callers match on the result.

Metadata (name, summary, MDN link) ships as ``data/status_codes.json``
and is loaded once, on first use.
"""

import json
import re
from dataclasses import dataclass
from enum import StrEnum
from functools import cache
from pathlib import Path

MIN_STATUS = 100
MAX_STATUS = 599

MDN_STATUS_URL = "https://developer.mozilla.org/en-US/docs/Web/HTTP/Reference/Status"

_DATA_FILE = Path(__file__).parent / "data" / "status_codes.json"

# Exactly three ASCII digits; str.isdigit() would also accept other scripts.
_THREE_DIGITS = re.compile(r"[0-9]{3}")


class InvalidReason(StrEnum):
    """Why a status segment was rejected."""

    MALFORMED = "malformed"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True, slots=True)
class StatusCode:
    """A validated HTTP status code in the 100–599 range."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Invalid:
    """A status segment that failed validation.

    ``segment`` is the literal text from the path, kept for logging only.
    """

    reason: InvalidReason
    segment: str


def parse_status_code(segment: str) -> StatusCode | Invalid:
    """Parse a path segment into a status code.

    Rules:

    - exactly three ASCII digits, no whitespace or sign
    - no leading zero (``"042"`` is malformed, not 42)
    - value within 100–599, else ``OUT_OF_RANGE``
    """
    if _THREE_DIGITS.fullmatch(segment) is None or segment[0] == "0":
        return Invalid(InvalidReason.MALFORMED, segment)
    value = int(segment)
    if not MIN_STATUS <= value <= MAX_STATUS:
        return Invalid(InvalidReason.OUT_OF_RANGE, segment)
    return StatusCode(value)


@dataclass(frozen=True, slots=True)
class StatusInfo:
    """Human-facing metadata for a status code."""

    code: int
    name: str
    summary: str
    mdn_url: str


@cache
def load_status_codes(path: Path = _DATA_FILE) -> dict[int, StatusInfo]:
    """Load the bundled status metadata, keyed by integer code."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    return {
        int(code): StatusInfo(
            code=int(code),
            name=entry["name"],
            summary=entry["summary"],
            mdn_url=entry.get("mdn_url") or f"{MDN_STATUS_URL}/{code}",
        )
        for code, entry in raw.items()
    }


def status_info(code: int) -> StatusInfo | None:
    """Metadata for *code*, or ``None`` if it is not a documented status."""
    return load_status_codes().get(code)
