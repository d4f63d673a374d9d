"""Forgiving parser for pasted `NAME=VALUE` chart data.

Administrators paste target data straight out of a spreadsheet, one program per
line. The parser follows the same guiding rules as the rest of the portal's
text ingestion:

- Malformed lines are non-fatal and never raise.
- Surviving records keep the input order, duplicates included.
- The raw text is persisted unchanged elsewhere; parsing is recomputed on read.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Literal

SkipReason = Literal["missing_separator", "empty_name", "empty_value", "invalid_number"]

_SEPARATOR = "="
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True, slots=True)
class ChartRecord:
    """One parsed data point for the target chart.

    Attributes:
        name: Trimmed, non-empty category label.
        value: Finite numeric value.
    """

    name: str
    value: float


@dataclass(frozen=True, slots=True)
class SkippedLine:
    """An input line that did not produce a record.

    Attributes:
        line_number: 1-based position of the line in the pasted text.
        text: The line as it appeared in the input.
        reason: Why the line was rejected.
    """

    line_number: int
    text: str
    reason: SkipReason


ChartDataset = tuple[ChartRecord, ...]


@dataclass(frozen=True, slots=True)
class ParsedChartData:
    """Parser output: accepted records plus the lines that were dropped."""

    records: ChartDataset
    skipped: tuple[SkippedLine, ...] = ()


def parse_chart_records(text: str | None) -> ChartDataset:
    """Parse `NAME=VALUE` lines into chart records.

    Args:
        text: Raw pasted text. `None` is treated as empty.

    Returns:
        A new tuple of ChartRecord in input line order.
    """

    return parse_chart_data(text).records


def parse_chart_data(text: str | None) -> ParsedChartData:
    """Parse chart text and report which lines were skipped.

    Args:
        text: Raw pasted text. `None` is treated as empty.

    Returns:
        ParsedChartData with the accepted records and any skipped lines.

    Notes:
        Lines end at `\\n` only; the `\\r` of a CRLF ending is trimmed, also from
        reported skipped text. Each line is split on the first `=` only, so a
        value such as `3=4` keeps its trailing text and is then read by its
        leading number. Lines that are blank after trimming are ignored
        without being reported.
    """

    if not text:
        return ParsedChartData(records=())

    records: list[ChartRecord] = []
    skipped: list[SkippedLine] = []
    for index, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        record, reason = _parse_line(line)
        if record is None:
            skipped.append(SkippedLine(line_number=index, text=line.rstrip("\r"), reason=reason or "invalid_number"))
            continue
        records.append(record)
    return ParsedChartData(records=tuple(records), skipped=tuple(skipped))


def _parse_line(line: str) -> tuple[ChartRecord | None, SkipReason | None]:
    """Parse one line, returning either a record or the rejection reason."""

    name, separator, raw_value = line.partition(_SEPARATOR)
    if not separator:
        return None, "missing_separator"

    name = name.strip()
    if not name:
        return None, "empty_name"

    raw_value = raw_value.strip()
    if not raw_value:
        return None, "empty_value"

    value = parse_leading_number(raw_value)
    if value is None:
        return None, "invalid_number"
    return ChartRecord(name=name, value=value), None


def parse_leading_number(value: str) -> float | None:
    """Read the leading decimal number of a string.

    Args:
        value: Trimmed value text, e.g. `"150"`, `"12.5%"` or `"320 orang"`.

    Returns:
        The parsed finite float, or None when the text does not start with a
        number.
    """

    match = _LEADING_NUMBER_RE.match(value.strip())
    if match is None:
        return None
    try:
        parsed = float(match.group(0))
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed
