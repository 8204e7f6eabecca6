"""Reader for the crop reference CSV.

The format is deliberately simple: one header line, then one crop per line
with seven positional columns. Double quotes toggle a span in which commas are
literal; there is no escaping of quotes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from cropmatch.errors import InvalidFormatError
from .crops import CROP_COLUMNS, CropRecord

log = structlog.get_logger("cropmatch.csv")


@dataclass(frozen=True)
class SkippedRow:
    line_number: int
    column_count: int


@dataclass
class ParsedCrops:
    headers: list[str]
    records: list[CropRecord] = field(default_factory=list)
    skipped: list[SkippedRow] = field(default_factory=list)


def split_csv_line(line: str) -> list[str]:
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)

    fields.append("".join(current).strip())
    return fields


def parse_crop_rows(text: str) -> ParsedCrops:
    """Parse a whole CSV blob into crop records.

    Rows with fewer than seven columns are skipped and reported, never raised.
    Raises InvalidFormatError when there is no data row at all.
    """
    lines = [ln for ln in text.splitlines() if ln]
    if len(lines) < 2:
        raise InvalidFormatError("crop CSV is empty or has no data rows")

    headers = split_csv_line(lines[0])
    log.info("crop_csv_headers", headers=headers)

    parsed = ParsedCrops(headers=headers)
    width = len(CROP_COLUMNS)

    # line numbers count non-empty lines, header is line 1
    for line_number, line in enumerate(lines[1:], start=2):
        values = split_csv_line(line)
        if len(values) < width:
            log.warning("crop_row_skipped", line=line_number, columns=len(values))
            parsed.skipped.append(SkippedRow(line_number, len(values)))
            continue
        parsed.records.append(CropRecord(*values[:width]))

    return parsed
