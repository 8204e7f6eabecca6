from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from cropmatch.engine.crops import CropRecord
from cropmatch.engine.csv_reader import SkippedRow, parse_crop_rows, split_csv_line
from cropmatch.errors import InvalidFormatError

HEADER = "Commodity Type,Genus,Revenue per Acre,USDA Zones,Preferred Soil Drainage,Preferred pH,Soil Type"


def test_split_keeps_commas_inside_quotes() -> None:
    line = 'Tomato,Solanum,"$20,000 - $30,000",Zones 5-9'
    assert split_csv_line(line) == ["Tomato", "Solanum", "$20,000 - $30,000", "Zones 5-9"]


def test_split_trims_fields_and_keeps_trailing_empty() -> None:
    assert split_csv_line("  a , b ,") == ["a", "b", ""]
    assert split_csv_line("") == [""]


def test_split_unbalanced_quote_swallows_rest_of_line() -> None:
    assert split_csv_line('a,"b,c') == ["a", "b,c"]


def test_parse_maps_columns_positionally(scenario_csv: str) -> None:
    parsed = parse_crop_rows(scenario_csv)

    assert parsed.headers[0] == "Commodity Type"
    assert [r.commodity_type for r in parsed.records] == ["Tomato", "Lavender", "Rice"]
    assert parsed.records[1] == CropRecord(
        commodity_type="Lavender",
        genus="Lavandula",
        revenue_per_acre="$40,000-$60,000",
        usda_zones="Zones 5-10",
        preferred_soil_drainage="Well-drained",
        preferred_ph="6.5-8.0",
        soil_type="Sand and Clay",
    )
    assert parsed.skipped == []


def test_short_rows_are_skipped_with_warning() -> None:
    text = "\n".join([
        HEADER,
        "Garlic,Allium,$15000-$25000,Zones 3-9,Well-drained,6.0-7.5,Loam",
        "",
        "Broken,Row,only three",
        "Basil,Ocimum,$10000-$20000,Zones 4-10,Well-drained,6.0-7.5,Loam",
    ])

    with capture_logs() as logs:
        parsed = parse_crop_rows(text)

    assert [r.commodity_type for r in parsed.records] == ["Garlic", "Basil"]
    assert parsed.skipped == [SkippedRow(line_number=3, column_count=3)]
    skipped = [e for e in logs if e["event"] == "crop_row_skipped"]
    assert skipped and skipped[0]["log_level"] == "warning"


def test_skipped_count_matches_line_arithmetic() -> None:
    rows = [
        "A,g,$1-$2,5-9,Poor,6-7,Clay",
        "B,g,$1-$2",
        "C,g,$1-$2,5-9,Poor,6-7,Clay,extra column",
        "D",
        '"E,with comma",g,$1-$2,5-9,Poor,6-7,Clay',
    ]
    parsed = parse_crop_rows("\n".join([HEADER, *rows]))

    assert len(parsed.skipped) == (len(rows) + 1) - 1 - len(parsed.records)
    assert [r.commodity_type for r in parsed.records] == ["A", "C", "E,with comma"]
    assert parsed.records[1].soil_type == "Clay"


def test_windows_line_endings() -> None:
    text = HEADER + "\r\n" + "A,g,$1-$2,5-9,Poor,6-7,Clay\r\n"
    parsed = parse_crop_rows(text)
    assert len(parsed.records) == 1
    assert parsed.records[0].soil_type == "Clay"


@pytest.mark.parametrize("text", ["", "\n\n", HEADER, HEADER + "\n\n"])
def test_empty_or_header_only_is_invalid(text: str) -> None:
    with pytest.raises(InvalidFormatError):
        parse_crop_rows(text)
