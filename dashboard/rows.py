import re
from collections.abc import Mapping

from dashboard.format import parse_maybe_number
from dashboard.models import DataPoint, Series

ISO3_RE = re.compile(r"[A-Z]{3}")
YEAR_COLUMN_RE = re.compile(r"[0-9]{4}")


def is_country_row(row: Mapping) -> bool:
    """Country rows carry a real ISO3 code; regional aggregates use other codes."""
    iso3 = str(row.get("ISO3") or "").strip()
    return ISO3_RE.fullmatch(iso3) is not None


def _year_keys(row: Mapping) -> dict[int, object]:
    return {int(k): k for k in row.keys() if YEAR_COLUMN_RE.fullmatch(str(k))}


def extract_year_columns(row: Mapping) -> list[int]:
    return sorted(_year_keys(row))


def row_to_series(row: Mapping) -> Series:
    keys = _year_keys(row)
    series: Series = []
    for year in sorted(keys):
        value = parse_maybe_number(row[keys[year]])
        if value is not None:
            series.append(DataPoint(year=year, value=value))
    return series
