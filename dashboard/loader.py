import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

import pandas as pd

from dashboard.config import DatasetConfig
from dashboard.models import CountryMetric, MetricDataset
from dashboard.rows import is_country_row, row_to_series

logger = logging.getLogger(__name__)

RowPredicate = Callable[[Mapping], bool]


def read_rows(source) -> list[dict[str, str]]:
    """Read a wide CSV as raw string cells. A missing file propagates as FileNotFoundError."""
    df = pd.read_csv(source, dtype=str, keep_default_na=False, low_memory=False)
    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict(orient="records")


def _field(row: Mapping, name: str) -> str:
    return str(row.get(name) or "").strip()


def load_wide_series(
    rows: Iterable[Mapping],
    indicator: str | None = None,
    unit: str | None = None,
    predicate: RowPredicate | None = None,
) -> MetricDataset:
    """
    Turn wide rows into one CountryMetric per ISO3.

    Filters apply in order: country rows only, exact indicator match, exact unit
    match, then the custom predicate. When several rows share an ISO3 the one
    with the strictly longer series wins; ties keep the first row seen. Country
    names are taken from the last matching row regardless.
    """
    by_iso3: dict[str, CountryMetric] = {}
    country_name_by_iso3: dict[str, str] = {}

    for row in rows:
        if not is_country_row(row):
            continue
        if indicator and _field(row, "Indicator") != indicator:
            continue
        if unit and _field(row, "Unit") != unit:
            continue
        if predicate and not predicate(row):
            continue

        iso3 = _field(row, "ISO3")
        country = _field(row, "Country")
        country_name_by_iso3[iso3] = country

        series = row_to_series(row)
        existing = by_iso3.get(iso3)
        if existing is None or len(series) > len(existing.series):
            by_iso3[iso3] = CountryMetric(
                iso3=iso3,
                iso2=_field(row, "ISO2"),
                country=country,
                indicator=_field(row, "Indicator"),
                unit=_field(row, "Unit"),
                series=series,
            )

    return MetricDataset(by_iso3=by_iso3, country_name_by_iso3=country_name_by_iso3)


def load_dataset(
    spec: DatasetConfig,
    data_dir: Path | str,
    predicate: RowPredicate | None = None,
) -> MetricDataset:
    source = Path(data_dir) / spec.file
    rows = read_rows(source)
    dataset = load_wide_series(rows, indicator=spec.indicator, unit=spec.unit, predicate=predicate)
    logger.info(
        "Loaded %s from %s: %d rows, %d countries",
        spec.key,
        source,
        len(rows),
        len(dataset.by_iso3),
    )
    return dataset
