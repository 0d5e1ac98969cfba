from collections.abc import Mapping

from dashboard.models import CountryMetric, Series


def get_series_for_country_or_world(
    by_iso3: Mapping[str, CountryMetric],
    world_series: Series,
    iso3: str | None = None,
) -> Series:
    """The country's series, or the world series itself when no country is selected.

    Callers must not mutate the returned list.
    """
    if not iso3:
        return world_series
    metric = by_iso3.get(iso3)
    return metric.series if metric is not None else []


def get_value_at_year(series: Series, year: int | None) -> float | None:
    if not year:
        return None
    for d in series:
        if d.year == year:
            return d.value
    return None
