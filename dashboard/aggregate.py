from collections.abc import Mapping

from dashboard.models import CountryMetric, DataPoint, Series

MetricByIso3 = Mapping[str, CountryMetric]


def series_to_year_map(series: Series) -> dict[int, float]:
    return {d.year: d.value for d in series}


def collect_years(by_iso3: MetricByIso3) -> set[int]:
    years: set[int] = set()
    for metric in by_iso3.values():
        years.update(d.year for d in metric.series)
    return years


def compute_world_average(by_iso3: MetricByIso3) -> Series:
    """Unweighted mean per year over the countries that report that year."""
    year_maps = [series_to_year_map(m.series) for m in by_iso3.values()]

    world: Series = []
    for year in sorted(collect_years(by_iso3)):
        values = [ym[year] for ym in year_maps if ym.get(year) is not None]
        if values:
            world.append(DataPoint(year=year, value=sum(values) / len(values)))
    return world


def count_countries_with_both(
    taxes_by_iso3: MetricByIso3,
    subsidies_by_iso3: MetricByIso3,
    year: int,
) -> int:
    count = 0
    for iso3, taxes in taxes_by_iso3.items():
        subsidies = subsidies_by_iso3.get(iso3)
        if subsidies is None:
            continue
        t_val = series_to_year_map(taxes.series).get(year)
        s_val = series_to_year_map(subsidies.series).get(year)
        if t_val is not None and s_val is not None:
            count += 1
    return count


def pick_scatter_year(taxes_by_iso3: MetricByIso3, subsidies_by_iso3: MetricByIso3) -> int | None:
    """
    Pick the year shared by both metrics with the most countries reporting both.

    Ties go to the later year. Returns None when the metrics share no year.
    """
    candidates = sorted(collect_years(taxes_by_iso3) & collect_years(subsidies_by_iso3))
    if not candidates:
        return None

    best_year = candidates[0]
    best_count = -1
    for year in candidates:
        count = count_countries_with_both(taxes_by_iso3, subsidies_by_iso3, year)
        if count > best_count or (count == best_count and year > best_year):
            best_year, best_count = year, count
    return best_year
