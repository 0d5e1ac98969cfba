import copy

from dashboard.aggregate import (
    collect_years,
    compute_world_average,
    count_countries_with_both,
    pick_scatter_year,
)
from dashboard.models import DataPoint
from tests.helpers import metric


def test_world_average_skips_missing_countries_per_year():
    by_iso3 = {"A": metric("AAA", {2000: 10, 2001: 20}), "B": metric("BBB", {2000: 30})}
    assert compute_world_average(by_iso3) == [DataPoint(2000, 20.0), DataPoint(2001, 20.0)]


def test_world_average_omits_years_without_contributors():
    by_iso3 = {"A": metric("AAA", {1990: 1}), "B": metric("BBB", {2000: 3})}
    assert [d.year for d in compute_world_average(by_iso3)] == [1990, 2000]


def test_world_average_of_empty_metric():
    assert compute_world_average({}) == []
    assert compute_world_average({"A": metric("AAA", {})}) == []


def test_world_average_is_pure():
    by_iso3 = {"A": metric("AAA", {2000: 1, 2001: 2}), "B": metric("BBB", {2001: 4})}
    before = copy.deepcopy(by_iso3)
    first = compute_world_average(by_iso3)
    second = compute_world_average(by_iso3)
    assert first == second
    assert by_iso3 == before


def test_collect_years_is_union():
    by_iso3 = {"A": metric("AAA", {2000: 1}), "B": metric("BBB", {2001: 1, 2000: 2})}
    assert collect_years(by_iso3) == {2000, 2001}


def _five_countries(years):
    return {f"C{i}X": metric(f"C{i}X", {y: 1.0 for y in years}) for i in range(5)}


def test_scatter_year_prefers_later_year_on_tie():
    taxes = _five_countries([2010, 2012])
    subsidies = _five_countries([2010, 2012])
    # 2011 is shared by both metrics but only one country has both values
    taxes["C0X"] = metric("C0X", {2010: 1, 2011: 1, 2012: 1})
    subsidies["C0X"] = metric("C0X", {2010: 1, 2011: 1, 2012: 1})
    assert pick_scatter_year(taxes, subsidies) == 2012


def test_scatter_year_prefers_higher_coverage_over_recency():
    taxes = {
        "AAA": metric("AAA", {2010: 1, 2015: 1}),
        "BBB": metric("BBB", {2010: 1}),
    }
    subsidies = {
        "AAA": metric("AAA", {2010: 1, 2015: 1}),
        "BBB": metric("BBB", {2010: 1, 2015: 1}),
    }
    assert count_countries_with_both(taxes, subsidies, 2010) == 2
    assert count_countries_with_both(taxes, subsidies, 2015) == 1
    assert pick_scatter_year(taxes, subsidies) == 2010


def test_scatter_year_only_counts_countries_in_both_metrics():
    taxes = {"AAA": metric("AAA", {2010: 1}), "BBB": metric("BBB", {2011: 1})}
    subsidies = {"AAA": metric("AAA", {2011: 1}), "CCC": metric("CCC", {2010: 1, 2011: 1})}
    # no country has both values in any year; ties fall to the latest candidate
    assert pick_scatter_year(taxes, subsidies) == 2011


def test_scatter_year_none_without_common_year():
    taxes = {"AAA": metric("AAA", {2000: 1})}
    subsidies = {"AAA": metric("AAA", {2001: 1})}
    assert pick_scatter_year(taxes, subsidies) is None
    assert pick_scatter_year({}, {}) is None
