import json

import altair as alt
import pandas as pd

from dashboard.accessor import get_series_for_country_or_world, get_value_at_year
from dashboard.models import DashboardBundle, SelectionState, Series

WORLD_LABEL = "World average"
REFERENCE_COLOUR = "#D00000"
COMPARISON_COLOUR = "#0D3692"
OTHER_COLOUR = "#B0B0B0"

# Frames key their rows by role; display names can collide when the
# comparison country is the reference country itself.
REFERENCE_ROLE = "reference"
COMPARISON_ROLE = "comparison"
ROLES = [REFERENCE_ROLE, COMPARISON_ROLE]

SCATTER_SELECTION = "pick_country"
YEAR_SELECTION = "pick_year"

# Small multiples: (metric key, title, y-axis label)
INDICATOR_BLOCKS = [
    ("temperature", "Temperature anomaly (°C)", "°C"),
    ("disasters", "Climate disaster frequency (#/year)", "#/year"),
    ("taxes", "Environmental taxes (% of GDP)", "% of GDP"),
]


# -------------------------
# Data shaping
# -------------------------
def comparison_label(bundle: DashboardBundle, iso3: str | None) -> str:
    if not iso3:
        return WORLD_LABEL
    return bundle.country_name_by_iso3.get(iso3, iso3)


def reference_series(bundle: DashboardBundle, metric: str, iso3: str) -> Series:
    row = bundle.metrics[metric].get(iso3)
    return row.series if row is not None else []


def comparison_series(bundle: DashboardBundle, metric: str, iso3: str | None) -> Series:
    return get_series_for_country_or_world(bundle.metrics[metric], bundle.world[metric], iso3)


def scatter_points(bundle: DashboardBundle) -> pd.DataFrame:
    """One row per country with both taxes and subsidies at the scatter year."""
    year = bundle.scatter_year
    rows = []
    if year is not None:
        subsidies = bundle.metrics["subsidies"]
        for iso3, tax_row in bundle.metrics["taxes"].items():
            sub_row = subsidies.get(iso3)
            if sub_row is None:
                continue
            tax = get_value_at_year(tax_row.series, year)
            sub = get_value_at_year(sub_row.series, year)
            if tax is None or sub is None:
                continue
            rows.append({"iso3": iso3, "country": tax_row.country, "subsidies": sub, "taxes": tax})
    return pd.DataFrame(rows, columns=["iso3", "country", "subsidies", "taxes"])


def search_options(bundle: DashboardBundle) -> list[tuple[str, str]]:
    """(iso3, name) pairs for the countries shown in the scatter, sorted by name."""
    pts = scatter_points(bundle)
    return sorted(zip(pts["iso3"], pts["country"]), key=lambda p: p[1])


def compute_discrepancy_series(taxes: Series, expenditures: Series) -> pd.DataFrame:
    tax_by_year = {d.year: d.value for d in taxes}
    exp_by_year = {d.year: d.value for d in expenditures}

    rows = []
    for year in sorted(set(tax_by_year) | set(exp_by_year)):
        t = tax_by_year.get(year)
        e = exp_by_year.get(year)
        if t is None or e is None:
            continue
        rows.append({"year": year, "value": t - e, "taxes": t, "expenditures": e})
    return pd.DataFrame(rows, columns=["year", "value", "taxes", "expenditures"])


def pick_default_bar_year(taxes: Series, expenditures: Series) -> int | None:
    """Latest year where both taxes and expenditures are present."""
    years = sorted({d.year for d in taxes} | {d.year for d in expenditures}, reverse=True)
    for year in years:
        if get_value_at_year(taxes, year) is not None and get_value_at_year(expenditures, year) is not None:
            return year
    return None


def window_years(window: str) -> int | None:
    if window == "full":
        return None
    return int(window.rstrip("y"))


def clip_series_to_window(series: Series, window: str, latest_year: int | None = None, earliest_year: int | None = None) -> Series:
    """
    Keep the trailing N years of a series for an 'Ny' window.

    latest_year/earliest_year let two series share one window; by default the
    bounds come from the series itself.
    """
    span = window_years(window)
    if span is None or not series:
        return series
    max_year = latest_year if latest_year is not None else max(d.year for d in series)
    min_year = earliest_year if earliest_year is not None else min(d.year for d in series)
    start = max(min_year, max_year - span)
    return [d for d in series if d.year >= start]


def series_pair_frame(a: Series, a_label: str, b: Series, b_label: str, window: str = "full") -> pd.DataFrame:
    """Long frame (year, value, role, series) for a reference/comparison pair on one window."""
    years = [d.year for d in a] + [d.year for d in b]
    latest = max(years) if years else None
    earliest = min(years) if years else None
    rows = []
    for role, label, s in ((REFERENCE_ROLE, a_label, a), (COMPARISON_ROLE, b_label, b)):
        for d in clip_series_to_window(s, window, latest, earliest):
            rows.append({"year": d.year, "value": d.value, "role": role, "series": label})
    return pd.DataFrame(rows, columns=["year", "value", "role", "series"])


def bar_rows(bundle: DashboardBundle, state: SelectionState, reference_iso3: str, reference_name: str) -> tuple[int | None, pd.DataFrame]:
    a_taxes = reference_series(bundle, "taxes", reference_iso3)
    a_exp = reference_series(bundle, "expenditures", reference_iso3)
    c_taxes = comparison_series(bundle, "taxes", state.selected_country_iso3)
    c_exp = comparison_series(bundle, "expenditures", state.selected_country_iso3)

    year = state.selected_year or pick_default_bar_year(a_taxes, a_exp)
    comp_name = comparison_label(bundle, state.selected_country_iso3)

    rows = []
    pairs = ((REFERENCE_ROLE, reference_name, a_taxes, a_exp), (COMPARISON_ROLE, comp_name, c_taxes, c_exp))
    for role, group, taxes, exp in pairs:
        rows.append({"role": role, "group": group, "measure": "Taxes", "value": get_value_at_year(taxes, year)})
        rows.append({"role": role, "group": group, "measure": "Expenditures", "value": get_value_at_year(exp, year)})
    return year, pd.DataFrame(rows, columns=["role", "group", "measure", "value"])


def discrepancy_frame(bundle: DashboardBundle, state: SelectionState, reference_iso3: str, reference_name: str) -> pd.DataFrame:
    iso3 = state.selected_country_iso3
    ref = compute_discrepancy_series(
        reference_series(bundle, "taxes", reference_iso3),
        reference_series(bundle, "expenditures", reference_iso3),
    ).assign(role=REFERENCE_ROLE, series=reference_name)
    comp = compute_discrepancy_series(
        comparison_series(bundle, "taxes", iso3),
        comparison_series(bundle, "expenditures", iso3),
    ).assign(role=COMPARISON_ROLE, series=comparison_label(bundle, iso3))
    return pd.concat([ref, comp], ignore_index=True)


# -------------------------
# Altair charts
# -------------------------
def _role_label_expr(reference_name: str, comp_name: str) -> str:
    """Vega expression turning a role value back into its display name."""
    return (
        f"datum.label == {json.dumps(REFERENCE_ROLE)} "
        f"? {json.dumps(reference_name, ensure_ascii=False)} : {json.dumps(comp_name, ensure_ascii=False)}"
    )


def _role_colour(reference_name: str, comp_name: str) -> alt.Color:
    return alt.Color(
        "role:N",
        title=None,
        scale=alt.Scale(domain=ROLES, range=[REFERENCE_COLOUR, COMPARISON_COLOUR]),
        legend=alt.Legend(labelExpr=_role_label_expr(reference_name, comp_name)),
    )


def make_scatter_chart(points: pd.DataFrame, year: int | None, state: SelectionState, reference_iso3: str) -> alt.Chart:
    df = points.copy()
    df["role"] = "Other"
    df.loc[df["iso3"] == reference_iso3, "role"] = "Reference"
    if state.selected_country_iso3:
        df.loc[df["iso3"] == state.selected_country_iso3, "role"] = "Selected"
    df["size"] = df["role"].map({"Reference": 120, "Selected": 120, "Other": 50})

    pick = alt.selection_point(name=SCATTER_SELECTION, fields=["iso3"], on="click")
    title = f"Year: {year} (latest common year)" if year is not None else "Year: N/A (no common year)"

    return (
        alt.Chart(df, title=title)
        .mark_circle(opacity=0.85)
        .encode(
            x=alt.X("subsidies:Q", title="Fossil fuel subsidies (% of GDP)"),
            y=alt.Y("taxes:Q", title="Environmental taxes (% of GDP)"),
            color=alt.Color(
                "role:N",
                legend=None,
                scale=alt.Scale(
                    domain=["Reference", "Selected", "Other"],
                    range=[REFERENCE_COLOUR, COMPARISON_COLOUR, OTHER_COLOUR],
                ),
            ),
            size=alt.Size("size:Q", legend=None),
            tooltip=[
                alt.Tooltip("country:N", title="Country"),
                alt.Tooltip("subsidies:Q", title="Subsidies (% GDP)", format=".2f"),
                alt.Tooltip("taxes:Q", title="Taxes (% GDP)", format=".2f"),
            ],
        )
        .add_params(pick)
        .properties(height=360)
    )


def make_indicator_chart(frame: pd.DataFrame, title: str, y_title: str, reference_name: str, comp_name: str) -> alt.Chart:
    """Line chart in the style of the farm dashboard line charts (YEAR on x, one colour per series)."""
    return (
        alt.Chart(frame, title=title)
        .mark_line(point=True)
        .encode(
            x=alt.X("year:Q", title="Year", axis=alt.Axis(format="d")),
            y=alt.Y("value:Q", title=y_title, scale=alt.Scale(zero=False)),
            color=_role_colour(reference_name, comp_name),
            tooltip=[
                alt.Tooltip("series:N", title="Series"),
                alt.Tooltip("year:Q", title="Year", format="d"),
                alt.Tooltip("value:Q", title="Value", format=".2f"),
            ],
        )
        .properties(height=160)
    )


def make_discrepancy_chart(
    frame: pd.DataFrame,
    selected_year: int | None,
    reference_name: str,
    comp_name: str,
) -> alt.LayerChart:
    pick = alt.selection_point(name=YEAR_SELECTION, fields=["year"], on="click", nearest=True)

    lines = (
        alt.Chart(frame)
        .mark_line(point=True)
        .encode(
            x=alt.X("year:Q", title="Year", axis=alt.Axis(format="d")),
            y=alt.Y("value:Q", title="Taxes – Expenditure (% of GDP)"),
            color=_role_colour(reference_name, comp_name),
            tooltip=[
                alt.Tooltip("series:N", title="Series"),
                alt.Tooltip("year:Q", title="Year", format="d"),
                alt.Tooltip("value:Q", title="Discrepancy", format="+.2f"),
                alt.Tooltip("taxes:Q", title="Taxes (% GDP)", format=".2f"),
                alt.Tooltip("expenditures:Q", title="Expenditure (% GDP)", format=".2f"),
            ],
        )
        .add_params(pick)
    )
    zero = alt.Chart(pd.DataFrame({"value": [0]})).mark_rule(strokeDash=[4, 4], color="#888").encode(y="value:Q")
    layers = [zero, lines]

    if selected_year is not None:
        marker = (
            alt.Chart(pd.DataFrame({"year": [selected_year]}))
            .mark_rule(color="#444")
            .encode(x="year:Q")
        )
        layers.append(marker)

    return alt.layer(*layers, title="Taxation–Expenditure discrepancy").properties(height=300)


def make_bars_chart(frame: pd.DataFrame, year: int | None, reference_name: str, comp_name: str) -> alt.Chart:
    title = f"Taxes vs Expenditures ({year})" if year is not None else "Taxes vs Expenditures (no data)"
    return (
        alt.Chart(frame.dropna(subset=["value"]), title=title)
        .mark_bar()
        .encode(
            x=alt.X(
                "role:N",
                title=None,
                sort=ROLES,
                axis=alt.Axis(labelExpr=_role_label_expr(reference_name, comp_name)),
            ),
            xOffset=alt.XOffset("measure:N"),
            y=alt.Y("value:Q", title="% of GDP"),
            color=alt.Color("measure:N", title=None),
            tooltip=[
                alt.Tooltip("group:N", title="Country"),
                alt.Tooltip("measure:N", title="Measure"),
                alt.Tooltip("value:Q", title="% of GDP", format=".2f"),
            ],
        )
        .properties(height=300)
    )
