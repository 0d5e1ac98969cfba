import logging
from pathlib import Path

import streamlit as st

from dashboard.bundle import check_reference_country, load_dashboard_data
from dashboard.config import config_path_from_env, load_config
from dashboard.format import format_percent
from dashboard.models import INDICATOR_WINDOWS, DashboardBundle, SelectionState
from dashboard.store import SelectionStore
from dashboard.views import (
    INDICATOR_BLOCKS,
    REFERENCE_ROLE,
    SCATTER_SELECTION,
    YEAR_SELECTION,
    bar_rows,
    comparison_label,
    comparison_series,
    discrepancy_frame,
    make_bars_chart,
    make_discrepancy_chart,
    make_indicator_chart,
    make_scatter_chart,
    reference_series,
    scatter_points,
    search_options,
    series_pair_frame,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# -------------------------
# Page + constants
# -------------------------
st.set_page_config(page_title="Austria climate-policy comparison", layout="wide")
st.title("Austria climate-policy comparison dashboard")
st.caption("Source: IMF Climate Change Indicators. Taxes, expenditures and subsidies in % of GDP.")

CONFIG_PATH = config_path_from_env()
try:
    CONFIG = load_config(CONFIG_PATH)
except (OSError, ValueError) as e:
    logger.exception("Dashboard config failed to load")
    st.error(f"Could not read dashboard config {CONFIG_PATH}: {e}")
    st.info("Point `DASHBOARD_CONFIG` at a datasets YAML file, e.g. `config/datasets.yml`.")
    st.stop()

REF_ISO3 = CONFIG.reference_country
REF_NAME = CONFIG.reference_name

WINDOW_LABELS = {"full": "Full history", "20y": "Last 20 years", "30y": "Last 30 years", "35y": "Last 35 years"}


@st.cache_data(ttl=7 * 24 * 3600)
def load_bundle(config_path: str) -> DashboardBundle:
    """Load all five datasets once per config; any failed source aborts the load."""
    bundle = load_dashboard_data(load_config(Path(config_path)))
    check_reference_country(bundle, REF_ISO3)
    return bundle


try:
    data = load_bundle(str(CONFIG_PATH))
except (OSError, ValueError) as e:
    logger.exception("Dashboard data failed to load")
    st.error(f"Could not load dashboard data: {e}")
    st.info(f"Place the configured CSV files in `{CONFIG.data_dir}` and check them with `python -m scripts.validate`.")
    st.stop()

if "selection_store" not in st.session_state:
    st.session_state["selection_store"] = SelectionStore(SelectionState())
store: SelectionStore = st.session_state["selection_store"]


# -------------------------
# Selection callbacks (run before the script body on rerun)
# -------------------------
def _first_selected(key: str, param: str, field: str):
    event = st.session_state.get(key)
    if not event:
        return None
    points = (event.get("selection") or {}).get(param) or []
    if isinstance(points, dict):
        values = points.get(field) or []
        return values[0] if values else None
    return points[0].get(field) if points else None


def on_scatter_select():
    iso3 = _first_selected("scatter_chart", SCATTER_SELECTION, "iso3")
    if iso3:
        store.set_state(selected_country_iso3=iso3)


def on_year_select():
    year = _first_selected("discrepancy_chart", YEAR_SELECTION, "year")
    if year is not None:
        store.set_state(selected_year=int(year))


def on_country_pick():
    store.set_state(selected_country_iso3=st.session_state["country_pick"])


def on_window_pick():
    store.set_state(indicator_window=st.session_state["window_pick"])


def on_clear_year():
    store.set_state(selected_year=None)


# -------------------------
# Views
# -------------------------
def sync_controls(state: SelectionState):
    st.session_state["country_pick"] = state.selected_country_iso3
    st.session_state["window_pick"] = state.indicator_window


def make_header_view(slot):
    def render(state: SelectionState):
        comp = comparison_label(data, state.selected_country_iso3)
        with slot.container():
            st.subheader(f"Comparing {REF_NAME} vs {comp}")
            if state.selected_country_iso3:
                st.caption("Tip: click the discrepancy chart to select a year · Reset clears selection")
            else:
                st.caption("Tip: pick a country in the sidebar or click a dot · click the discrepancy chart to select a year")

    return render


def make_scatter_view(slot):
    points = scatter_points(data)

    def render(state: SelectionState):
        with slot.container():
            st.markdown("**Relation between fossil fuel subsidies and environmental taxation**")
            if data.scatter_year is None or points.empty:
                st.info("No data: taxes and subsidies share no common year.")
                return
            chart = make_scatter_chart(points, data.scatter_year, state, REF_ISO3)
            st.altair_chart(chart, use_container_width=True, key="scatter_chart", on_select=on_scatter_select)

    return render


def make_indicators_view(slot):
    def render(state: SelectionState):
        comp = comparison_label(data, state.selected_country_iso3)
        with slot.container():
            st.markdown(f"**Climate indicators ({REF_NAME} vs comparison)**")
            for metric, title, y_title in INDICATOR_BLOCKS:
                frame = series_pair_frame(
                    reference_series(data, metric, REF_ISO3),
                    REF_NAME,
                    comparison_series(data, metric, state.selected_country_iso3),
                    comp,
                    state.indicator_window,
                )
                st.altair_chart(make_indicator_chart(frame, title, y_title, REF_NAME, comp), use_container_width=True)

    return render


def make_discrepancy_view(slot):
    def render(state: SelectionState):
        comp = comparison_label(data, state.selected_country_iso3)
        frame = discrepancy_frame(data, state, REF_ISO3, REF_NAME)
        with slot.container():
            st.markdown("**Taxation–Expenditure discrepancy**")
            if frame.empty:
                st.info("No data for taxes and expenditures in a common year.")
                return
            chart = make_discrepancy_chart(frame, state.selected_year, REF_NAME, comp)
            st.altair_chart(chart, use_container_width=True, key="discrepancy_chart", on_select=on_year_select)

    return render


def make_bars_view(slot):
    def render(state: SelectionState):
        year, frame = bar_rows(data, state, REF_ISO3, REF_NAME)
        with slot.container():
            st.markdown("**Taxes vs Expenditures (detail)**")
            if year is None or frame["value"].isna().all():
                st.info("No data for the selected year.")
                return
            comp = comparison_label(data, state.selected_country_iso3)
            st.altair_chart(make_bars_chart(frame, year, REF_NAME, comp), use_container_width=True)
            ref_rows = frame[frame["role"] == REFERENCE_ROLE].set_index("measure")["value"]
            st.caption(
                f"{REF_NAME} {year}: taxes {format_percent(ref_rows.get('Taxes'))}, "
                f"expenditures {format_percent(ref_rows.get('Expenditures'))}"
            )

    return render


# Controls must reflect store state before the widgets are created.
unsubscribers = [store.subscribe(sync_controls)]

# -------------------------
# Sidebar controls
# -------------------------
header_slot = st.empty()

st.sidebar.header("Selection")
options = search_options(data)
names = dict(options)
st.sidebar.selectbox(
    "Comparison country",
    [None] + [iso3 for iso3, _ in options],
    format_func=lambda iso3: "World average" if iso3 is None else names.get(iso3, iso3),
    key="country_pick",
    on_change=on_country_pick,
)
st.sidebar.radio(
    "Indicator window",
    list(INDICATOR_WINDOWS),
    format_func=WINDOW_LABELS.get,
    key="window_pick",
    on_change=on_window_pick,
)
if store.get_state().selected_year is not None:
    st.sidebar.button(f"Clear year ({store.get_state().selected_year})", on_click=on_clear_year)
st.sidebar.button("Reset", on_click=store.reset)


top_left, top_right = st.columns(2)
bottom_left, bottom_right = st.columns(2)

views = [
    make_header_view(header_slot),
    make_scatter_view(top_left.empty()),
    make_indicators_view(top_right.empty()),
    make_discrepancy_view(bottom_left.empty()),
    make_bars_view(bottom_right.empty()),
]
unsubscribers += [store.subscribe(render) for render in views]

st.caption("Units: taxes/expenditures/subsidies shown as % of GDP (for cross-country comparability).")

# Views are rebuilt on every Streamlit run; drop this run's subscriptions.
for unsubscribe in unsubscribers:
    unsubscribe()
