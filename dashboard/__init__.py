"""Core data layer for the Austria climate-policy comparison dashboard."""

from dashboard.accessor import get_series_for_country_or_world, get_value_at_year
from dashboard.aggregate import compute_world_average, pick_scatter_year
from dashboard.bundle import load_dashboard_data
from dashboard.loader import load_wide_series
from dashboard.models import (
    CountryMetric,
    DashboardBundle,
    DataPoint,
    MetricDataset,
    SelectionState,
)
from dashboard.store import SelectionStore

__all__ = [
    "CountryMetric",
    "DashboardBundle",
    "DataPoint",
    "MetricDataset",
    "SelectionState",
    "SelectionStore",
    "compute_world_average",
    "get_series_for_country_or_world",
    "get_value_at_year",
    "load_dashboard_data",
    "load_wide_series",
    "pick_scatter_year",
]
