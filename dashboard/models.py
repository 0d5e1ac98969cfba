from dataclasses import dataclass, field

METRIC_KEYS = ("taxes", "expenditures", "subsidies", "disasters", "temperature")
INDICATOR_WINDOWS = ("full", "20y", "30y", "35y")


@dataclass(frozen=True)
class DataPoint:
    year: int
    value: float


Series = list[DataPoint]


@dataclass(frozen=True)
class CountryMetric:
    iso3: str
    iso2: str
    country: str
    indicator: str
    unit: str
    series: Series = field(default_factory=list)


@dataclass(frozen=True)
class MetricDataset:
    by_iso3: dict[str, CountryMetric] = field(default_factory=dict)
    country_name_by_iso3: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DashboardBundle:
    """Everything the views read. Treated as immutable once loaded."""

    metrics: dict[str, dict[str, CountryMetric]]
    world: dict[str, Series]
    country_name_by_iso3: dict[str, str]
    scatter_year: int | None


@dataclass(frozen=True)
class SelectionState:
    selected_country_iso3: str | None = None
    selected_year: int | None = None
    indicator_window: str = "full"

    def __post_init__(self):
        if self.indicator_window not in INDICATOR_WINDOWS:
            raise ValueError(
                f"indicator_window must be one of {INDICATOR_WINDOWS}, got {self.indicator_window!r}"
            )
