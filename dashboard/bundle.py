import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from dashboard.aggregate import compute_world_average, pick_scatter_year
from dashboard.config import DashboardConfig
from dashboard.loader import load_dataset
from dashboard.models import METRIC_KEYS, DashboardBundle, MetricDataset

logger = logging.getLogger(__name__)

MAX_LOAD_WORKERS: int = len(METRIC_KEYS)


def merge_country_names(primary: dict[str, str], secondary: dict[str, str]) -> dict[str, str]:
    """Names from primary win; secondary only fills codes primary lacks."""
    merged = dict(primary)
    for iso3, name in secondary.items():
        merged.setdefault(iso3, name)
    return merged


def _load_all(config: DashboardConfig, data_dir: Path) -> dict[str, MetricDataset]:
    with ThreadPoolExecutor(max_workers=MAX_LOAD_WORKERS) as pool:
        futures = {
            key: pool.submit(load_dataset, config.datasets[key], data_dir) for key in METRIC_KEYS
        }
        # .result() re-raises the first failure; there is no partial dashboard
        return {key: fut.result() for key, fut in futures.items()}


def load_dashboard_data(config: DashboardConfig, data_dir: Path | str | None = None) -> DashboardBundle:
    data_dir = Path(data_dir) if data_dir is not None else config.data_dir
    datasets = _load_all(config, data_dir)

    metrics = {key: ds.by_iso3 for key, ds in datasets.items()}
    world = {key: compute_world_average(by_iso3) for key, by_iso3 in metrics.items()}
    names = merge_country_names(
        datasets["taxes"].country_name_by_iso3,
        datasets["temperature"].country_name_by_iso3,
    )
    scatter_year = pick_scatter_year(metrics["taxes"], metrics["subsidies"])
    if scatter_year is None:
        logger.warning("Taxes and subsidies share no year; scatter view will be empty")

    return DashboardBundle(
        metrics=metrics,
        world=world,
        country_name_by_iso3=names,
        scatter_year=scatter_year,
    )


def check_reference_country(bundle: DashboardBundle, iso3: str = "AUT") -> list[str]:
    """Metrics with no series for the reference country. Diagnostic only."""
    missing = [key for key, by_iso3 in bundle.metrics.items() if iso3 not in by_iso3]
    for key in missing:
        logger.warning("%s series missing in %s dataset", iso3, key)
    return missing
