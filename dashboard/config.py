import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from dashboard.models import METRIC_KEYS

DEFAULT_CONFIG_PATH = Path("config/datasets.yml")
DEFAULT_DATA_DIR = Path("data/latest")


@dataclass(frozen=True)
class DatasetConfig:
    key: str
    file: str
    indicator: str | None = None
    unit: str | None = None
    active: bool = True
    label: str | None = None


@dataclass(frozen=True)
class DashboardConfig:
    datasets: dict[str, DatasetConfig]
    data_dir: Path = DEFAULT_DATA_DIR
    reference_country: str = "AUT"
    reference_name: str = "Austria"


def config_path_from_env() -> Path:
    """DASHBOARD_CONFIG overrides the default config location."""
    return Path(os.environ.get("DASHBOARD_CONFIG", DEFAULT_CONFIG_PATH))


def _dataset_from_entry(key: str, entry) -> DatasetConfig:
    if not isinstance(entry, dict):
        raise ValueError(f"Dataset '{key}' must be a mapping, got {type(entry).__name__}")
    if not entry.get("file"):
        raise ValueError(f"Dataset '{key}' is missing required 'file'")
    return DatasetConfig(
        key=key,
        file=str(entry["file"]),
        indicator=entry.get("indicator"),
        unit=entry.get("unit"),
        active=bool(entry.get("active", True)),
        label=entry.get("label"),
    )


def parse_config(raw: dict) -> DashboardConfig:
    raw = raw or {}
    entries = raw.get("datasets") or {}

    missing = [k for k in METRIC_KEYS if k not in entries]
    if missing:
        raise ValueError(f"Config is missing datasets: {missing}")

    datasets = {key: _dataset_from_entry(key, entry) for key, entry in entries.items()}
    return DashboardConfig(
        datasets=datasets,
        data_dir=Path(raw.get("data_dir", DEFAULT_DATA_DIR)),
        reference_country=str(raw.get("reference_country", "AUT")),
        reference_name=str(raw.get("reference_name", "Austria")),
    )


def load_config(path: Path | str | None = None) -> DashboardConfig:
    """Read the YAML config. Malformed YAML or a non-mapping document raises ValueError."""
    fp = Path(path) if path is not None else config_path_from_env()
    with open(fp, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Config {fp} is not valid YAML: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Config {fp} must be a mapping, got {type(raw).__name__}")
    return parse_config(raw)
