import re
import sys

import pandas as pd
import pandera as pa
from pandera import Check, Column

from dashboard.config import config_path_from_env, load_config
from dashboard.loader import load_wide_series, read_rows

YEAR_COLUMN = re.compile(r"[0-9]{4}")


def wide_schema() -> pa.DataFrameSchema:
    """Identity columns must exist; every 4-digit year column must coerce to float."""
    return pa.DataFrameSchema(
        {
            "ISO3": Column(str, nullable=True),
            "Country": Column(str, nullable=True),
            "Indicator": Column(str, checks=Check.str_length(min_value=1)),
            "Unit": Column(str, checks=Check.str_length(min_value=1)),
            YEAR_COLUMN.pattern: Column(float, nullable=True, regex=True, required=False),
        },
        coerce=True,
    )


def validate_wide(df: pd.DataFrame) -> pd.DataFrame:
    return wide_schema().validate(df, lazy=True)


def run() -> int:
    cfg = load_config(config_path_from_env())
    failed = []
    for key, spec in cfg.datasets.items():
        fp = cfg.data_dir / spec.file
        if not fp.exists():
            print(f"[WARN] {key}: {fp} not found")
            failed.append(key)
            continue

        df = pd.read_csv(fp, low_memory=False)
        df.columns = [str(c).strip() for c in df.columns]
        try:
            validate_wide(df)
        except pa.errors.SchemaErrors as e:
            print(f"[ERROR] {key}: {len(e.failure_cases)} schema failures")
            print(e.failure_cases.head(10).to_string())
            failed.append(key)
            continue

        dataset = load_wide_series(
            read_rows(fp),
            indicator=spec.indicator,
            unit=spec.unit,
        )
        if not dataset.by_iso3:
            print(f"[WARN] {key}: no country rows match indicator/unit filters")
            failed.append(key)
            continue
        print(f"[OK] {key}: {len(df)} rows, {len(dataset.by_iso3)} countries")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(run())
