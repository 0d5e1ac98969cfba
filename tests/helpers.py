import textwrap
from pathlib import Path

from dashboard.models import CountryMetric, DataPoint


def write_csv(path: Path, body: str) -> Path:
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def metric(iso3: str, points: dict[int, float], country: str | None = None) -> CountryMetric:
    return CountryMetric(
        iso3=iso3,
        iso2=iso3[:2],
        country=country or iso3,
        indicator="x",
        unit="y",
        series=[DataPoint(year, value) for year, value in sorted(points.items())],
    )
