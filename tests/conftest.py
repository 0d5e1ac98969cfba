from pathlib import Path

import pytest

from dashboard.config import parse_config
from tests.helpers import write_csv

HEADER = "ObjectId,Country,ISO2,ISO3,Indicator,Unit,2010,2011,2012"


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    write_csv(
        tmp_path / "taxes.csv",
        f"""
        {HEADER}
        1,Austria,AT,AUT,Environmental Taxes,Percent of GDP,2.4,2.3,2.2
        2,Germany,DE,DEU,Environmental Taxes,Percent of GDP,1.9,,1.8
        3,Advanced Economies,,AETMP,Environmental Taxes,Percent of GDP,1.0,1.0,1.0
        4,Austria,AT,AUT,Environmental Taxes,Domestic currency,900,910,920
        """,
    )
    write_csv(
        tmp_path / "expenditures.csv",
        f"""
        {HEADER}
        1,Austria,AT,AUT,Expenditure on environment protection,Percent of GDP,1.5,1.6,
        2,Germany,DE,DEU,Expenditure on environment protection,Percent of GDP,1.1,1.2,1.3
        """,
    )
    write_csv(
        tmp_path / "subsidies.csv",
        f"""
        {HEADER}
        1,Austria,AT,AUT,Fossil Fuel Subsidies - Total Implicit and Explicit,Percent of GDP,0.5,,0.7
        2,Germany,DE,DEU,Fossil Fuel Subsidies - Total Implicit and Explicit,Percent of GDP,0.9,0.8,0.7
        """,
    )
    write_csv(
        tmp_path / "disasters.csv",
        f"""
        {HEADER}
        1,Austria,AT,AUT,"Climate related disasters frequency, Number of Disasters: TOTAL",Number of,1,2,
        2,Germany,DE,DEU,"Climate related disasters frequency, Number of Disasters: TOTAL",Number of,3,,5
        """,
    )
    write_csv(
        tmp_path / "temperature.csv",
        f"""
        {HEADER}
        1,"Austria, Republic of",AT,AUT,Temperature change,Degree Celsius,1.1,1.4,1.2
        2,Germany,DE,DEU,Temperature change,Degree Celsius,0.9,1.3,1.0
        3,France,FR,FRA,Temperature change,Degree Celsius,0.8,1.0,1.1
        """,
    )
    return tmp_path


@pytest.fixture
def raw_config() -> dict:
    return {
        "reference_country": "AUT",
        "datasets": {
            "taxes": {"file": "taxes.csv", "indicator": "Environmental Taxes", "unit": "Percent of GDP"},
            "expenditures": {
                "file": "expenditures.csv",
                "indicator": "Expenditure on environment protection",
                "unit": "Percent of GDP",
            },
            "subsidies": {
                "file": "subsidies.csv",
                "indicator": "Fossil Fuel Subsidies - Total Implicit and Explicit",
                "unit": "Percent of GDP",
            },
            "disasters": {
                "file": "disasters.csv",
                "indicator": "Climate related disasters frequency, Number of Disasters: TOTAL",
                "unit": "Number of",
            },
            "temperature": {"file": "temperature.csv", "indicator": "Temperature change", "unit": "Degree Celsius"},
        },
    }


@pytest.fixture
def config(raw_config, data_dir):
    return parse_config({**raw_config, "data_dir": str(data_dir)})
