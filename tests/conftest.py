from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from core.data import clear_cache
from core.summaries import build_dashboard_data


RAW_HEADER = [
    "Country/Region/World",
    "ISO",
    "Sex",
    "Year",
    "Prevalence of BMI≥30 kg/m² (obesity)",
]

RAW_ROWS = [
    ["Turkey", "TUR", "Men", "2000", "22.5"],
    ["Turkey", "TUR", "Women", "2005", "27.0"],
    ["Brazil", "BRA", "Men", "2000", "15.0"],
    ["Brazil", "BRA", "Women", "2000", "150"],
    ["Brazil", "BRA", "Women", "2001", ""],
    ["Chile", "CHL", "Men", "not-a-year", "20.0"],
    ["", "XXX", "Men", "2001", "30.0"],
]


def write_csv(path: Path, header, rows) -> Path:
    frame = pd.DataFrame(rows, columns=header)
    frame.to_csv(path, index=False, encoding="utf-8")
    return path


@pytest.fixture
def raw_csv(tmp_path: Path) -> Path:
    return write_csv(tmp_path / "bmi.csv", RAW_HEADER, RAW_ROWS)


@pytest.fixture
def observations() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "country": ["Turkey", "Turkey", "Brazil", "Chile", "Chile", "Egypt", "Egypt"],
            "year": [2000, 2005, 2000, 2000, 2005, 2000, 2005],
            "sex": ["Men", "Women", "Men", "Men", "Women", "Men", "Women"],
            "obesity": [22.5, 27.0, 15.0, 10.0, 12.0, 30.0, 34.0],
        }
    )


@pytest.fixture
def dashboard_data(observations: pd.DataFrame):
    return build_dashboard_data(observations, top_n=2)


@pytest.fixture(autouse=True)
def _isolated_cache(monkeypatch):
    monkeypatch.delenv("OBESITY_DATA_PATH", raising=False)
    monkeypatch.delenv("OBESITY_SCALE", raising=False)
    clear_cache()
    yield
    clear_cache()
