from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pandas as pd

from core.errors import EmptyGroupError


OBSERVATION_COLUMNS = ["country", "year", "sex", "obesity"]


@dataclass(frozen=True)
class LoadReport:
    source_rows: int = 0
    kept_rows: int = 0
    dropped_coercion: int = 0
    dropped_missing_obesity: int = 0
    dropped_out_of_domain: int = 0
    dropped_out_of_years: int = 0
    scale: str = "percent"
    missing_by_column: Dict[str, int] = field(default_factory=dict)

    @property
    def dropped_rows(self) -> int:
        return self.source_rows - self.kept_rows


@dataclass(frozen=True)
class DashboardData:
    """Cleaned observations plus the summaries derived from them once.

    Frames held here are shared by every request or session and must be
    treated as read-only; query helpers always return new frames.
    """

    observations: pd.DataFrame
    country_average: pd.DataFrame
    top_countries: Tuple[str, ...]
    country_year_trend: pd.DataFrame
    global_year_trend: pd.DataFrame
    countries: Tuple[str, ...]
    year_bounds: Optional[Tuple[int, int]]
    top_n: int
    report: LoadReport = field(default_factory=LoadReport)

    @property
    def default_country(self) -> Optional[str]:
        if self.top_countries:
            return self.top_countries[0]
        return self.countries[0] if self.countries else None

    @property
    def empty(self) -> bool:
        return self.observations.empty


def _grouped_mean(df: pd.DataFrame, keys: List[str], out_col: str) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=keys + [out_col])
    grouped = df.groupby(keys, sort=False, dropna=False)["obesity"].mean().reset_index(name=out_col)
    bad = grouped[grouped[out_col].isna()]
    if not bad.empty:
        first = bad.iloc[0][keys].tolist()
        raise EmptyGroupError(f"No obesity values to average for {dict(zip(keys, first))}")
    return grouped


def compute_country_average(observations: pd.DataFrame) -> pd.DataFrame:
    """Mean obesity per country over all years and sexes, highest first.

    Ties keep the order in which countries first appear in the table.
    """
    avg = _grouped_mean(observations, ["country"], "avg_obesity")
    if avg.empty:
        return avg
    return avg.sort_values("avg_obesity", ascending=False, kind="mergesort").reset_index(drop=True)


def select_top_countries(country_average: pd.DataFrame, n: int) -> List[str]:
    if n < 0:
        raise ValueError(f"top-N must be non-negative, got {n}")
    if country_average.empty:
        return []
    ordered = country_average.sort_values("avg_obesity", ascending=False, kind="mergesort")
    return [str(c) for c in ordered["country"].head(n).tolist()]


def compute_country_year_trend(observations: pd.DataFrame, countries: List[str]) -> pd.DataFrame:
    subset = observations[observations["country"].isin(list(countries))] if not observations.empty else observations
    trend = _grouped_mean(subset, ["country", "year"], "mean_obesity")
    if trend.empty:
        return trend
    return trend.sort_values(["country", "year"], kind="mergesort").reset_index(drop=True)


def compute_global_year_trend(observations: pd.DataFrame) -> pd.DataFrame:
    trend = _grouped_mean(observations, ["year"], "global_obesity")
    if trend.empty:
        return trend
    return trend.sort_values("year").reset_index(drop=True)


def build_dashboard_data(
    observations: pd.DataFrame,
    *,
    top_n: int,
    report: Optional[LoadReport] = None,
    country_average: Optional[pd.DataFrame] = None,
) -> DashboardData:
    if country_average is None:
        country_average = compute_country_average(observations)
    top_countries = select_top_countries(country_average, top_n)

    countries: Tuple[str, ...] = ()
    year_bounds: Optional[Tuple[int, int]] = None
    if not observations.empty:
        countries = tuple(sorted(str(c) for c in observations["country"].dropna().unique()))
        year_bounds = (int(observations["year"].min()), int(observations["year"].max()))

    return DashboardData(
        observations=observations,
        country_average=country_average,
        top_countries=tuple(top_countries),
        country_year_trend=compute_country_year_trend(observations, top_countries),
        global_year_trend=compute_global_year_trend(observations),
        countries=countries,
        year_bounds=year_bounds,
        top_n=top_n,
        report=report or LoadReport(source_rows=len(observations), kept_rows=len(observations)),
    )
