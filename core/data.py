from __future__ import annotations

import logging
import math
import re
import unicodedata
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from core.config import (
    DASHBOARD_TOP_N,
    SCALE_FACTORS,
    get_data_path,
    get_obesity_scale,
    scale_domain,
)
from core.errors import RowCoercionError, SchemaError
from core.filters import DashboardFilters, filter_observations, normalize_filters
from core.summaries import OBSERVATION_COLUMNS, DashboardData, LoadReport, build_dashboard_data


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Keys are headers after clean_names(); the short names let a cleaned
# re-export load back unchanged.
SOURCE_COLUMNS = {
    "country_region_world": "country",
    "country": "country",
    "year": "year",
    "sex": "sex",
    "prevalence_of_bmi_30_kg_m2_obesity": "obesity",
    "obesity": "obesity",
}

REQUIRED_COLUMNS = list(OBSERVATION_COLUMNS)

INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


def clean_name(value: object) -> str:
    """Normalize one header to lower snake_case (janitor-style)."""
    if value is None:
        return ""
    s = unicodedata.normalize("NFKD", str(value))
    # Accents fold away; other symbols such as "≥" become separators.
    s = "".join(ch if ord(ch) < 128 else " " for ch in s if not unicodedata.combining(ch))
    s = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", s)
    s = re.sub(r"[^0-9a-zA-Z]+", "_", s.lower())
    return s.strip("_")


def clean_names(columns: Iterable[object]) -> List[str]:
    seen: Dict[str, int] = {}
    out: List[str] = []
    for col in columns:
        name = clean_name(col) or "x"
        seen[name] = seen.get(name, 0) + 1
        out.append(name if seen[name] == 1 else f"{name}_{seen[name]}")
    return out


def file_signature(path: Path) -> Tuple[str, float]:
    return str(path.resolve()), path.stat().st_mtime


def drop_duplicate_columns(df: pd.DataFrame) -> pd.DataFrame:
    return df.loc[:, ~df.columns.duplicated()]


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col]
            if isinstance(series, pd.DataFrame):
                series = series.iloc[:, 0]
            series = series.astype("string").str.strip()
            series = series.replace({"nan": pd.NA, "None": pd.NA, "": pd.NA})
            df[col] = series
    return df


def parse_year(value: object) -> int:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        raise RowCoercionError("year is missing")
    try:
        number = float(str(value).strip())
    except ValueError:
        raise RowCoercionError(f"year is not numeric: {value!r}") from None
    if math.isnan(number) or math.isinf(number) or not number.is_integer():
        raise RowCoercionError(f"year is not an integer: {value!r}")
    year = int(number)
    if not INT64_MIN <= year <= INT64_MAX:
        raise RowCoercionError(f"year is out of range: {value!r}")
    return year


def _coerce_years(series: pd.Series) -> pd.Series:
    years: List[Optional[int]] = []
    for idx, value in series.items():
        try:
            years.append(parse_year(value))
        except RowCoercionError as exc:
            logger.debug("Dropping row %s: %s", idx, exc)
            years.append(None)
    return pd.Series(years, index=series.index, dtype="Int64")


def standardize_columns(raw: pd.DataFrame) -> pd.DataFrame:
    df = raw.copy()
    df.columns = clean_names(df.columns)
    df = df.rename(columns=SOURCE_COLUMNS)
    df = drop_duplicate_columns(df)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise SchemaError(f"Missing required column(s) after normalization: {', '.join(missing)}")
    return df[REQUIRED_COLUMNS].copy()


def clean_observations(
    raw: pd.DataFrame,
    *,
    scale: str = "percent",
    min_year: Optional[int] = None,
    max_year: Optional[int] = None,
) -> Tuple[pd.DataFrame, LoadReport]:
    """Normalize headers, coerce types and drop invalid rows.

    Rows are dropped, never repaired: a missing country or non-integer year
    counts as a coercion failure, and obesity must be present and inside the
    scale's domain. Obesity is returned as a percentage.
    """
    lo, hi = scale_domain(scale)
    df = standardize_columns(raw)
    source_rows = len(df)

    df = coerce_str_safe(df, ["country", "sex", "year", "obesity"])
    missing_by_column = {c: int(df[c].isna().sum()) for c in REQUIRED_COLUMNS}

    df["year"] = _coerce_years(df["year"])
    bad = df["country"].isna() | df["year"].isna()
    dropped_coercion = int(bad.sum())
    df = df[~bad].copy()

    in_years = pd.Series(True, index=df.index)
    if min_year is not None:
        in_years &= df["year"] >= int(min_year)
    if max_year is not None:
        in_years &= df["year"] <= int(max_year)
    dropped_out_of_years = int((~in_years).sum())
    df = df[in_years].copy()

    df = numericize(df, ["obesity"])
    missing_obesity = df["obesity"].isna()
    dropped_missing_obesity = int(missing_obesity.sum())
    df = df[~missing_obesity].copy()

    in_domain = df["obesity"].between(lo, hi, inclusive="both")
    dropped_out_of_domain = int((~in_domain).sum())
    df = df[in_domain]

    df = df.assign(
        year=df["year"].astype(int),
        obesity=df["obesity"].astype(float) * SCALE_FACTORS[scale],
    ).reset_index(drop=True)

    report = LoadReport(
        source_rows=source_rows,
        kept_rows=len(df),
        dropped_coercion=dropped_coercion,
        dropped_missing_obesity=dropped_missing_obesity,
        dropped_out_of_domain=dropped_out_of_domain,
        dropped_out_of_years=dropped_out_of_years,
        scale=scale,
        missing_by_column=missing_by_column,
    )
    logger.info(
        "Cleaned %d of %d rows (coercion=%d, missing obesity=%d, out of domain=%d, out of years=%d)",
        report.kept_rows,
        report.source_rows,
        dropped_coercion,
        dropped_missing_obesity,
        dropped_out_of_domain,
        dropped_out_of_years,
    )
    return df, report


def read_source(path: PathLike) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Obesity dataset not found: {path}")
    return pd.read_csv(path, dtype=str, keep_default_na=True)


def load_observations(
    path: Optional[PathLike] = None,
    *,
    scale: Optional[str] = None,
    min_year: Optional[int] = None,
    max_year: Optional[int] = None,
) -> Tuple[pd.DataFrame, LoadReport]:
    path = Path(path) if path is not None else get_data_path()
    scale = scale or get_obesity_scale()
    logger.info("Loading %s (scale=%s)", path, scale)
    return clean_observations(read_source(path), scale=scale, min_year=min_year, max_year=max_year)


def export_cleaned_csv(observations: pd.DataFrame, path: PathLike) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    observations[OBSERVATION_COLUMNS].to_csv(path, index=False)
    logger.info("Wrote %d cleaned rows to %s", len(observations), path)
    return path


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(path_sig: Tuple[str, float], scale: str, top_n: int) -> DashboardData:
    observations, report = load_observations(path_sig[0], scale=scale)
    return build_dashboard_data(observations, top_n=top_n, report=report)


def load_dashboard_data(path: Optional[PathLike] = None, *, top_n: int = DASHBOARD_TOP_N) -> DashboardData:
    path = Path(path) if path is not None else get_data_path()
    if not path.exists():
        raise FileNotFoundError(f"Obesity dataset not found: {path}")
    return _load_dashboard_data_cached(file_signature(path), get_obesity_scale(), top_n)


def clear_cache() -> None:
    _load_dashboard_data_cached.cache_clear()


def prepare_context(filters: dict | DashboardFilters, data: DashboardData) -> Dict[str, object]:
    filt = (
        filters
        if isinstance(filters, DashboardFilters)
        else normalize_filters(
            filters,
            countries=data.countries,
            year_bounds=data.year_bounds,
            default_country=data.default_country,
        )
    )
    country_data = filter_observations(
        data.observations,
        filt.country,
        filt.year_range,
        countries=data.countries,
    )
    return {
        "filters": filt,
        "country_data": country_data,
        "data": data,
    }
