from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import pandas as pd

from core.config import RAW_PAGE_SIZE
from core.errors import EmptyResultError, InvalidRangeError, InvalidSelectionError


@dataclass(frozen=True)
class DashboardFilters:
    country: str
    year_range: Tuple[int, int]
    show_raw: bool = False
    page: int = 1
    page_size: int = RAW_PAGE_SIZE


def _as_year(value: object) -> int:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise InvalidRangeError(f"Year bound is not a number: {value!r}") from None
    if not number.is_integer():
        raise InvalidRangeError(f"Year bound is not an integer: {value!r}")
    return int(number)


def validate_year_range(year_range: Optional[Sequence[object]]) -> Tuple[int, int]:
    if year_range is None or isinstance(year_range, (str, bytes)) or len(year_range) != 2:
        raise InvalidRangeError(f"Year range must be a [lo, hi] pair, got {year_range!r}")
    lo, hi = _as_year(year_range[0]), _as_year(year_range[1])
    if lo > hi:
        raise InvalidRangeError(f"Year range start {lo} is after end {hi}")
    return lo, hi


def validate_country(country: Optional[str], countries: Iterable[str]) -> str:
    name = (country or "").strip()
    if name not in set(countries):
        raise InvalidSelectionError(f"Unknown country: {country!r}")
    return name


def normalize_filters(
    raw: dict,
    *,
    countries: Sequence[str],
    year_bounds: Optional[Tuple[int, int]],
    default_country: Optional[str] = None,
) -> DashboardFilters:
    """Fill in defaults for absent inputs and reject invalid ones.

    An absent country falls back to ``default_country`` and an absent range
    to the full year bounds of the table.
    """
    country = raw.get("country") or default_country
    country = validate_country(country, countries)

    year_range = raw.get("year_range")
    if year_range is None:
        if year_bounds is None:
            raise InvalidRangeError("No years available to build a default range")
        year_range = year_bounds
    lo, hi = validate_year_range(year_range)

    page = raw.get("page", 1)
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    page_size = raw.get("page_size", RAW_PAGE_SIZE)
    try:
        page_size = int(page_size)
    except (TypeError, ValueError):
        page_size = RAW_PAGE_SIZE

    return DashboardFilters(
        country=country,
        year_range=(lo, hi),
        show_raw=bool(raw.get("show_raw", False)),
        page=max(1, page),
        page_size=max(1, min(200, page_size)),
    )


def filter_observations(
    observations: pd.DataFrame,
    country: str,
    year_range: Sequence[object],
    *,
    countries: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """Rows for one country with ``lo <= year <= hi``, in table order.

    ``countries`` defaults to the distinct countries of ``observations``.
    """
    if countries is None:
        countries = observations["country"].dropna().unique().tolist() if not observations.empty else []
    country = validate_country(country, countries)
    lo, hi = validate_year_range(year_range)
    mask = (observations["country"] == country) & observations["year"].between(lo, hi)
    return observations[mask].reset_index(drop=True)


def mean_obesity(subset: pd.DataFrame) -> float:
    values = subset["obesity"].dropna() if "obesity" in subset.columns else pd.Series(dtype=float)
    if values.empty:
        raise EmptyResultError("No observations match the current selection")
    return float(values.mean())
