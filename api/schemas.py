from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from core.config import RAW_PAGE_SIZE


class DashboardFiltersModel(BaseModel):
    country: Optional[str] = None
    # Bounds are validated by core.filters so bad input gets the InvalidRangeError shape.
    year_range: Optional[List[Any]] = None
    show_raw: bool = False
    page: int = 1
    page_size: int = RAW_PAGE_SIZE


class MetaCountriesResponse(BaseModel):
    countries: List[str]
    default_country: Optional[str] = None


class MetaYearsResponse(BaseModel):
    min_year: Optional[int] = None
    max_year: Optional[int] = None


class ErrorResponse(BaseModel):
    error: str
    type: str = Field(default="DashboardError")
