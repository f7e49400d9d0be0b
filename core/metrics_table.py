from __future__ import annotations

import math
from typing import Any, Dict

import pandas as pd

from core.filters import DashboardFilters
from core.metrics_country import records
from core.summaries import OBSERVATION_COLUMNS


def compute_raw_table(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    country_data: pd.DataFrame = ctx.get("country_data", pd.DataFrame())
    total_rows = int(len(country_data))
    total_pages = max(1, math.ceil(total_rows / filters.page_size))
    page = min(filters.page, total_pages)

    payload: Dict[str, Any] = {
        "visible": filters.show_raw,
        "page": page,
        "page_size": filters.page_size,
        "total_rows": total_rows,
        "total_pages": total_pages,
        "columns": list(OBSERVATION_COLUMNS),
        "rows": [],
    }
    if not filters.show_raw:
        return payload

    start = (page - 1) * filters.page_size
    payload["rows"] = records(country_data.iloc[start : start + filters.page_size], OBSERVATION_COLUMNS)
    return payload
