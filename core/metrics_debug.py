from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

from core.filters import DashboardFilters
from core.summaries import DashboardData


def compute_debug(data: DashboardData, filters: Optional[DashboardFilters] = None) -> Dict[str, Any]:
    report = data.report
    return {
        "filters": asdict(filters) if filters is not None else None,
        "load_report": {**asdict(report), "dropped_rows": report.dropped_rows},
        "row_counts": {
            "observations": int(len(data.observations)),
            "country_average": int(len(data.country_average)),
            "country_year_trend": int(len(data.country_year_trend)),
            "global_year_trend": int(len(data.global_year_trend)),
        },
        "countries": len(data.countries),
        "year_bounds": list(data.year_bounds) if data.year_bounds else None,
        "top_countries": list(data.top_countries),
    }
