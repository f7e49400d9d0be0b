from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd

from core.charts import gauge_chart, line_chart, to_vega_spec
from core.errors import EmptyResultError
from core.filters import DashboardFilters, mean_obesity


def records(df: pd.DataFrame, cols: Optional[List[str]] = None) -> List[Dict[str, Any]]:
    if df.empty:
        return []
    out = df[cols] if cols else df
    return out.astype(object).where(out.notna(), None).to_dict(orient="records")


def compute_country_trend(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    country_data: pd.DataFrame = ctx.get("country_data", pd.DataFrame())
    lo, hi = filters.year_range

    plot_df = country_data[["year", "sex", "obesity"]].copy() if not country_data.empty else pd.DataFrame(columns=["year", "sex", "obesity"])
    plot_df["sex"] = plot_df["sex"].astype("string").fillna("Unknown")
    chart = line_chart(plot_df, x="year", y="obesity", title=f"{filters.country} Obesity Trend", color="sex")

    return {
        "country": filters.country,
        "year_range": [lo, hi],
        "rows": int(len(country_data)),
        "empty": bool(country_data.empty),
        "series": records(country_data, ["year", "sex", "obesity"]),
        "chart": to_vega_spec(chart),
    }


def compute_average_indicator(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    country_data: pd.DataFrame = ctx.get("country_data", pd.DataFrame())
    try:
        value: Optional[float] = mean_obesity(country_data)
    except EmptyResultError:
        value = None

    chart = gauge_chart(value, title=f"Average Obesity in {filters.country}")
    return {
        "country": filters.country,
        "year_range": list(filters.year_range),
        "value": value,
        "empty": value is None,
        "chart": to_vega_spec(chart),
    }
